"""Notification aggregation: normalization, storage and subscription lifecycle."""

from .context import NotificationContext, NotificationContextError, NotificationProvider
from .normalizer import (
    normalize_delivery,
    normalize_dispute,
    normalize_event,
    normalize_notification,
    normalize_order_status,
    normalize_payment,
)
from .store import DuplicatePolicy, NotificationStore
from .subscriptions import (
    DEFAULT_EVENT_KINDS,
    EventHandler,
    EventTransport,
    SubscriptionClosedError,
    SubscriptionManager,
    SubscriptionState,
)

__all__ = [
    "DEFAULT_EVENT_KINDS",
    "DuplicatePolicy",
    "EventHandler",
    "EventTransport",
    "NotificationContext",
    "NotificationContextError",
    "NotificationProvider",
    "NotificationStore",
    "SubscriptionClosedError",
    "SubscriptionManager",
    "SubscriptionState",
    "normalize_delivery",
    "normalize_dispute",
    "normalize_event",
    "normalize_notification",
    "normalize_order_status",
    "normalize_payment",
]
