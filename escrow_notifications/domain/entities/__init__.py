"""Domain entities exposed by the application."""

from .event_kind import NOTIFICATION_READ_EVENT, EventKind
from .notification import Notification, NotificationType, coerce_notification_type

__all__ = [
    "EventKind",
    "NOTIFICATION_READ_EVENT",
    "Notification",
    "NotificationType",
    "coerce_notification_type",
]
