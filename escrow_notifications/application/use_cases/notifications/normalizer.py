"""Translate raw transport payloads into canonical notifications.

Every function in this module is pure apart from reading the clock and the
settings: it takes the payload delivered for one event kind and returns
exactly one :class:`Notification`. Payloads coming from the wire are not
trusted; missing or malformed fields are replaced with neutral values so an
event is never dropped because of its shape.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any, Callable

from escrow_notifications.config import get_settings
from escrow_notifications.domain.entities import (
    EventKind,
    Notification,
    NotificationType,
    coerce_notification_type,
)
from escrow_notifications.utils import now_in_app_timezone, parse_event_timestamp

logger = logging.getLogger(__name__)


def normalize_notification(payload: Any) -> Notification:
    """Pass a server-built notification through, filling gaps."""

    data = _as_mapping(payload, EventKind.NOTIFICATION)
    notification_id = _text(data, "id") or str(uuid.uuid4())
    return Notification(
        id=notification_id,
        user_id=_text(data, "userId", "user_id") or None,
        type=coerce_notification_type(data.get("type")),
        title=_text(data, "title"),
        message=_text(data, "message"),
        read=bool(data.get("read", False)),
        created_at=_timestamp_or_now(data, "createdAt", "created_at"),
        related_id=_text(data, "relatedId", "related_id") or None,
    )


def normalize_order_status(payload: Any) -> Notification:
    """Build the notification for an ``order:status-updated`` event."""

    data = _as_mapping(payload, EventKind.ORDER_STATUS_UPDATED)
    order_id = _text(data, "orderId", "order_id")
    status = _text(data, "status")
    return Notification(
        id=f"order-{order_id}",
        user_id=None,
        type=NotificationType.ORDER_STATUS,
        title="Order Status Updated",
        message=f"Your order status changed to: {status}",
        created_at=_timestamp_or_now(data, "timestamp"),
        related_id=order_id,
    )


def normalize_payment(payload: Any, *, currency: str | None = None) -> Notification:
    """Build the notification for a ``payment:updated`` event.

    The creation time is always the time of receipt; payment events do not
    carry a timestamp.
    """

    data = _as_mapping(payload, EventKind.PAYMENT_UPDATED)
    transaction_id = _text(data, "transactionId", "transaction_id")
    amount = _format_amount(data.get("amount"))
    status = _text(data, "status").lower()
    label = currency or get_settings().payment_currency
    return Notification(
        id=f"payment-{transaction_id}",
        user_id=None,
        type=NotificationType.PAYMENT,
        title="Payment Update",
        message=f"Payment of {label} {amount} {status}",
        created_at=now_in_app_timezone(),
        related_id=transaction_id,
    )


def normalize_dispute(payload: Any) -> Notification:
    """Build the notification for a ``dispute:updated`` event."""

    data = _as_mapping(payload, EventKind.DISPUTE_UPDATED)
    dispute_id = _text(data, "disputeId", "dispute_id")
    status = _text(data, "status")
    resolution = _text(data, "resolution")
    message = f"Dispute status changed to: {status}"
    if resolution:
        message = f"{message}. Resolution: {resolution}"
    return Notification(
        id=f"dispute-{dispute_id}",
        user_id=None,
        type=NotificationType.DISPUTE,
        title="Dispute Update",
        message=message,
        created_at=now_in_app_timezone(),
        related_id=dispute_id,
    )


def normalize_delivery(payload: Any) -> Notification:
    """Build the notification for a ``delivery:updated`` event."""

    data = _as_mapping(payload, EventKind.DELIVERY_UPDATED)
    order_id = _text(data, "orderId", "order_id")
    location = _text(data, "location")
    estimated_time = _text(data, "estimatedTime", "estimated_time")
    message = f"Your order is at {location}"
    if estimated_time:
        message = f"{message}, estimated arrival: {estimated_time}"
    return Notification(
        id=f"delivery-{order_id}",
        user_id=None,
        type=NotificationType.DELIVERY,
        title="Delivery Update",
        message=message,
        created_at=now_in_app_timezone(),
        related_id=order_id,
    )


_NORMALIZERS: dict[EventKind, Callable[[Any], Notification]] = {
    EventKind.NOTIFICATION: normalize_notification,
    EventKind.ORDER_STATUS_UPDATED: normalize_order_status,
    EventKind.PAYMENT_UPDATED: normalize_payment,
    EventKind.DISPUTE_UPDATED: normalize_dispute,
    EventKind.DELIVERY_UPDATED: normalize_delivery,
}


def normalize_event(kind: EventKind, payload: Any) -> Notification:
    """Dispatch ``payload`` to the normalizer registered for ``kind``."""

    return _NORMALIZERS[kind](payload)


def _as_mapping(payload: Any, kind: EventKind) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        return payload
    logger.debug("Payload for %s is not a mapping: %r", kind.value, payload)
    return {}


def _text(data: Mapping[str, Any], *keys: str) -> str:
    """Return the first present value among ``keys`` as a string."""

    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        return str(value)
    return ""


def _timestamp_or_now(data: Mapping[str, Any], *keys: str):
    for key in keys:
        if key not in data:
            continue
        parsed = parse_event_timestamp(data[key])
        if parsed is not None:
            return parsed
        logger.debug("Ignoring unparseable timestamp %r", data[key])
    return now_in_app_timezone()


def _format_amount(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


__all__ = [
    "normalize_delivery",
    "normalize_dispute",
    "normalize_event",
    "normalize_notification",
    "normalize_order_status",
    "normalize_payment",
]
