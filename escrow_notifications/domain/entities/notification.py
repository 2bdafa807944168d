"""Domain entity representing a canonical client-side notification."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum


class NotificationType(str, Enum):
    """Categories produced by the normalizer."""

    ORDER_STATUS = "ORDER_STATUS"
    PAYMENT = "PAYMENT"
    DISPUTE = "DISPUTE"
    DELIVERY = "DELIVERY"
    GENERAL = "GENERAL"


def coerce_notification_type(value: object) -> NotificationType | str:
    """Return the enum member for ``value`` or the verbatim string.

    Notifications pushed as-is by the server may carry categories the client
    does not know about (``ITEM_SHIPPED``, ``FUNDS_RELEASED``...); those are
    kept untouched instead of being collapsed into ``GENERAL``.
    """

    if isinstance(value, NotificationType):
        return value
    text = str(value).strip() if value is not None else ""
    if not text:
        return NotificationType.GENERAL
    try:
        return NotificationType(text)
    except ValueError:
        return text


@dataclass(frozen=True)
class Notification:
    """Single normalized notification consumed by every UI component."""

    id: str
    type: NotificationType | str
    title: str
    message: str
    created_at: datetime
    user_id: str | None = None
    read: bool = False
    related_id: str | None = None

    @property
    def type_name(self) -> str:
        if isinstance(self.type, NotificationType):
            return self.type.value
        return self.type

    def as_read(self) -> "Notification":
        """Return a copy flagged as read (``self`` when already read)."""

        if self.read:
            return self
        return replace(self, read=True)


__all__ = ["Notification", "NotificationType", "coerce_notification_type"]
