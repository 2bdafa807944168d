"""Finite set of push events understood by the notification layer."""

from __future__ import annotations

from enum import Enum
from typing import Final


class EventKind(str, Enum):
    """Event kinds delivered by the transport, valued by their wire name."""

    NOTIFICATION = "notification:new"
    ORDER_STATUS_UPDATED = "order:status-updated"
    PAYMENT_UPDATED = "payment:updated"
    DISPUTE_UPDATED = "dispute:updated"
    DELIVERY_UPDATED = "delivery:updated"

    @classmethod
    def from_wire(cls, name: object) -> "EventKind | None":
        """Return the kind matching the wire ``name`` or ``None`` when unknown."""

        try:
            return cls(name)
        except ValueError:
            return None


NOTIFICATION_READ_EVENT: Final[str] = "notification:read"


__all__ = ["EventKind", "NOTIFICATION_READ_EVENT"]
