"""Event transport adapter over a JSON websocket connection."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Protocol

from escrow_notifications.domain.entities import NOTIFICATION_READ_EVENT, EventKind

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class JsonSocket(Protocol):
    async def receive_json(self) -> Any:
        ...

    async def send_json(self, data: Any) -> None:
        ...


class JsonSocketTransport:
    """Deliver ``{"event": ..., "data": ...}`` frames to one handler per kind.

    The adapter does not open, authenticate or reconnect the socket; whoever
    owns the connection awaits :meth:`run` for as long as it stays open.
    Frames are dispatched one at a time, so handlers never overlap.
    """

    def __init__(self, socket: JsonSocket) -> None:
        self._socket = socket
        self._handlers: Dict[EventKind, EventHandler] = {}

    def on(self, kind: EventKind, handler: EventHandler) -> None:
        self._handlers[EventKind(kind)] = handler

    def off(self, kind: EventKind) -> None:
        self._handlers.pop(EventKind(kind), None)

    def has_handler(self, kind: EventKind) -> bool:
        return EventKind(kind) in self._handlers

    def on_notification(self, handler: EventHandler) -> None:
        self.on(EventKind.NOTIFICATION, handler)

    def on_order_status_update(self, handler: EventHandler) -> None:
        self.on(EventKind.ORDER_STATUS_UPDATED, handler)

    def on_payment_update(self, handler: EventHandler) -> None:
        self.on(EventKind.PAYMENT_UPDATED, handler)

    def on_dispute_update(self, handler: EventHandler) -> None:
        self.on(EventKind.DISPUTE_UPDATED, handler)

    def on_delivery_update(self, handler: EventHandler) -> None:
        self.on(EventKind.DELIVERY_UPDATED, handler)

    async def mark_notification_as_read(self, notification_id: str) -> None:
        await self._socket.send_json(
            {"event": NOTIFICATION_READ_EVENT, "data": {"notificationId": notification_id}}
        )

    def dispatch_frame(self, frame: Any) -> bool:
        """Route one decoded frame; return ``True`` when a handler ran."""

        if not isinstance(frame, dict):
            logger.debug("Skipping malformed transport frame: %r", frame)
            return False

        kind = EventKind.from_wire(frame.get("event"))
        if kind is None:
            logger.debug("Skipping unknown transport event %r", frame.get("event"))
            return False

        handler = self._handlers.get(kind)
        if handler is None:
            return False

        try:
            handler(frame.get("data"))
        except Exception:
            logger.exception("Handler for %s failed", kind.value)
        return True

    async def run(self) -> None:
        """Read frames until the socket raises (typically on disconnect)."""

        while True:
            try:
                frame = await self._socket.receive_json()
            except ValueError as exc:
                logger.debug("Skipping undecodable transport frame: %s", exc)
                continue
            self.dispatch_frame(frame)


__all__ = ["JsonSocket", "JsonSocketTransport"]
