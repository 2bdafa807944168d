"""In-memory transport used by the notification tests.

Unlike :class:`JsonSocketTransport` it keeps every handler registered for a
kind, the way socket.io listeners stack, so a leaked registration shows up
as a duplicated notification.
"""

from __future__ import annotations

from collections import defaultdict


class RecordingTransport:
    def __init__(self, *, fail_receipts: bool = False) -> None:
        self.handlers = defaultdict(list)
        self.off_calls = []
        self.read_ids = []
        self._fail_receipts = fail_receipts

    def on(self, kind, handler) -> None:
        self.handlers[kind].append(handler)

    def off(self, kind) -> None:
        self.off_calls.append(kind)
        self.handlers.pop(kind, None)

    def emit(self, kind, payload) -> None:
        for handler in list(self.handlers.get(kind, [])):
            handler(payload)

    def handler_count(self) -> int:
        return sum(len(handlers) for handlers in self.handlers.values())

    async def mark_notification_as_read(self, notification_id: str) -> None:
        if self._fail_receipts:
            raise ConnectionError("socket closed")
        self.read_ids.append(notification_id)


class RecordingReceiptPublisher:
    def __init__(self) -> None:
        self.calls = []

    def dispatch(self, transport, notification_id: str) -> None:
        self.calls.append((transport, notification_id))
