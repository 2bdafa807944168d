"""Utility helpers to push store changes and read receipts without blocking."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable

from anyio import from_thread

from escrow_notifications.domain.entities import Notification

from .manager import NotificationConnectionManager, notification_manager

logger = logging.getLogger(__name__)


class _Scheduler:
    """Run coroutines on the current loop, or through anyio from worker threads."""

    def __init__(self) -> None:
        self._pending: set[asyncio.Task[Any]] = set()

    def schedule(self, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            try:
                from_thread.run(func, *args)
            except RuntimeError as exc:
                logger.debug("No event loop available to run %r: %s", func, exc)
        else:
            task = loop.create_task(func(*args))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)


class ReadReceiptPublisher:
    """Tell the transport a notification was read, fire-and-forget.

    Delivery failures are logged and never reach the caller; the local read
    flag has already flipped by the time a receipt is scheduled.
    """

    def __init__(self) -> None:
        self._scheduler = _Scheduler()

    def dispatch(self, transport: Any, notification_id: str) -> None:
        """Schedule the read receipt for ``notification_id`` on ``transport``."""

        self._scheduler.schedule(self._deliver, transport, notification_id)

    @staticmethod
    async def _deliver(transport: Any, notification_id: str) -> None:
        try:
            result = transport.mark_notification_as_read(notification_id)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            logger.warning(
                "Read receipt for notification %s was not delivered: %s",
                notification_id,
                exc,
            )


class SnapshotPublisher:
    """Store listener broadcasting the full notification list to UI sockets."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._scheduler = _Scheduler()

    def __call__(self, store: Any) -> None:
        self.dispatch(store.notifications, store.unread_count)

    def dispatch(self, notifications: Iterable[Notification], unread_count: int) -> None:
        """Schedule a snapshot message for every connected UI socket."""

        if not len(self._manager):
            return
        message = {
            "type": "snapshot",
            "data": serialize_snapshot(notifications, unread_count),
        }
        self._scheduler.schedule(self._manager.broadcast, message)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON representation of ``notification``."""

    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "type": notification.type_name,
        "title": notification.title,
        "message": notification.message,
        "read": notification.read,
        "created_at": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "related_id": notification.related_id,
    }


def serialize_snapshot(
    notifications: Iterable[Notification], unread_count: int
) -> dict[str, Any]:
    return {
        "notifications": [serialize_notification(item) for item in notifications],
        "unread_count": unread_count,
    }


read_receipt_publisher = ReadReceiptPublisher()
snapshot_publisher = SnapshotPublisher(notification_manager)


__all__ = [
    "ReadReceiptPublisher",
    "SnapshotPublisher",
    "read_receipt_publisher",
    "serialize_notification",
    "serialize_snapshot",
    "snapshot_publisher",
]
