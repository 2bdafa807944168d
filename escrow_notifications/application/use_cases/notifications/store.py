"""In-memory notification store observed by the UI."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable

from escrow_notifications.domain.entities import Notification

logger = logging.getLogger(__name__)

StoreListener = Callable[["NotificationStore"], None]
ReadReceiptSender = Callable[[str], None]


class DuplicatePolicy(str, Enum):
    """What :meth:`NotificationStore.insert` does with an id already stored."""

    ALLOW = "allow"
    REPLACE = "replace"
    IGNORE = "ignore"


class NotificationStore:
    """Ordered notifications, most recent insertion first, plus unread accounting.

    Every operation is synchronous and never raises. Listeners registered with
    :meth:`subscribe` run after each mutation that changed the state; read
    receipts are handed to ``read_receipts`` and their outcome is ignored.
    """

    def __init__(
        self,
        *,
        duplicate_policy: DuplicatePolicy = DuplicatePolicy.ALLOW,
        read_receipts: ReadReceiptSender | None = None,
    ) -> None:
        self._items: list[Notification] = []
        self._listeners: list[StoreListener] = []
        self._duplicate_policy = DuplicatePolicy(duplicate_policy)
        self._read_receipts = read_receipts

    @property
    def duplicate_policy(self) -> DuplicatePolicy:
        return self._duplicate_policy

    @property
    def notifications(self) -> tuple[Notification, ...]:
        """Read-only snapshot of the stored notifications."""

        return tuple(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items if not item.read)

    def __len__(self) -> int:
        return len(self._items)

    def insert(self, notification: Notification) -> bool:
        """Prepend ``notification``; return ``False`` when the policy dropped it."""

        policy = self._duplicate_policy
        if policy is not DuplicatePolicy.ALLOW:
            exists = any(item.id == notification.id for item in self._items)
            if exists and policy is DuplicatePolicy.IGNORE:
                logger.debug("Ignoring duplicate notification %s", notification.id)
                return False
            if exists:
                self._items = [item for item in self._items if item.id != notification.id]

        self._items.insert(0, notification)
        self._emit_change()
        return True

    def mark_as_read(self, notification_id: str) -> None:
        """Flag every notification with ``notification_id`` as read."""

        if self._mark_where(lambda item: item.id == notification_id):
            self._emit_change()
        self._send_read_receipt(notification_id)

    def mark_all_as_read(self) -> None:
        """Flag every stored notification as read."""

        unread_ids: list[str] = []
        for item in self._items:
            if not item.read and item.id not in unread_ids:
                unread_ids.append(item.id)
        if not unread_ids:
            return

        self._mark_where(lambda item: True)
        self._emit_change()
        for notification_id in unread_ids:
            self._send_read_receipt(notification_id)

    def clear(self) -> None:
        if not self._items:
            return
        self._items = []
        self._emit_change()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _mark_where(self, predicate: Callable[[Notification], bool]) -> bool:
        # In place, so the list is never rebuilt from a stale pass.
        changed = False
        for index in range(len(self._items)):
            item = self._items[index]
            if not item.read and predicate(item):
                self._items[index] = item.as_read()
                changed = True
        return changed

    def _emit_change(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Notification store listener %r failed", listener)

    def _send_read_receipt(self, notification_id: str) -> None:
        if self._read_receipts is None:
            return
        try:
            self._read_receipts(notification_id)
        except Exception as exc:
            logger.warning(
                "Could not signal notification %s as read: %s", notification_id, exc
            )


__all__ = ["DuplicatePolicy", "NotificationStore", "ReadReceiptSender", "StoreListener"]
