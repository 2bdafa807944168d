"""Explicitly scoped owner of the notification store and its subscriptions."""

from __future__ import annotations

import logging
from typing import Callable

from escrow_notifications.config import Settings, get_settings
from escrow_notifications.domain.entities import EventKind, Notification
from escrow_notifications.infrastructure.notifications import (
    ReadReceiptPublisher,
    read_receipt_publisher,
)

from .store import DuplicatePolicy, NotificationStore, StoreListener
from .subscriptions import (
    DEFAULT_EVENT_KINDS,
    EventTransport,
    SubscriptionManager,
    SubscriptionState,
)

logger = logging.getLogger(__name__)


class NotificationContextError(RuntimeError):
    """Raised when the notification API is used outside an open provider."""


class NotificationContext:
    """Consumer-facing API bound to one open :class:`NotificationProvider`."""

    def __init__(self, provider: "NotificationProvider") -> None:
        self._provider = provider

    @property
    def notifications(self) -> tuple[Notification, ...]:
        return self._store().notifications

    @property
    def unread_count(self) -> int:
        return self._store().unread_count

    def add_notification(self, notification: Notification) -> bool:
        return self._store().insert(notification)

    def mark_as_read(self, notification_id: str) -> None:
        self._store().mark_as_read(notification_id)

    def mark_all_as_read(self) -> None:
        self._store().mark_all_as_read()

    def clear_notifications(self) -> None:
        self._store().clear()

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        return self._store().subscribe(listener)

    def _store(self) -> NotificationStore:
        return self._provider._require_open()


class NotificationProvider:
    """Own one store and one subscription manager for a defined lifetime.

    The provider starts closed. :meth:`open` makes :attr:`context` available,
    :meth:`close` unregisters every transport handler, empties the store and
    is terminal.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        receipt_publisher: ReadReceiptPublisher | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._receipt_publisher = receipt_publisher or read_receipt_publisher
        self._store = NotificationStore(
            duplicate_policy=DuplicatePolicy(settings.notification_duplicate_policy),
            read_receipts=self._send_read_receipt,
        )
        kinds = tuple(EventKind) if settings.subscribe_extended_events else DEFAULT_EVENT_KINDS
        self._subscriptions = SubscriptionManager(self._store, kinds=kinds)
        self._context = NotificationContext(self)
        self._is_open = False
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def subscribed_kinds(self) -> tuple[EventKind, ...]:
        return self._subscriptions.kinds

    @property
    def subscription_state(self) -> SubscriptionState:
        return self._subscriptions.state

    @property
    def context(self) -> NotificationContext:
        """Return the consumer API, failing fast when the provider is not open."""

        self._require_open()
        return self._context

    def open(self) -> "NotificationProvider":
        if self._closed:
            raise NotificationContextError("NotificationProvider was already closed")
        self._is_open = True
        return self

    def close(self) -> None:
        if self._closed:
            return
        self._subscriptions.close()
        self._store.clear()
        self._is_open = False
        self._closed = True

    def attach_transport(self, transport: EventTransport | None) -> None:
        """Route events from ``transport`` into the store, replacing any previous one."""

        self._require_open()
        self._subscriptions.bind(transport)

    def detach_transport(self, transport: EventTransport | None = None) -> None:
        """Stop listening; with ``transport`` given, only if it is the bound one."""

        if not self._is_open:
            return
        if transport is not None and transport is not self._subscriptions.transport:
            return
        self._subscriptions.unbind()

    def __enter__(self) -> "NotificationProvider":
        return self.open()

    def __exit__(self, *_exc_info: object) -> None:
        self.close()

    def _require_open(self) -> NotificationStore:
        if not self._is_open:
            raise NotificationContextError(
                "Notification API used outside an open NotificationProvider: "
                "not initialized"
            )
        return self._store

    def _send_read_receipt(self, notification_id: str) -> None:
        transport = self._subscriptions.transport
        if transport is None:
            logger.debug(
                "No transport bound; read receipt for %s not sent", notification_id
            )
            return
        self._receipt_publisher.dispatch(transport, notification_id)


__all__ = ["NotificationContext", "NotificationContextError", "NotificationProvider"]
