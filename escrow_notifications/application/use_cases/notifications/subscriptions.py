"""Bind transport event kinds to store mutations for a bounded lifetime."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Iterable, Protocol

from escrow_notifications.domain.entities import EventKind, Notification

from .normalizer import normalize_event
from .store import NotificationStore

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]

# Kinds the marketplace server pushes today. Dispute and delivery updates are
# only routed when asked for explicitly.
DEFAULT_EVENT_KINDS: tuple[EventKind, ...] = (
    EventKind.NOTIFICATION,
    EventKind.ORDER_STATUS_UPDATED,
    EventKind.PAYMENT_UPDATED,
)


class EventTransport(Protocol):
    """Persistent connection able to deliver push events by kind."""

    def on(self, kind: EventKind, handler: EventHandler) -> None:
        ...

    def off(self, kind: EventKind) -> None:
        ...

    async def mark_notification_as_read(self, notification_id: str) -> None:
        ...


class SubscriptionState(str, Enum):
    NO_TRANSPORT = "no_transport"
    SUBSCRIBED = "subscribed"
    UNSUBSCRIBED = "unsubscribed"


class SubscriptionClosedError(RuntimeError):
    """Raised when binding a transport after the manager was closed."""


class SubscriptionManager:
    """Register one handler per event kind and route events into the store.

    Handlers remember the generation they were registered for; once the
    manager unbinds or closes, the generation moves on and late deliveries
    are discarded instead of mutating the store.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        kinds: Iterable[EventKind] = DEFAULT_EVENT_KINDS,
        normalize: Callable[[EventKind, Any], Notification] = normalize_event,
    ) -> None:
        self._store = store
        self._kinds = tuple(dict.fromkeys(kinds))
        self._normalize = normalize
        self._transport: EventTransport | None = None
        self._registered: list[EventKind] = []
        self._generation = 0
        self._state = SubscriptionState.NO_TRANSPORT
        self._closed = False

    @property
    def kinds(self) -> tuple[EventKind, ...]:
        return self._kinds

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def transport(self) -> EventTransport | None:
        return self._transport

    @property
    def closed(self) -> bool:
        return self._closed

    def bind(self, transport: EventTransport | None) -> None:
        """Subscribe to ``transport``, releasing any previous one first."""

        if self._closed:
            raise SubscriptionClosedError("Subscription manager is closed")
        if transport is not None and transport is self._transport:
            return

        self._release()
        if transport is None:
            return

        self._transport = transport
        generation = self._generation
        for kind in self._kinds:
            transport.on(kind, self._make_handler(kind, generation))
            self._registered.append(kind)
        self._state = SubscriptionState.SUBSCRIBED
        logger.debug(
            "Subscribed to %d event kinds (generation %d)", len(self._kinds), generation
        )

    def unbind(self) -> None:
        """Release the current transport, keeping the manager reusable."""

        if self._closed:
            return
        self._release()

    def close(self) -> None:
        """Release the transport for good; further binds are rejected."""

        if self._closed:
            return
        self._release()
        self._state = SubscriptionState.UNSUBSCRIBED
        self._closed = True

    def _release(self) -> None:
        transport = self._transport
        self._generation += 1
        if transport is None:
            return

        for kind in self._registered:
            try:
                transport.off(kind)
            except Exception as exc:
                logger.warning("Could not unregister %s handler: %s", kind.value, exc)
        self._registered = []
        self._transport = None
        self._state = SubscriptionState.UNSUBSCRIBED

    def _make_handler(self, kind: EventKind, generation: int) -> EventHandler:
        def _handle(payload: Any) -> None:
            if self._closed or generation != self._generation:
                logger.debug("Discarding %s event delivered after teardown", kind.value)
                return
            self._store.insert(self._normalize(kind, payload))

        return _handle


__all__ = [
    "DEFAULT_EVENT_KINDS",
    "EventHandler",
    "EventTransport",
    "SubscriptionClosedError",
    "SubscriptionManager",
    "SubscriptionState",
]
