"""Tests for the in-memory notification store."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from escrow_notifications.application.use_cases.notifications import (  # noqa: E402
    DuplicatePolicy,
    NotificationStore,
)
from escrow_notifications.domain.entities import Notification, NotificationType  # noqa: E402

_BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _notification(notification_id: str, *, minutes: int = 0, read: bool = False) -> Notification:
    return Notification(
        id=notification_id,
        type=NotificationType.GENERAL,
        title="Title",
        message="Message",
        created_at=_BASE_TIME + timedelta(minutes=minutes),
        read=read,
    )


def test_insert_prepends_regardless_of_created_at():
    store = NotificationStore()
    store.insert(_notification("old", minutes=60))
    store.insert(_notification("older", minutes=0))
    store.insert(_notification("newest", minutes=-30))

    assert [item.id for item in store.notifications] == ["newest", "older", "old"]


def test_unread_count_tracks_read_flags():
    store = NotificationStore()
    store.insert(_notification("a"))
    store.insert(_notification("b", read=True))
    store.insert(_notification("c"))

    assert store.unread_count == 2
    store.mark_as_read("a")
    assert store.unread_count == 1
    assert store.unread_count == sum(1 for item in store.notifications if not item.read)


def test_mark_as_read_applies_to_every_duplicate():
    store = NotificationStore()
    store.insert(_notification("order-1"))
    store.insert(_notification("order-1"))
    store.insert(_notification("order-2"))

    store.mark_as_read("order-1")

    flags = {(item.id, item.read) for item in store.notifications}
    assert flags == {("order-1", True), ("order-2", False)}
    assert store.unread_count == 1


def test_mark_as_read_is_idempotent():
    store = NotificationStore()
    store.insert(_notification("a"))
    store.insert(_notification("b"))

    store.mark_as_read("a")
    once = store.notifications
    store.mark_as_read("a")

    assert store.notifications == once


def test_mark_as_read_signals_receipt_even_for_unknown_ids():
    receipts = []
    store = NotificationStore(read_receipts=receipts.append)
    store.insert(_notification("a"))

    store.mark_as_read("a")
    store.mark_as_read("missing")

    assert receipts == ["a", "missing"]


def test_failing_receipt_does_not_block_the_local_flag(caplog):
    def _broken(_notification_id: str) -> None:
        raise ConnectionError("offline")

    store = NotificationStore(read_receipts=_broken)
    store.insert(_notification("a"))

    with caplog.at_level("WARNING"):
        store.mark_as_read("a")

    assert store.notifications[0].read is True
    assert "offline" in caplog.text


def test_mark_all_as_read_sends_one_receipt_per_distinct_unread_id():
    receipts = []
    store = NotificationStore(read_receipts=receipts.append)
    store.insert(_notification("a"))
    store.insert(_notification("a"))
    store.insert(_notification("b", read=True))
    store.insert(_notification("c"))

    store.mark_all_as_read()

    assert store.unread_count == 0
    assert receipts == ["c", "a"]


def test_clear_empties_the_store_and_is_idempotent():
    store = NotificationStore()
    store.insert(_notification("a"))

    store.clear()
    store.clear()

    assert store.notifications == ()
    assert store.unread_count == 0
    assert len(store) == 0


def test_allow_policy_keeps_duplicates():
    store = NotificationStore(duplicate_policy=DuplicatePolicy.ALLOW)

    assert store.insert(_notification("order-1"))
    assert store.insert(_notification("order-1"))
    assert [item.id for item in store.notifications] == ["order-1", "order-1"]


def test_replace_policy_moves_the_id_to_the_front():
    store = NotificationStore(duplicate_policy=DuplicatePolicy.REPLACE)
    store.insert(_notification("order-1", read=True))
    store.insert(_notification("order-2"))

    store.insert(_notification("order-1"))

    assert [item.id for item in store.notifications] == ["order-1", "order-2"]
    assert store.notifications[0].read is False


def test_ignore_policy_drops_the_incoming_duplicate():
    store = NotificationStore(duplicate_policy="ignore")
    first = _notification("order-1", minutes=1)
    store.insert(first)

    assert store.insert(_notification("order-1", minutes=2)) is False
    assert store.notifications == (first,)


def test_listeners_observe_changes_until_unsubscribed():
    store = NotificationStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(s.unread_count))

    store.insert(_notification("a"))
    store.mark_as_read("a")
    unsubscribe()
    store.insert(_notification("b"))

    assert seen == [1, 0]
    unsubscribe()


def test_listeners_are_not_called_when_nothing_changed():
    store = NotificationStore()
    seen = []
    store.subscribe(lambda s: seen.append(len(s)))

    store.clear()
    store.mark_as_read("missing")
    store.mark_all_as_read()

    assert seen == []


def test_failing_listener_does_not_break_the_mutation(caplog):
    store = NotificationStore()
    seen = []

    def _broken(_store):
        raise ValueError("boom")

    store.subscribe(_broken)
    store.subscribe(lambda s: seen.append(len(s)))

    with caplog.at_level("ERROR"):
        store.insert(_notification("a"))

    assert len(store) == 1
    assert seen == [1]
    assert "listener" in caplog.text


def test_snapshot_cannot_mutate_the_store():
    store = NotificationStore()
    store.insert(_notification("a"))

    snapshot = store.notifications
    with pytest.raises(AttributeError):
        snapshot.append(_notification("b"))  # type: ignore[attr-defined]
    assert len(store) == 1


def test_inserts_made_by_receipt_callbacks_survive_mark_as_read():
    def _reply(notification_id: str) -> None:
        if notification_id.startswith("order-"):
            store.insert(_notification(f"reply-{notification_id}"))

    store = NotificationStore(read_receipts=_reply)
    store.insert(_notification("order-1"))
    store.insert(_notification("order-2"))

    store.mark_as_read("order-1")
    store.mark_all_as_read()

    assert [(item.id, item.read) for item in store.notifications] == [
        ("reply-order-2", False),
        ("reply-order-1", True),
        ("order-2", True),
        ("order-1", True),
    ]
    assert store.unread_count == 1


def test_inserts_made_by_listeners_are_kept_once():
    store = NotificationStore()
    store.insert(_notification("order-1"))
    seen = []

    def _listener(current: NotificationStore) -> None:
        seen.append(current.unread_count)
        if len(seen) == 1:
            current.insert(_notification("order-1"))

    store.subscribe(_listener)
    store.mark_as_read("order-1")

    assert [(item.id, item.read) for item in store.notifications] == [
        ("order-1", False),
        ("order-1", True),
    ]
    assert seen == [0, 1]
