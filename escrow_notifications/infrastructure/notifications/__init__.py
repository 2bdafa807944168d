"""Realtime notification helpers for the infrastructure layer."""

from .manager import NotificationConnectionManager, notification_manager
from .publisher import (
    ReadReceiptPublisher,
    SnapshotPublisher,
    read_receipt_publisher,
    serialize_notification,
    serialize_snapshot,
    snapshot_publisher,
)
from .transport import JsonSocket, JsonSocketTransport

__all__ = [
    "JsonSocket",
    "JsonSocketTransport",
    "NotificationConnectionManager",
    "notification_manager",
    "ReadReceiptPublisher",
    "read_receipt_publisher",
    "SnapshotPublisher",
    "snapshot_publisher",
    "serialize_notification",
    "serialize_snapshot",
]
