from .notification import (
    NotificationCreate,
    NotificationRead,
    NotificationSnapshotRead,
    UnreadCountRead,
)

__all__ = [
    "NotificationCreate",
    "NotificationRead",
    "NotificationSnapshotRead",
    "UnreadCountRead",
]
