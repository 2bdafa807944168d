"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationCreate(BaseModel):
    """Notification added directly by a consumer."""

    id: str | None = Field(
        default=None,
        description="Identifier; a random one is generated when omitted",
        min_length=1,
    )
    user_id: str | None = None
    type: str = Field(default="GENERAL", min_length=1)
    title: str = ""
    message: str = ""
    read: bool = False
    created_at: datetime | None = None
    related_id: str | None = None


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: str
    user_id: str | None = None
    type: str
    title: str
    message: str
    read: bool
    created_at: datetime
    related_id: str | None = None


class UnreadCountRead(BaseModel):
    count: int


class NotificationSnapshotRead(BaseModel):
    """Full view of the store: ordered notifications plus unread count."""

    notifications: list[NotificationRead] = Field(default_factory=list)
    unread_count: int = 0


__all__ = [
    "NotificationCreate",
    "NotificationRead",
    "NotificationSnapshotRead",
    "UnreadCountRead",
]
