"""Endpoints and websocket handlers for realtime notifications."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from escrow_notifications.application.use_cases.notifications import (
    NotificationContext,
    NotificationProvider,
)
from escrow_notifications.domain.entities import Notification, coerce_notification_type
from escrow_notifications.infrastructure.notifications import (
    JsonSocketTransport,
    notification_manager,
    serialize_notification,
    serialize_snapshot,
)
from escrow_notifications.interfaces.api.dependencies import (
    get_notification_context,
    get_notification_provider,
)
from escrow_notifications.interfaces.api.schemas import (
    NotificationCreate,
    NotificationRead,
    NotificationSnapshotRead,
    UnreadCountRead,
)
from escrow_notifications.utils import ensure_app_timezone, now_in_app_timezone

logger = logging.getLogger(__name__)

# Handlers are coroutines so every store mutation runs on the event loop thread,
# the same one the upstream transport delivers events on.
router = APIRouter(prefix="/notifications", tags=["notifications"])


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(**serialize_notification(notification))


def _snapshot(context: NotificationContext) -> NotificationSnapshotRead:
    return NotificationSnapshotRead(
        notifications=[_notification_to_schema(n) for n in context.notifications],
        unread_count=context.unread_count,
    )


def _schema_to_notification(payload: NotificationCreate) -> Notification:
    return Notification(
        id=payload.id or str(uuid.uuid4()),
        user_id=payload.user_id,
        type=coerce_notification_type(payload.type),
        title=payload.title,
        message=payload.message,
        read=payload.read,
        created_at=ensure_app_timezone(payload.created_at) or now_in_app_timezone(),
        related_id=payload.related_id,
    )


@router.get("/", response_model=list[NotificationRead])
async def list_notifications(
    context: NotificationContext = Depends(get_notification_context),
) -> list[NotificationRead]:
    """Return the notifications, most recently received first."""

    return [_notification_to_schema(n) for n in context.notifications]


@router.get("/unread-count", response_model=UnreadCountRead)
async def unread_count(
    context: NotificationContext = Depends(get_notification_context),
) -> UnreadCountRead:
    return UnreadCountRead(count=context.unread_count)


@router.post("/", response_model=NotificationRead, status_code=status.HTTP_201_CREATED)
async def add_notification(
    payload: NotificationCreate,
    context: NotificationContext = Depends(get_notification_context),
) -> NotificationRead:
    """Insert a notification at the top of the list."""

    notification = _schema_to_notification(payload)
    context.add_notification(notification)
    return _notification_to_schema(notification)


@router.post("/read-all", response_model=NotificationSnapshotRead)
async def mark_all_notifications_as_read(
    context: NotificationContext = Depends(get_notification_context),
) -> NotificationSnapshotRead:
    context.mark_all_as_read()
    return _snapshot(context)


@router.post("/{notification_id}/read", response_model=NotificationSnapshotRead)
async def mark_notification_as_read(
    notification_id: str,
    context: NotificationContext = Depends(get_notification_context),
) -> NotificationSnapshotRead:
    """Mark every notification sharing ``notification_id`` as read."""

    context.mark_as_read(notification_id)
    return _snapshot(context)


@router.delete("/", response_model=NotificationSnapshotRead)
async def clear_notifications(
    context: NotificationContext = Depends(get_notification_context),
) -> NotificationSnapshotRead:
    context.clear_notifications()
    return _snapshot(context)


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    context: NotificationContext = Depends(get_notification_context),
) -> None:
    """Websocket endpoint that streams store snapshots to the UI."""

    await notification_manager.connect(websocket)
    try:
        await websocket.send_json(
            {
                "type": "snapshot",
                "data": serialize_snapshot(context.notifications, context.unread_count),
            }
        )
        while True:
            try:
                message = await websocket.receive_json()
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = message.get("ids", [])
                if isinstance(ids, list):
                    for notification_id in ids:
                        context.mark_as_read(str(notification_id))
                continue
    except WebSocketDisconnect:
        notification_manager.disconnect(websocket)
    except Exception:
        notification_manager.disconnect(websocket)
        raise


@router.websocket("/upstream")
async def upstream_websocket(
    websocket: WebSocket,
    provider: NotificationProvider = Depends(get_notification_provider),
) -> None:
    """Accept the push connection and feed its events into the store.

    A newer upstream connection replaces the current one; the older socket is
    left open but no longer produces notifications.
    """

    await websocket.accept()
    transport = JsonSocketTransport(websocket)
    provider.attach_transport(transport)
    logger.info("Upstream event connection attached")
    try:
        await transport.run()
    except WebSocketDisconnect as exc:
        logger.info("Upstream event connection closed (code %s)", exc.code)
    finally:
        provider.detach_transport(transport)
