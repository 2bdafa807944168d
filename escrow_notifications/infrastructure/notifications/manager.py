"""Connection management helpers for UI notification websockets."""

from __future__ import annotations

import logging
from typing import Any, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Track the UI websockets observing the notification store."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        """Accept the websocket connection and start broadcasting to it."""

        await websocket.accept()
        self._connections.add(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Stop broadcasting to ``websocket``."""

        self._connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every connected websocket."""

        for connection in list(self._connections):
            try:
                await connection.send_json(message)
            except Exception as exc:
                logger.debug("Dropping unreachable notification socket: %s", exc)
                self.disconnect(connection)


notification_manager = NotificationConnectionManager()


__all__ = ["NotificationConnectionManager", "notification_manager"]
