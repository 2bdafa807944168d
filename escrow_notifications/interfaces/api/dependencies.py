"""FastAPI dependency utilities."""

from fastapi import Depends
from fastapi.requests import HTTPConnection

from escrow_notifications.application.use_cases.notifications import (
    NotificationContext,
    NotificationContextError,
    NotificationProvider,
)


def get_notification_provider(connection: HTTPConnection) -> NotificationProvider:
    """Return the provider owned by the application lifespan.

    A missing or closed provider is a wiring mistake, so the error propagates
    instead of being turned into an empty response.
    """

    provider = getattr(connection.app.state, "notification_provider", None)
    if provider is None or not provider.is_open:
        raise NotificationContextError(
            "Notification provider not initialized for this application"
        )
    return provider


def get_notification_context(
    provider: NotificationProvider = Depends(get_notification_provider),
) -> NotificationContext:
    """Return the consumer API of the application's notification provider."""

    return provider.context
