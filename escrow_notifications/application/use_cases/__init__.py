"""Aggregate application use cases."""

from .notifications import NotificationContextError, NotificationProvider

__all__ = [
    "NotificationContextError",
    "NotificationProvider",
]
