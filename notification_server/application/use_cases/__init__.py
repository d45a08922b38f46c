"""Aggregate application use cases."""

from .images import get_stored_image
from .notifications import create_notification, retrieve_notifications

__all__ = [
    "create_notification",
    "get_stored_image",
    "retrieve_notifications",
]
