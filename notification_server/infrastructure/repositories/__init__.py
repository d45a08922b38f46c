"""Repository implementations for infrastructure layer."""

from .image_repository import ImageRepository
from .notification_repository import NotificationRepository

__all__ = [
    "ImageRepository",
    "NotificationRepository",
]
