"""ORM models used by the application infrastructure."""

from .image import ImageModel
from .notification import NotificationModel

__all__ = [
    "ImageModel",
    "NotificationModel",
]
