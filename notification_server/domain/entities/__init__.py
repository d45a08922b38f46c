"""Domain entities exposed by the application."""

from .image import Image
from .notification import Notification, NotificationRecord

__all__ = [
    "Image",
    "Notification",
    "NotificationRecord",
]
