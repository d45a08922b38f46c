"""Domain entity representing a stored notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .image import Image


@dataclass
class Notification:
    """Message submitted by an issuer and later pulled by devices."""

    id: int | None
    content: str
    sender: str
    send_on: int
    created_at: datetime | None = None


@dataclass
class NotificationRecord:
    """A notification together with the images it owns."""

    notification: Notification
    images: list[Image] = field(default_factory=list)


__all__ = ["Notification", "NotificationRecord"]
