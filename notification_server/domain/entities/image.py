"""Domain entity describing a stored image."""

from dataclasses import dataclass


@dataclass
class Image:
    """Metadata for a re-encoded image file owned by a notification."""

    id: int | None
    uuid: str
    path: str
    size: int
    content_type: str
    notification_id: int


__all__ = ["Image"]
