"""Use cases for reading stored images."""

import logging
from pathlib import Path

from sqlalchemy.orm import Session

from notification_server.domain.entities import Image
from notification_server.domain.exceptions import ImageNotFoundError
from notification_server.infrastructure.image_storage import ImageStorage
from notification_server.infrastructure.repositories import ImageRepository

logger = logging.getLogger(__name__)


def get_stored_image(session: Session, storage: ImageStorage, image_uuid: str) -> tuple[Image, Path]:
    """Return the metadata and file location of the image ``image_uuid``."""

    if not image_uuid or not image_uuid.strip():
        raise ImageNotFoundError("Image not found")

    image = ImageRepository(session).get_by_uuid(image_uuid.strip())
    if image is None:
        raise ImageNotFoundError("Image not found")

    path = storage.resolve_path(image.path)
    if path is None or not path.is_file():
        logger.warning("Image %s has no file on disk at %s", image.uuid, path)
        raise ImageNotFoundError("Image not found")
    return image, path


__all__ = ["get_stored_image"]
