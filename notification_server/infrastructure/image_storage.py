"""Validation, normalization and filesystem storage of uploaded images.

Every accepted upload is decoded with Pillow and re-encoded to WebP before it
is written under a random UUID name, so stored files never depend on what the
client sent. Ingestion reports its result as a value (:class:`StoredImage`,
:class:`InvalidImage` or :class:`StorageFailure`) and leaves rollback decisions
to the caller.
"""

from __future__ import annotations

import io
import logging
import os
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from PIL import Image as PILImage
from PIL import UnidentifiedImageError

from notification_server.config import Settings
from notification_server.domain.exceptions import StorageConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "bmp", "webp"})
CANONICAL_FORMAT = "WEBP"
CANONICAL_EXTENSION = "webp"
CANONICAL_CONTENT_TYPE = "image/webp"

_WEBP_MODES = {"RGB", "RGBA"}
_DECODE_ERRORS = (
    UnidentifiedImageError,
    PILImage.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)


@dataclass(frozen=True)
class UploadedImage:
    """A raw file received from a client."""

    filename: str | None
    content_type: str | None
    data: bytes
    size: int | None = None

    @property
    def byte_size(self) -> int:
        declared = self.size or 0
        return max(declared, len(self.data))


@dataclass(frozen=True)
class StoredImage:
    uuid: str
    filename: str
    path: Path
    size: int
    content_type: str


@dataclass(frozen=True)
class InvalidImage:
    filename: str | None
    reason: str


@dataclass(frozen=True)
class StorageFailure:
    filename: str | None
    error: OSError


IngestOutcome = StoredImage | InvalidImage | StorageFailure


def file_extension(filename: str | None) -> str:
    """Return the lower-cased extension of ``filename`` without the dot."""

    if not filename or not filename.strip():
        return ""
    _, dot, extension = filename.strip().rpartition(".")
    if not dot or not extension:
        return ""
    return extension.lower()


class ImageStorage:
    """Store uploaded images in the configured directory as WebP files."""

    def __init__(self, settings: Settings) -> None:
        self.directory = Path(settings.image_storage_path)
        self.max_size = settings.image_max_size_bytes
        self.quality = settings.image_webp_quality

    def ensure_ready(self) -> None:
        """Fail unless the storage directory exists and is readable and writable."""

        if not self.directory.is_dir() or not os.access(self.directory, os.R_OK | os.W_OK):
            raise StorageConfigurationError(f"image storage path problem {self.directory}")
        logger.info("Image storage ready at %s", self.directory)

    def rejection_reason(self, upload: UploadedImage | None) -> str | None:
        """Return why ``upload`` is not acceptable, or ``None`` when it is."""

        if upload is None or not upload.data:
            return "file is empty"
        if upload.byte_size > self.max_size:
            return f"file size {upload.byte_size} exceeds maximum allowed size {self.max_size}"
        if not upload.filename or not upload.filename.strip():
            return "filename is missing"
        extension = file_extension(upload.filename)
        if extension not in SUPPORTED_IMAGE_EXTENSIONS:
            return f"unsupported file extension '{extension}'"
        if not upload.content_type or not upload.content_type.lower().startswith("image/"):
            return f"invalid content type '{upload.content_type}'"
        return None

    def validate(self, upload: UploadedImage | None) -> bool:
        reason = self.rejection_reason(upload)
        if reason is not None:
            logger.debug(
                "Rejected upload %s: %s", upload.filename if upload else None, reason
            )
            return False
        return True

    def ingest(self, upload: UploadedImage) -> IngestOutcome:
        """Decode ``upload``, re-encode it to WebP and write it to disk."""

        reason = self.rejection_reason(upload)
        if reason is not None:
            return InvalidImage(upload.filename if upload else None, reason)

        try:
            encoded = self._encode(upload.data)
        except _DECODE_ERRORS as exc:
            logger.warning("Could not decode image %s: %s", upload.filename, exc)
            return InvalidImage(upload.filename, "file could not be decoded as an image")

        image_uuid = str(uuid.uuid4())
        filename = f"{image_uuid}.{CANONICAL_EXTENSION}"
        target = self.directory / filename
        try:
            handle = target.open("xb")
        except OSError as exc:
            logger.error("Could not create image file %s for %s: %s", target, upload.filename, exc)
            return StorageFailure(upload.filename, exc)
        try:
            with handle:
                handle.write(encoded)
        except OSError as exc:
            logger.error("Could not write image %s to %s: %s", upload.filename, target, exc)
            self._remove(target)
            return StorageFailure(upload.filename, exc)

        logger.info("Stored image %s as %s (%d bytes)", upload.filename, filename, len(encoded))
        return StoredImage(
            uuid=image_uuid,
            filename=filename,
            path=target,
            size=len(encoded),
            content_type=CANONICAL_CONTENT_TYPE,
        )

    def resolve_path(self, filename: str | None) -> Path | None:
        """Return the location of a stored file; no existence check is made."""

        if filename is None or not filename.strip():
            return None
        return self.directory / filename

    def discard(self, paths: Iterable[Path]) -> None:
        """Remove files written by an aborted request."""

        for path in paths:
            self._remove(path)

    def _encode(self, data: bytes) -> bytes:
        with PILImage.open(io.BytesIO(data)) as source:
            source.load()
            frame = self._prepare_for_webp(source)
            output = io.BytesIO()
            frame.save(output, format=CANONICAL_FORMAT, quality=self.quality)
        return output.getvalue()

    @staticmethod
    def _prepare_for_webp(image: PILImage.Image) -> PILImage.Image:
        if image.mode in _WEBP_MODES:
            return image
        has_alpha = "A" in image.getbands() or "transparency" in image.info
        return image.convert("RGBA" if has_alpha else "RGB")

    @staticmethod
    def _remove(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Could not remove image file %s: %s", path, exc)


__all__ = [
    "CANONICAL_CONTENT_TYPE",
    "CANONICAL_EXTENSION",
    "ImageStorage",
    "IngestOutcome",
    "InvalidImage",
    "StorageFailure",
    "StoredImage",
    "SUPPORTED_IMAGE_EXTENSIONS",
    "UploadedImage",
    "file_extension",
]
