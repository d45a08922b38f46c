"""Errors raised by the application layer and translated at the API boundary."""

from __future__ import annotations


class NotificationValidationError(ValueError):
    """A notification field failed validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidImageError(ValueError):
    """An uploaded file was rejected or could not be decoded as an image."""

    def __init__(self, filename: str | None, reason: str) -> None:
        super().__init__(f"Image is not valid: {filename or '<unnamed>'} ({reason})")
        self.filename = filename
        self.reason = reason


class ImageNotFoundError(LookupError):
    """No stored image matches the requested identifier."""


class ImageStorageError(RuntimeError):
    """Writing an image to the storage directory failed."""


class StorageConfigurationError(RuntimeError):
    """The configured image storage directory cannot be used."""


class AuthenticationError(Exception):
    """The request did not carry the expected bearer credential."""


__all__ = [
    "AuthenticationError",
    "ImageNotFoundError",
    "ImageStorageError",
    "InvalidImageError",
    "NotificationValidationError",
    "StorageConfigurationError",
]
