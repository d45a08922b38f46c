"""Use cases for creating and retrieving notifications."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from notification_server.domain.entities import Image, Notification, NotificationRecord
from notification_server.domain.exceptions import (
    ImageStorageError,
    InvalidImageError,
    NotificationValidationError,
)
from notification_server.infrastructure.image_storage import (
    ImageStorage,
    InvalidImage,
    StorageFailure,
    UploadedImage,
)
from notification_server.infrastructure.repositories import (
    ImageRepository,
    NotificationRepository,
)
from notification_server.utils import now_in_utc

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 10_000
MAX_SENDER_LENGTH = 255
PAGE_SIZE = 50
# Largest identifier a signed 64-bit INTEGER column can hold.
MAX_LAST_ID = 2**63 - 1


def create_notification(
    session: Session,
    storage: ImageStorage,
    *,
    content: str | None,
    sender: str | None,
    images: Sequence[UploadedImage] = (),
) -> NotificationRecord:
    """Store a notification and its images in a single transaction.

    Every upload is validated before anything is written. If an image fails to
    decode or to reach the disk afterwards, the transaction is rolled back and
    the files already written for this request are deleted.
    """

    _validate_fields(content, sender)
    for upload in images:
        reason = storage.rejection_reason(upload)
        if reason is not None:
            logger.warning("Rejected notification from %s: invalid image %s", sender, upload.filename)
            raise InvalidImageError(upload.filename, reason)

    notification_repo = NotificationRepository(session)
    image_repo = ImageRepository(session)
    written: list[Path] = []
    created_at = now_in_utc()

    try:
        notification = notification_repo.add(
            Notification(
                id=None,
                content=content,
                sender=sender,
                send_on=int(created_at.timestamp()),
                created_at=created_at,
            )
        )

        stored_images: list[Image] = []
        for upload in images:
            outcome = storage.ingest(upload)
            if isinstance(outcome, InvalidImage):
                raise InvalidImageError(outcome.filename, outcome.reason)
            if isinstance(outcome, StorageFailure):
                raise ImageStorageError(
                    f"Could not store image {outcome.filename}"
                ) from outcome.error

            written.append(outcome.path)
            stored_images.append(
                image_repo.add(
                    Image(
                        id=None,
                        uuid=outcome.uuid,
                        path=outcome.filename,
                        size=outcome.size,
                        content_type=outcome.content_type,
                        notification_id=notification.id,
                    )
                )
            )

        session.commit()
    except SQLAlchemyError:
        logger.exception("Failed to persist notification from %s", sender)
        _abort(session, storage, written)
        raise
    except Exception:
        _abort(session, storage, written)
        raise

    logger.info(
        "Created notification %s from %s with %d image(s)",
        notification.id,
        sender,
        len(stored_images),
    )
    return NotificationRecord(notification=notification, images=stored_images)


def retrieve_notifications(
    session: Session,
    *,
    last_id: int = 0,
    page_size: int = PAGE_SIZE,
) -> list[NotificationRecord]:
    """Return the page of notifications newer than ``last_id``, newest first."""

    if last_id < 0:
        raise ValueError("lastId must be non-negative")
    if last_id > MAX_LAST_ID:
        raise ValueError(f"lastId must not exceed {MAX_LAST_ID}")

    notifications = NotificationRepository(session).list_after(last_id, limit=page_size)
    images_by_owner = ImageRepository(session).list_for_notifications(
        notification.id for notification in notifications
    )
    logger.debug("Retrieved %d notification(s) after id %s", len(notifications), last_id)
    return [
        NotificationRecord(
            notification=notification,
            images=images_by_owner.get(notification.id, []),
        )
        for notification in notifications
    ]


def _validate_fields(content: str | None, sender: str | None) -> None:
    if content is None or not content.strip():
        raise NotificationValidationError("content", "Content is required and cannot be blank")
    if len(content) > MAX_CONTENT_LENGTH:
        raise NotificationValidationError(
            "content", f"Content cannot exceed {MAX_CONTENT_LENGTH} characters"
        )
    if sender is None or not sender.strip():
        raise NotificationValidationError("from", "From field is required and cannot be blank")
    if len(sender) > MAX_SENDER_LENGTH:
        raise NotificationValidationError(
            "from", f"From field cannot exceed {MAX_SENDER_LENGTH} characters"
        )


def _abort(session: Session, storage: ImageStorage, written: list[Path]) -> None:
    session.rollback()
    if written:
        logger.warning("Rolling back notification; removing %d stored image(s)", len(written))
        storage.discard(written)
        written.clear()


__all__ = [
    "MAX_CONTENT_LENGTH",
    "MAX_LAST_ID",
    "PAGE_SIZE",
    "create_notification",
    "retrieve_notifications",
]
