"""Endpoints used by issuers to submit notifications and by devices to pull them."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from notification_server.application.use_cases import (
    create_notification as create_notification_uc,
    retrieve_notifications as retrieve_notifications_uc,
)
from notification_server.config import Settings
from notification_server.domain.entities import NotificationRecord
from notification_server.infrastructure.database import get_db
from notification_server.infrastructure.image_storage import ImageStorage, UploadedImage
from notification_server.interfaces.api.dependencies import (
    bearer_scheme,
    get_app_settings,
    get_image_storage,
)
from notification_server.interfaces.api.schemas import (
    NotificationRead,
    NotificationRetrieveRequest,
    StandardResponse,
)

router = APIRouter(
    prefix="/notification",
    tags=["notifications"],
    dependencies=[Depends(bearer_scheme)],
)
logger = logging.getLogger(__name__)


def _record_to_read_model(record: NotificationRecord, host_url: str) -> NotificationRead:
    notification = record.notification
    return NotificationRead(
        id=notification.id or 0,
        content=notification.content,
        sender=notification.sender,
        send_on=notification.send_on,
        created_at=notification.created_at,
        images=[f"{host_url}{image.uuid}" for image in record.images],
    )


def _read_upload(upload: UploadFile) -> UploadedImage:
    try:
        data = upload.file.read()
    finally:
        upload.file.seek(0)
    return UploadedImage(
        filename=upload.filename,
        content_type=upload.content_type,
        data=data,
        size=upload.size,
    )


@router.post(
    "/create",
    response_model=StandardResponse[NotificationRead],
    status_code=status.HTTP_201_CREATED,
)
def create_notification(
    content: str | None = Form(default=None),
    sender: str | None = Form(default=None, alias="from"),
    images: list[UploadFile] | None = File(default=None),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
    settings: Settings = Depends(get_app_settings),
) -> StandardResponse[NotificationRead]:
    """Store a notification together with its optional images."""

    logger.info("Received notification creation request from: %s", sender)
    uploads = [_read_upload(upload) for upload in images or []]

    record = create_notification_uc(
        db,
        storage,
        content=content,
        sender=sender,
        images=uploads,
    )

    return StandardResponse(
        message="Notification created",
        data=_record_to_read_model(record, settings.host_url),
    )


@router.post("/retrieve", response_model=StandardResponse[list[NotificationRead]])
def retrieve_notifications(
    payload: NotificationRetrieveRequest | None = Body(default=None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> StandardResponse[list[NotificationRead]]:
    """Return up to 50 notifications newer than ``lastId``, newest first."""

    last_id = payload.last_id if payload is not None else 0
    records = retrieve_notifications_uc(db, last_id=last_id)
    logger.info("Returning %d notification(s) after id %s", len(records), last_id)
    return StandardResponse(
        data=[_record_to_read_model(record, settings.host_url) for record in records],
    )


__all__ = ["router"]
