"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from notification_server.application.use_cases.notifications import MAX_LAST_ID


class NotificationRetrieveRequest(BaseModel):
    """Cursor sent by devices to fetch the next page of notifications."""

    model_config = ConfigDict(populate_by_name=True)

    last_id: int = Field(
        default=0,
        ge=0,
        le=MAX_LAST_ID,
        alias="lastId",
        description="Only notifications with a greater identifier are returned",
    )


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    content: str
    sender: str = Field(alias="from")
    send_on: int = Field(alias="sendOn", description="Epoch seconds")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    images: list[str] = Field(default_factory=list, description="Public image URLs")


__all__ = ["NotificationRead", "NotificationRetrieveRequest"]
