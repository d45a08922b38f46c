"""Persistence helpers for notification entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from notification_server.domain.entities import Notification
from notification_server.infrastructure.models import NotificationModel
from notification_server.utils import (
    ensure_utc,
    ensure_utc_naive_datetime,
    now_in_utc,
)


class NotificationRepository:
    """Provide persistence operations for :class:`Notification` objects.

    The repository never commits: callers own the transaction so a notification
    and its images are written atomically.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, notification: Notification) -> Notification:
        """Insert ``notification`` and return it with its generated identifier."""

        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def list_after(self, last_id: int, *, limit: int) -> Sequence[Notification]:
        """Return up to ``limit`` notifications newer than ``last_id``, newest first."""

        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id > last_id)
            .order_by(NotificationModel.id.desc())
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def delete(self, notification_id: int) -> bool:
        """Delete a notification; its images go with it through the FK cascade."""

        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id == notification_id)
            .delete(synchronize_session=False)
        )
        return bool(deleted)

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        model.content = notification.content
        model.from_sender = notification.sender
        model.send_on = notification.send_on
        model.created_at = (
            ensure_utc_naive_datetime(notification.created_at)
            or ensure_utc_naive_datetime(now_in_utc())
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            content=model.content,
            sender=model.from_sender,
            send_on=model.send_on,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["NotificationRepository"]
