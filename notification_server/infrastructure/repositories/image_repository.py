"""Persistence helpers for image metadata."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable

from sqlalchemy.orm import Session

from notification_server.domain.entities import Image
from notification_server.infrastructure.models import ImageModel


class ImageRepository:
    """Provide persistence operations for :class:`Image` records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, image: Image) -> Image:
        model = ImageModel(
            uuid=image.uuid,
            path=image.path,
            size=image.size,
            content_type=image.content_type,
            notification_id=image.notification_id,
        )
        self.session.add(model)
        self.session.flush()
        return self._to_entity(model)

    def get_by_uuid(self, uuid: str) -> Image | None:
        model = self.session.query(ImageModel).filter(ImageModel.uuid == uuid).first()
        return self._to_entity(model) if model else None

    def list_for_notifications(self, notification_ids: Iterable[int]) -> dict[int, list[Image]]:
        """Return the images of every notification in ``notification_ids`` keyed by owner."""

        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return {}
        query = (
            self.session.query(ImageModel)
            .filter(ImageModel.notification_id.in_(ids))
            .order_by(ImageModel.notification_id, ImageModel.id)
        )
        grouped: dict[int, list[Image]] = defaultdict(list)
        for model in query.all():
            grouped[model.notification_id].append(self._to_entity(model))
        return dict(grouped)

    @staticmethod
    def _to_entity(model: ImageModel) -> Image:
        return Image(
            id=model.id,
            uuid=model.uuid,
            path=model.path,
            size=model.size,
            content_type=model.content_type,
            notification_id=model.notification_id,
        )


__all__ = ["ImageRepository"]
