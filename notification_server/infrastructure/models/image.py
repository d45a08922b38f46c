"""SQLAlchemy model for stored images."""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from notification_server.infrastructure.database import Base


class ImageModel(Base):
    """Database representation of a re-encoded image file."""

    __tablename__ = "image"

    id = Column(Integer, primary_key=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True)
    path = Column(String(500), nullable=False)
    size = Column(BigInteger, nullable=False)
    content_type = Column(String(100), nullable=False)
    notification_id = Column(
        Integer,
        ForeignKey("notifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


__all__ = ["ImageModel"]
