"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import BigInteger, Column, DateTime, Index, Integer, String, Text

from notification_server.infrastructure.database import Base
from notification_server.utils import now_in_utc_naive_datetime


class NotificationModel(Base):
    """Database representation of a notification."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_created_at", "created_at"),
        # Identifiers must never be reused after a delete.
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    send_on = Column(BigInteger, nullable=False)
    from_sender = Column(String(255), nullable=False)
    created_at = Column(DateTime(), nullable=False, default=now_in_utc_naive_datetime)


__all__ = ["NotificationModel"]
