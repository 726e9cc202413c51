"""SQLAlchemy models for personal notifications and shared broadcasts."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import expression

from storefront.infrastructure.database import Base
from storefront.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """A notification appended to one user's personal list."""

    __tablename__ = "notification"

    user_id = Column(Integer, ForeignKey("user.id"), primary_key=True)
    id = Column(String(120), primary_key=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    is_read = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )


class BroadcastModel(Base):
    """An announcement stored once and shown to every user."""

    __tablename__ = "broadcast"

    id = Column(String(64), primary_key=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )


__all__ = ["BroadcastModel", "NotificationModel"]
