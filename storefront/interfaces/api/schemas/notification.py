"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class NotificationRead(BaseModel):
    """Entry of the merged feed delivered to the client."""

    id: str
    title: str
    message: str
    timestamp: datetime | None = None
    is_read: bool
    is_broadcast: bool


class NotificationFeedRead(BaseModel):
    """Merged personal and broadcast notifications of the current user."""

    items: list[NotificationRead] = Field(default_factory=list)
    unread_count: int = Field(..., ge=0, description="Notificaciones personales sin leer")


class NotificationMarkReadResponse(BaseModel):
    updated: int = Field(..., ge=0)


class AnnouncementCreate(BaseModel):
    """Announcement an administrator sends to every user."""

    title: str = Field(..., min_length=1, max_length=100, description="Título de la notificación")
    message: str = Field(
        ..., min_length=1, max_length=500, description="Mensaje de la notificación"
    )


class AnnouncementSendResponse(BaseModel):
    """Outcome of sending an announcement to all users."""

    total: int
    failed: int
    broadcast_ok: bool
    status: str
    message: str
    progress: list[str] = Field(default_factory=list)


__all__ = [
    "AnnouncementCreate",
    "AnnouncementSendResponse",
    "NotificationFeedRead",
    "NotificationMarkReadResponse",
    "NotificationRead",
]
