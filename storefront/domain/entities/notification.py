"""Domain entities for personal notifications, broadcasts and the merged feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Announcement:
    """Title and message an administrator sends to every user."""

    title: str
    message: str


@dataclass
class NotificationRecord:
    """Notification stored in a single user's personal list.

    ``timestamp`` stays ``None`` until the store assigns it on write.
    """

    id: str
    title: str
    message: str
    timestamp: datetime | None = None
    is_read: bool = False


@dataclass
class BroadcastRecord:
    """Shared notification visible to every user, stored once per send."""

    id: str
    title: str
    message: str
    timestamp: datetime | None = None


@dataclass(frozen=True)
class DisplayRecord:
    """Entry of the merged feed shown to a user."""

    id: str
    title: str
    message: str
    timestamp: datetime | None
    is_read: bool
    is_broadcast: bool


__all__ = ["Announcement", "BroadcastRecord", "DisplayRecord", "NotificationRecord"]
