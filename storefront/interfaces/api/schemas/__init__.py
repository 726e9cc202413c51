from .activity import ActivityRead
from .auth import Token
from .notification import (
    AnnouncementCreate,
    AnnouncementSendResponse,
    NotificationFeedRead,
    NotificationMarkReadResponse,
    NotificationRead,
)

__all__ = [
    "ActivityRead",
    "AnnouncementCreate",
    "AnnouncementSendResponse",
    "NotificationFeedRead",
    "NotificationMarkReadResponse",
    "NotificationRead",
    "Token",
]
