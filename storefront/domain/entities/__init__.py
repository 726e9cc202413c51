"""Domain entities exposed by the application."""

from .notification import Announcement, BroadcastRecord, DisplayRecord, NotificationRecord
from .recipient import Recipient
from .role import ROLE_ADMIN, ROLE_CUSTOMER, Role
from .send_summary import DeliveryStatus, SendSummary
from .user import User

__all__ = [
    "Announcement",
    "BroadcastRecord",
    "DeliveryStatus",
    "DisplayRecord",
    "NotificationRecord",
    "Recipient",
    "ROLE_ADMIN",
    "ROLE_CUSTOMER",
    "Role",
    "SendSummary",
    "User",
]
