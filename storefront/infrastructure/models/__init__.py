"""ORM models used by the application infrastructure."""

from .notification import BroadcastModel, NotificationModel
from .role import RoleModel
from .user import UserModel

__all__ = [
    "BroadcastModel",
    "NotificationModel",
    "RoleModel",
    "UserModel",
]
