"""Repository implementations for infrastructure layer."""

from .broadcast_repository import BroadcastRepository
from .notification_repository import NotificationRepository
from .role_repository import RoleRepository
from .user_repository import UserRepository

__all__ = [
    "BroadcastRepository",
    "NotificationRepository",
    "RoleRepository",
    "UserRepository",
]
