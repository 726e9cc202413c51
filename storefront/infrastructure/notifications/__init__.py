"""Realtime notification helpers and the SQL-backed notification store."""

from .manager import NotificationConnectionManager, notification_manager
from .realtime import (
    FEED_EVENT,
    PROGRESS_EVENT,
    RealtimeEventPublisher,
    realtime_event_publisher,
    serialize_display_record,
)
from .store import SqlNotificationStore
from .subscriptions import SubscriptionRegistry

__all__ = [
    "FEED_EVENT",
    "NotificationConnectionManager",
    "PROGRESS_EVENT",
    "RealtimeEventPublisher",
    "SqlNotificationStore",
    "SubscriptionRegistry",
    "notification_manager",
    "realtime_event_publisher",
    "serialize_display_record",
]
