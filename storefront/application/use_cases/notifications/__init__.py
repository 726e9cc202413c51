"""Use cases delivering and reading storefront notifications."""

from .batch_runner import progress_message, run_with_concurrency
from .broadcast import BroadcastRecorder
from .fanout import NotificationFanout, validate_announcement
from .merge_view import NotificationFeed, count_unread, merge_notifications
from .ports import NotificationStore
from .read_state import mark_all_as_read
from .writer import NotificationWriter, build_notification_id

__all__ = [
    "BroadcastRecorder",
    "NotificationFanout",
    "NotificationFeed",
    "NotificationStore",
    "NotificationWriter",
    "build_notification_id",
    "count_unread",
    "mark_all_as_read",
    "merge_notifications",
    "progress_message",
    "run_with_concurrency",
    "validate_announcement",
]
