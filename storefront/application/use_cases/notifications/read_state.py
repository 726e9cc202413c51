"""Read-state changes for a user's personal notifications."""

from __future__ import annotations

import logging

from .ports import NotificationStore

logger = logging.getLogger(__name__)


async def mark_all_as_read(store: NotificationStore, recipient_id: int) -> int:
    """Mark every personal notification of ``recipient_id`` as read.

    Broadcasts are shared by all users and keep no per-user read state, so
    they are left untouched.
    """

    updated = await store.mark_all_as_read(recipient_id)
    logger.info("Marked %s notifications as read for user %s", updated, recipient_id)
    return updated


__all__ = ["mark_all_as_read"]
