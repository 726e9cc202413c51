"""Record the shared broadcast copy of an announcement."""

from __future__ import annotations

import logging
from uuid import uuid4

from storefront.domain.entities import Announcement, BroadcastRecord

from .ports import NotificationStore

logger = logging.getLogger(__name__)


class BroadcastRecorder:
    """Write one broadcast record per send; failures are never raised."""

    def __init__(self, store: NotificationStore) -> None:
        self._store = store

    async def record_broadcast(self, announcement: Announcement) -> bool:
        record = BroadcastRecord(
            id=uuid4().hex,
            title=announcement.title,
            message=announcement.message,
        )
        try:
            stored = await self._store.append_broadcast(record)
        except Exception as exc:
            logger.warning("Broadcast write failed (non-blocking): %s", exc)
            return False

        if not stored:
            logger.warning("Broadcast store rejected record %s", record.id)
        return bool(stored)


__all__ = ["BroadcastRecorder"]
