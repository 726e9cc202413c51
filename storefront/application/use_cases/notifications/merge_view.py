"""Combine personal notifications and broadcasts into one display feed."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from storefront.domain.entities import BroadcastRecord, DisplayRecord, NotificationRecord
from storefront.utils import timestamp_sort_key

logger = logging.getLogger(__name__)

FeedListener = Callable[[list[DisplayRecord]], None]


def merge_notifications(
    personal: Iterable[NotificationRecord],
    broadcasts: Iterable[BroadcastRecord],
) -> list[DisplayRecord]:
    """Return broadcasts and personal records newest first.

    Broadcasts come first in the concatenation and the sort is stable, so
    entries sharing a timestamp keep that order: broadcasts before personal
    records, each group in the order it was given. Records still waiting for
    a store timestamp are treated as the newest.
    """

    combined = [
        DisplayRecord(
            id=record.id,
            title=record.title,
            message=record.message,
            timestamp=record.timestamp,
            is_read=False,
            is_broadcast=True,
        )
        for record in broadcasts
    ]
    combined.extend(
        DisplayRecord(
            id=record.id,
            title=record.title,
            message=record.message,
            timestamp=record.timestamp,
            is_read=record.is_read,
            is_broadcast=False,
        )
        for record in personal
    )
    return sorted(
        combined, key=lambda record: timestamp_sort_key(record.timestamp), reverse=True
    )


def count_unread(records: Iterable[DisplayRecord]) -> int:
    """Return the badge count: unread personal entries only.

    Broadcasts are displayed unread but never counted, unlike a badge that
    counts every unread entry of the view.
    """

    return sum(1 for record in records if not record.is_broadcast and not record.is_read)


class NotificationFeed:
    """Keep the latest snapshot of both streams and publish their merge.

    Every update recomputes the view from the two current snapshots and hands
    it to ``listener``. A stream that already received a live update keeps
    that snapshot when :meth:`load` delivers the initial reads.
    """

    def __init__(self, listener: FeedListener | None = None) -> None:
        self._personal: list[NotificationRecord] = []
        self._broadcasts: list[BroadcastRecord] = []
        self._listener = listener
        self._view: list[DisplayRecord] = []
        self._personal_received = False
        self._broadcasts_received = False

    @property
    def view(self) -> list[DisplayRecord]:
        return list(self._view)

    @property
    def unread_count(self) -> int:
        return count_unread(self._view)

    def load(
        self,
        personal: Sequence[NotificationRecord],
        broadcasts: Sequence[BroadcastRecord],
    ) -> list[DisplayRecord]:
        """Seed both streams with their initial reads and publish a single view."""

        if not self._personal_received:
            self._personal = list(personal)
        if not self._broadcasts_received:
            self._broadcasts = list(broadcasts)
        return self._recompute()

    def update_personal(self, records: Sequence[NotificationRecord]) -> list[DisplayRecord]:
        self._personal = list(records)
        self._personal_received = True
        return self._recompute()

    def update_broadcasts(self, records: Sequence[BroadcastRecord]) -> list[DisplayRecord]:
        self._broadcasts = list(records)
        self._broadcasts_received = True
        return self._recompute()

    def _recompute(self) -> list[DisplayRecord]:
        self._view = merge_notifications(self._personal, self._broadcasts)
        if self._listener is not None:
            try:
                self._listener(list(self._view))
            except Exception:
                logger.exception("Notification feed listener failed")
        return list(self._view)


__all__ = ["FeedListener", "NotificationFeed", "count_unread", "merge_notifications"]
