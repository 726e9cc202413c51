"""Helpers to push realtime events to websocket subscribers."""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from anyio import from_thread
from fastapi import WebSocket

from storefront.domain.entities import DisplayRecord

from .manager import NotificationConnectionManager, notification_manager

PROGRESS_EVENT = "notification.progress"
FEED_EVENT = "notifications"


class RealtimeEventPublisher:
    """Dispatch structured realtime events to websocket subscribers."""

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager
        self._pending: set[asyncio.Task] = set()

    @property
    def pending_sends(self) -> int:
        return len(self._pending)

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled send has finished."""

        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def dispatch(self, user_id: int, *, event_type: str, payload: Any) -> None:
        """Schedule a realtime ``event_type`` event for every ``user_id`` connection."""

        if not user_id:
            return
        message = {"type": event_type, "data": copy.deepcopy(payload)}
        self._schedule(self._manager.send_to_user, user_id, message)

    def dispatch_progress(self, user_id: int, text: str) -> None:
        """Report fan-out progress to the administrator who started it."""

        self.dispatch(user_id, event_type=PROGRESS_EVENT, payload={"text": text})

    def dispatch_feed(
        self, user_id: int, websocket: WebSocket, view: list[DisplayRecord], unread: int
    ) -> None:
        """Push a merged notification view to a single connection."""

        message = {
            "type": FEED_EVENT,
            "data": [serialize_display_record(record) for record in view],
            "unread_count": unread,
        }
        self._schedule(self._manager.send_to_connection, user_id, websocket, message)

    def _schedule(self, func: Callable[..., Awaitable[Any]], *args: Any) -> None:
        """Run ``func(*args)`` on the event loop from sync or worker-thread code."""

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            from_thread.run(func, *args)
            return
        task = loop.create_task(func(*args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


def serialize_display_record(record: DisplayRecord) -> dict[str, Any]:
    """Return the websocket payload representation for ``record``."""

    return {
        "id": record.id,
        "title": record.title,
        "message": record.message,
        "timestamp": _iso_or_none(record.timestamp),
        "is_read": record.is_read,
        "is_broadcast": record.is_broadcast,
    }


def _iso_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


realtime_event_publisher = RealtimeEventPublisher(notification_manager)


__all__ = [
    "FEED_EVENT",
    "PROGRESS_EVENT",
    "RealtimeEventPublisher",
    "realtime_event_publisher",
    "serialize_display_record",
]
