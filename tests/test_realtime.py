"""Tests for websocket connection management and realtime events."""

from __future__ import annotations

import gc
from datetime import datetime, timezone

import pytest

from storefront.domain.entities import DisplayRecord
from storefront.infrastructure.notifications import (
    NotificationConnectionManager,
    RealtimeEventPublisher,
)
from storefront.infrastructure.notifications.realtime import (
    FEED_EVENT,
    PROGRESS_EVENT,
    serialize_display_record,
)

pytestmark = pytest.mark.anyio


class FakeWebSocket:
    def __init__(self, *, broken: bool = False) -> None:
        self.accepted = False
        self.sent: list[dict] = []
        self.broken = broken

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.broken:
            raise RuntimeError("connection closed")
        self.sent.append(message)


async def test_manager_drops_connections_that_fail() -> None:
    manager = NotificationConnectionManager()
    healthy, broken = FakeWebSocket(), FakeWebSocket(broken=True)
    await manager.connect(7, healthy)
    await manager.connect(7, broken)

    await manager.send_to_user(7, {"type": "ping"})

    assert healthy.accepted is True
    assert healthy.sent == [{"type": "ping"}]
    assert manager.connection_count(7) == 1

    manager.disconnect(7, healthy)
    assert manager.connection_count(7) == 0


async def test_progress_events_reach_the_admin_connections() -> None:
    manager = NotificationConnectionManager()
    websocket = FakeWebSocket()
    await manager.connect(100, websocket)
    publisher = RealtimeEventPublisher(manager)

    publisher.dispatch_progress(100, "Enviando 1/2…")
    assert publisher.pending_sends == 1
    await publisher.wait_for_pending()

    assert publisher.pending_sends == 0

    assert websocket.sent == [{"type": PROGRESS_EVENT, "data": {"text": "Enviando 1/2…"}}]


async def test_feed_is_pushed_to_a_single_connection() -> None:
    manager = NotificationConnectionManager()
    target, other = FakeWebSocket(), FakeWebSocket()
    await manager.connect(1, target)
    await manager.connect(1, other)
    record = DisplayRecord(
        id="b1",
        title="Rebajas",
        message="20%",
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        is_read=False,
        is_broadcast=True,
    )

    publisher = RealtimeEventPublisher(manager)
    publisher.dispatch_feed(1, target, [record], 0)
    await publisher.wait_for_pending()

    assert target.sent == [
        {"type": FEED_EVENT, "data": [serialize_display_record(record)], "unread_count": 0}
    ]
    assert target.sent[0]["data"][0]["timestamp"] == "2024-05-01T12:00:00+00:00"
    assert other.sent == []


async def test_scheduled_sends_are_kept_alive_until_done() -> None:
    manager = NotificationConnectionManager()
    websocket = FakeWebSocket()
    await manager.connect(5, websocket)
    publisher = RealtimeEventPublisher(manager)

    for done in range(1, 4):
        publisher.dispatch_progress(5, f"Enviando {done}/3…")
    gc.collect()
    await publisher.wait_for_pending()

    assert [message["data"]["text"] for message in websocket.sent] == [
        "Enviando 1/3…",
        "Enviando 2/3…",
        "Enviando 3/3…",
    ]
