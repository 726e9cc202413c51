"""Shared fixtures for the storefront test-suite."""

from __future__ import annotations

import os
import sys
import tempfile
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from pathlib import Path

import anyio
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read when ``storefront.infrastructure.database`` is imported.
_DB_DIR = Path(tempfile.mkdtemp(prefix="storefront-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'storefront.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from storefront.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_CUSTOMER,
    BroadcastRecord,
    NotificationRecord,
    Recipient,
    Role,
    User,
)

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeNotificationStore:
    """In-memory stand-in for the notification store boundary.

    Per-recipient behaviour is configured through ``fail_for`` (appends
    raise), ``hang_for`` (appends never finish) and ``delays``.
    """

    def __init__(self, recipients=()) -> None:
        self.recipients = list(recipients)
        self.notifications: dict[int, list[NotificationRecord]] = defaultdict(list)
        self.broadcasts: list[BroadcastRecord] = []
        self.directory_calls = 0
        self.append_calls: list[int] = []
        self.fail_for: set[int] = set()
        self.hang_for: set[int] = set()
        self.delays: dict[int, float] = {}
        self.directory_error: Exception | None = None
        self.broadcast_error: Exception | None = None
        self.broadcast_result = True
        self.on_append = None
        self.in_flight = 0
        self.max_in_flight = 0
        self._clock = 0
        self._personal_listeners: dict[int, list] = defaultdict(list)
        self._broadcast_listeners: list = []

    def _next_timestamp(self) -> datetime:
        self._clock += 1
        return BASE_TIME + timedelta(seconds=self._clock)

    async def list_recipients(self):
        self.directory_calls += 1
        if self.directory_error is not None:
            raise self.directory_error
        return list(self.recipients)

    async def append_notification(self, recipient_id, record):
        self.append_calls.append(recipient_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_append is not None:
                self.on_append(recipient_id)
            await anyio.sleep(self.delays.get(recipient_id, 0))
            if recipient_id in self.hang_for:
                await anyio.sleep_forever()
            if recipient_id in self.fail_for:
                raise ConnectionError(f"write rejected for {recipient_id}")
            stored = self.notifications[recipient_id]
            if all(existing.id != record.id for existing in stored):
                stored.append(
                    NotificationRecord(
                        id=record.id,
                        title=record.title,
                        message=record.message,
                        timestamp=self._next_timestamp(),
                        is_read=record.is_read,
                    )
                )
        finally:
            self.in_flight -= 1
        for callback in list(self._personal_listeners[recipient_id]):
            callback(list(self.notifications[recipient_id]))

    async def append_broadcast(self, record):
        if self.broadcast_error is not None:
            raise self.broadcast_error
        if not self.broadcast_result:
            return False
        self.broadcasts.append(
            BroadcastRecord(
                id=record.id,
                title=record.title,
                message=record.message,
                timestamp=self._next_timestamp(),
            )
        )
        for callback in list(self._broadcast_listeners):
            callback(list(self.broadcasts))
        return True

    async def list_notifications(self, recipient_id):
        return list(self.notifications[recipient_id])

    async def list_broadcasts(self):
        return list(self.broadcasts)

    async def mark_all_as_read(self, recipient_id):
        updated = 0
        for record in self.notifications[recipient_id]:
            if not record.is_read:
                record.is_read = True
                updated += 1
        return updated

    def subscribe_notifications(self, recipient_id, callback):
        self._personal_listeners[recipient_id].append(callback)
        return lambda: self._personal_listeners[recipient_id].remove(callback)

    def subscribe_broadcasts(self, callback):
        self._broadcast_listeners.append(callback)
        return lambda: self._broadcast_listeners.remove(callback)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def recipients():
    return [
        Recipient(id=1, email="ana@example.com", name="Ana"),
        Recipient(id=2, email="bruno@example.com", name="Bruno"),
        Recipient(id=3, email=None, name="Carla"),
    ]


@pytest.fixture
def fake_store(recipients):
    return FakeNotificationStore(recipients)


def make_user(user_id: int, role_alias: str, *, is_active: bool = True) -> User:
    return User(
        id=user_id,
        role=Role(id=1 if role_alias == ROLE_ADMIN else 2, name=role_alias.title(), alias=role_alias),
        name=f"user-{user_id}",
        email=f"user{user_id}@example.com",
        password="not-a-real-hash",
        last_login=None,
        created_at=BASE_TIME,
        updated_at=None,
        is_active=is_active,
    )


@pytest.fixture
def admin_user():
    return make_user(100, ROLE_ADMIN)


@pytest.fixture
def customer_user():
    return make_user(1, ROLE_CUSTOMER)


@pytest.fixture
def store_factory():
    return FakeNotificationStore
