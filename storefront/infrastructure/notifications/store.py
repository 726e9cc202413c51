"""SQL-backed implementation of the notification store boundary."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Hashable, Sequence
from functools import partial
from typing import Any, TypeVar

import anyio
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from storefront.domain.entities import BroadcastRecord, NotificationRecord, Recipient
from storefront.domain.exceptions import BroadcastFailed
from storefront.infrastructure.repositories import (
    BroadcastRepository,
    NotificationRepository,
    UserRepository,
)

from .subscriptions import SubscriptionRegistry

T = TypeVar("T")

_BROADCASTS_KEY = "broadcasts"

logger = logging.getLogger(__name__)


class SqlNotificationStore:
    """Run repository calls in worker threads and publish stream snapshots.

    Each call opens its own session. Worker threads are abandoned when the
    awaiting task is cancelled, so a timed-out write may still be committed
    afterwards.

    Subscribers are served by background tasks started after a change is
    committed. Reading or delivering a snapshot never affects the result of
    the write that triggered it. Publications for one stream run one at a
    time in the order they were started, so the last snapshot a listener
    receives is never older than a previous one.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        broadcast_limit: int | None = 50,
    ) -> None:
        self._session_factory = session_factory
        self._broadcast_limit = broadcast_limit
        self._personal_streams = SubscriptionRegistry()
        self._broadcast_stream = SubscriptionRegistry()
        self._publication_locks: defaultdict[Hashable, anyio.Lock] = defaultdict(anyio.Lock)
        self._publications: set[asyncio.Task] = set()

    async def list_recipients(self) -> Sequence[Recipient]:
        return await self._run(lambda session: UserRepository(session).list_recipients())

    async def append_notification(
        self, recipient_id: int, record: NotificationRecord
    ) -> None:
        created = await self._run(
            lambda session: NotificationRepository(session).append(recipient_id, record)
        )
        if not created:
            logger.debug(
                "Notification %s already stored for user %s", record.id, recipient_id
            )
        self._publish_personal(recipient_id)

    async def append_broadcast(self, record: BroadcastRecord) -> bool:
        try:
            await self._run(lambda session: BroadcastRepository(session).create(record))
        except SQLAlchemyError as exc:
            raise BroadcastFailed(f"Could not store broadcast {record.id}") from exc
        self._publish_broadcasts()
        return True

    async def list_notifications(self, recipient_id: int) -> Sequence[NotificationRecord]:
        return await self._run(
            lambda session: NotificationRepository(session).list_for_user(recipient_id)
        )

    async def list_broadcasts(self) -> Sequence[BroadcastRecord]:
        return await self._run(
            lambda session: BroadcastRepository(session).list_latest(
                limit=self._broadcast_limit
            )
        )

    async def mark_all_as_read(self, recipient_id: int) -> int:
        updated = await self._run(
            lambda session: NotificationRepository(session).mark_all_as_read(recipient_id)
        )
        self._publish_personal(recipient_id)
        return updated

    def subscribe_notifications(
        self,
        recipient_id: int,
        callback: Callable[[Sequence[NotificationRecord]], None],
    ) -> Callable[[], None]:
        return self._personal_streams.subscribe(recipient_id, callback)

    def subscribe_broadcasts(
        self, callback: Callable[[Sequence[BroadcastRecord]], None]
    ) -> Callable[[], None]:
        return self._broadcast_stream.subscribe(_BROADCASTS_KEY, callback)

    async def wait_for_publications(self) -> None:
        """Wait until every scheduled snapshot publication has finished."""

        while self._publications:
            await asyncio.gather(*list(self._publications), return_exceptions=True)

    def _publish_personal(self, recipient_id: int) -> None:
        self._schedule_publication(
            self._personal_streams,
            recipient_id,
            lambda: self.list_notifications(recipient_id),
        )

    def _publish_broadcasts(self) -> None:
        self._schedule_publication(
            self._broadcast_stream, _BROADCASTS_KEY, self.list_broadcasts
        )

    def _schedule_publication(
        self,
        registry: SubscriptionRegistry,
        key: Hashable,
        read_snapshot: Callable[[], Awaitable[Sequence[Any]]],
    ) -> None:
        if not registry.has_listeners(key):
            return
        lock = self._publication_locks[(id(registry), key)]
        task = asyncio.get_running_loop().create_task(
            self._publish(registry, key, read_snapshot, lock)
        )
        self._publications.add(task)
        task.add_done_callback(self._publications.discard)

    async def _publish(
        self,
        registry: SubscriptionRegistry,
        key: Hashable,
        read_snapshot: Callable[[], Awaitable[Sequence[Any]]],
        lock: anyio.Lock,
    ) -> None:
        async with lock:
            try:
                snapshot = await read_snapshot()
            except Exception:
                logger.exception("Could not read the %r snapshot for subscribers", key)
                return
            registry.publish(key, snapshot)

    async def _run(self, func: Callable[[Session], T]) -> T:
        return await anyio.to_thread.run_sync(
            partial(self._in_session, func), abandon_on_cancel=True
        )

    def _in_session(self, func: Callable[[Session], Any]) -> Any:
        session = self._session_factory()
        try:
            return func(session)
        finally:
            session.close()


__all__ = ["SqlNotificationStore"]
