"""Boundary between the notification use cases and the backing store."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from storefront.domain.entities import BroadcastRecord, NotificationRecord, Recipient

NotificationsListener = Callable[[Sequence[NotificationRecord]], None]
BroadcastsListener = Callable[[Sequence[BroadcastRecord]], None]
Unsubscribe = Callable[[], None]


class NotificationStore(Protocol):
    """Key-document store holding personal notifications and broadcasts.

    Listeners receive the full current snapshot of the stream they follow
    after every change; callers read the initial snapshot themselves.
    """

    async def list_recipients(self) -> Sequence[Recipient]:
        ...

    async def append_notification(
        self, recipient_id: int, record: NotificationRecord
    ) -> None:
        ...

    async def append_broadcast(self, record: BroadcastRecord) -> bool:
        ...

    async def list_notifications(self, recipient_id: int) -> Sequence[NotificationRecord]:
        ...

    async def list_broadcasts(self) -> Sequence[BroadcastRecord]:
        ...

    async def mark_all_as_read(self, recipient_id: int) -> int:
        ...

    def subscribe_notifications(
        self, recipient_id: int, callback: NotificationsListener
    ) -> Unsubscribe:
        ...

    def subscribe_broadcasts(self, callback: BroadcastsListener) -> Unsubscribe:
        ...


__all__ = [
    "BroadcastsListener",
    "NotificationStore",
    "NotificationsListener",
    "Unsubscribe",
]
