"""Persist one announcement into a single recipient's notification list."""

from __future__ import annotations

import asyncio
import logging
import secrets
import time
from collections.abc import Callable

import anyio

from storefront.config import DEFAULT_WRITE_TIMEOUT_SECONDS
from storefront.domain.entities import Announcement, NotificationRecord, Recipient
from storefront.domain.exceptions import DeliveryFailed, DeliveryTimeout

from .ports import NotificationStore

EmailSender = Callable[[str, str, str], bool]

logger = logging.getLogger(__name__)


def build_notification_id(recipient_id: object) -> str:
    """Return an id unique across concurrent sends to the same recipient."""

    return f"{time.time_ns() // 1_000_000}_{recipient_id}_{secrets.token_hex(4)}"


class NotificationWriter:
    """Append announcements to personal notification lists with a timeout.

    A write that times out is reported as :class:`DeliveryTimeout` even though
    the store may still complete it later; appends are idempotent per record
    id, so the worst case is a duplicate delivery.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        timeout: float = DEFAULT_WRITE_TIMEOUT_SECONDS,
        email_sender: EmailSender | None = None,
    ) -> None:
        self._store = store
        self._timeout = timeout
        self._email_sender = email_sender
        self._background: set[asyncio.Task] = set()

    def build_record(
        self, recipient: Recipient, announcement: Announcement
    ) -> NotificationRecord:
        return NotificationRecord(
            id=build_notification_id(recipient.id),
            title=announcement.title,
            message=announcement.message,
            timestamp=None,
            is_read=False,
        )

    async def write_to(
        self,
        recipient: Recipient,
        announcement: Announcement,
        timeout: float | None = None,
    ) -> NotificationRecord:
        """Store ``announcement`` for ``recipient`` and return the new record."""

        limit = self._timeout if timeout is None else timeout
        record = self.build_record(recipient, announcement)
        try:
            with anyio.fail_after(limit):
                await self._store.append_notification(recipient.id, record)
        except TimeoutError as exc:
            logger.warning(
                "Notification write for recipient %s timed out after %ss",
                recipient.id,
                limit,
            )
            raise DeliveryTimeout(recipient.id, limit) from exc
        except DeliveryFailed:
            raise
        except Exception as exc:
            logger.warning(
                "Notification write failed for recipient %s: %s", recipient.id, exc
            )
            raise DeliveryFailed(recipient.id) from exc

        if recipient.email and self._email_sender is not None:
            self._send_email_in_background(recipient, announcement)
        return record

    async def wait_for_background(self) -> None:
        """Wait until every scheduled email task has finished."""

        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    def _send_email_in_background(
        self, recipient: Recipient, announcement: Announcement
    ) -> None:
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._send_email(recipient, announcement))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _send_email(self, recipient: Recipient, announcement: Announcement) -> None:
        try:
            sent = await anyio.to_thread.run_sync(
                self._email_sender,
                recipient.email,
                announcement.title,
                announcement.message,
            )
        except Exception:
            logger.exception("Error sending announcement email to %s", recipient.email)
            return
        if not sent:
            logger.info("Announcement email to %s was not sent", recipient.email)


__all__ = ["EmailSender", "NotificationWriter", "build_notification_id"]
