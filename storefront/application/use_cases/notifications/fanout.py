"""Deliver an announcement to every registered user."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import nullcontext

from storefront.application.activity import ActivityTracker
from storefront.config import DEFAULT_FANOUT_CONCURRENCY, DEFAULT_WRITE_TIMEOUT_SECONDS
from storefront.domain.entities import ROLE_ADMIN, Announcement, Recipient, SendSummary
from storefront.domain.exceptions import DirectoryFetchFailed, InvalidArgument, Unauthorized

from .batch_runner import ProgressCallback, progress_message, report_progress, run_with_concurrency
from .broadcast import BroadcastRecorder
from .ports import NotificationStore
from .writer import EmailSender, NotificationWriter

logger = logging.getLogger(__name__)

PROGRESS_FETCHING = "Obteniendo usuarios…"
PROGRESS_NO_RECIPIENTS = "No se encontraron usuarios"
PROGRESS_BROADCAST_ONLY = "Enviado mediante difusión"


def validate_announcement(announcement: Announcement) -> Announcement:
    """Return ``announcement`` with trimmed fields, rejecting empty values."""

    title = (announcement.title or "").strip()
    message = (announcement.message or "").strip()
    if not title:
        raise InvalidArgument("El título de la notificación es obligatorio")
    if not message:
        raise InvalidArgument("El mensaje de la notificación es obligatorio")
    return Announcement(title=title, message=message)


class NotificationFanout:
    """Best-effort delivery of one announcement to all users.

    Every recipient gets a personal copy through :class:`NotificationWriter`
    with at most ``concurrency`` writes in flight, and one shared broadcast
    copy is recorded regardless of the per-user outcomes.
    """

    def __init__(
        self,
        store: NotificationStore,
        *,
        caller_role: Callable[[], str | None],
        concurrency: int = DEFAULT_FANOUT_CONCURRENCY,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT_SECONDS,
        email_sender: EmailSender | None = None,
        activity: ActivityTracker | None = None,
    ) -> None:
        if concurrency < 1:
            raise InvalidArgument(f"concurrency must be >= 1, got {concurrency}")
        self._store = store
        self._caller_role = caller_role
        self._concurrency = concurrency
        self._activity = activity
        self.writer = NotificationWriter(
            store, timeout=write_timeout, email_sender=email_sender
        )
        self.recorder = BroadcastRecorder(store)

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def send_to_all(
        self,
        announcement: Announcement,
        on_progress: ProgressCallback | None = None,
    ) -> SendSummary:
        """Fan ``announcement`` out and return the aggregated summary.

        Raises:
            Unauthorized: The caller is not an administrator.
            InvalidArgument: The title or message is empty.
            DirectoryFetchFailed: The recipients could not be listed.
        """

        role = self._caller_role()
        if not role or role.lower() != ROLE_ADMIN:
            raise Unauthorized("Solo los administradores pueden enviar notificaciones")
        announcement = validate_announcement(announcement)

        scope = self._activity.track() if self._activity is not None else nullcontext()
        async with scope:
            return await self._send(announcement, on_progress)

    async def _send(
        self, announcement: Announcement, on_progress: ProgressCallback | None
    ) -> SendSummary:
        report_progress(on_progress, PROGRESS_FETCHING)
        try:
            recipients = list(await self._store.list_recipients())
        except Exception as exc:
            logger.error("Could not load the recipient directory: %s", exc)
            raise DirectoryFetchFailed("No se pudo obtener la lista de usuarios") from exc

        total = len(recipients)
        if total == 0:
            report_progress(on_progress, PROGRESS_NO_RECIPIENTS)
            logger.info("Announcement %r skipped: no recipients", announcement.title)
            return SendSummary(total=0, failed=0, broadcast_ok=False)

        report_progress(on_progress, progress_message(0, total))

        async def deliver(recipient: Recipient, _index: int):
            return await self.writer.write_to(recipient, announcement)

        results = await run_with_concurrency(
            recipients, deliver, self._concurrency, on_progress
        )
        failed = sum(1 for result in results if isinstance(result, Exception))

        broadcast_ok = await self.recorder.record_broadcast(announcement)

        summary = SendSummary(total=total, failed=failed, broadcast_ok=broadcast_ok)
        if failed == total and broadcast_ok:
            report_progress(on_progress, PROGRESS_BROADCAST_ONLY)

        logger.info(
            "Announcement %r sent: total=%s failed=%s broadcast_ok=%s status=%s",
            announcement.title,
            total,
            failed,
            broadcast_ok,
            summary.status.value,
        )
        return summary


__all__ = [
    "NotificationFanout",
    "PROGRESS_BROADCAST_ONLY",
    "PROGRESS_FETCHING",
    "PROGRESS_NO_RECIPIENTS",
    "validate_announcement",
]
