"""Endpoint used by administrators to notify every user."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from storefront.application.activity import ActivityTracker
from storefront.application.use_cases.notifications import NotificationFanout, NotificationStore
from storefront.application.use_cases.notifications.writer import EmailSender
from storefront.config import get_settings
from storefront.domain.entities import Announcement, User
from storefront.domain.exceptions import DirectoryFetchFailed, InvalidArgument, Unauthorized
from storefront.infrastructure.notifications import RealtimeEventPublisher
from storefront.interfaces.api.dependencies import (
    get_activity_tracker,
    get_email_sender,
    get_notification_store,
    get_realtime_publisher,
    require_admin,
)
from storefront.interfaces.api.routes_helpers import describe_send_summary
from storefront.interfaces.api.schemas import AnnouncementCreate, AnnouncementSendResponse

router = APIRouter(prefix="/admin/notifications", tags=["admin"])
logger = logging.getLogger(__name__)


class _ProgressReporter:
    """Keep the progress texts of one send and push them to the admin's sockets."""

    def __init__(self, publisher: RealtimeEventPublisher, user_id: int) -> None:
        self._publisher = publisher
        self._user_id = user_id
        self.messages: list[str] = []

    def __call__(self, text: str) -> None:
        self.messages.append(text)
        self._publisher.dispatch_progress(self._user_id, text)


@router.post("", response_model=AnnouncementSendResponse)
async def send_notification_to_all_users(
    payload: AnnouncementCreate,
    current_user: User = Depends(require_admin),
    store: NotificationStore = Depends(get_notification_store),
    activity: ActivityTracker = Depends(get_activity_tracker),
    email_sender: EmailSender | None = Depends(get_email_sender),
    publisher: RealtimeEventPublisher = Depends(get_realtime_publisher),
) -> AnnouncementSendResponse:
    """Envía la notificación a todos los usuarios y resume el resultado."""

    settings = get_settings()
    fanout = NotificationFanout(
        store,
        caller_role=lambda: current_user.role.alias,
        concurrency=settings.notification_fanout_concurrency,
        write_timeout=settings.notification_write_timeout_seconds,
        email_sender=email_sender,
        activity=activity,
    )
    progress = _ProgressReporter(publisher, current_user.id)

    try:
        summary = await fanout.send_to_all(
            Announcement(title=payload.title, message=payload.message), progress
        )
    except Unauthorized as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except InvalidArgument as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except DirectoryFetchFailed as exc:
        logger.error("Announcement from user %s aborted: %s", current_user.id, exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return AnnouncementSendResponse(
        total=summary.total,
        failed=summary.failed,
        broadcast_ok=summary.broadcast_ok,
        status=summary.status.value,
        message=describe_send_summary(summary),
        progress=progress.messages,
    )


__all__ = ["router"]
