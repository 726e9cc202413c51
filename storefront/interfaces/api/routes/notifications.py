"""Endpoints and websocket handler for the user's notification feed."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from storefront.application.use_cases.notifications import (
    NotificationFeed,
    NotificationStore,
    count_unread,
    mark_all_as_read,
    merge_notifications,
)
from storefront.domain.entities import DisplayRecord, User
from storefront.infrastructure.database import SessionLocal
from storefront.infrastructure.notifications import notification_manager, realtime_event_publisher
from storefront.interfaces.api.dependencies import (
    get_current_active_user,
    get_notification_store,
    resolve_current_user,
)
from storefront.interfaces.api.schemas import (
    NotificationFeedRead,
    NotificationMarkReadResponse,
    NotificationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _record_to_schema(record: DisplayRecord) -> NotificationRead:
    return NotificationRead(
        id=record.id,
        title=record.title,
        message=record.message,
        timestamp=record.timestamp,
        is_read=record.is_read,
        is_broadcast=record.is_broadcast,
    )


@router.get("/", response_model=NotificationFeedRead)
async def list_notifications(
    current_user: User = Depends(get_current_active_user),
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationFeedRead:
    """Return personal notifications and broadcasts, newest first."""

    personal = await store.list_notifications(current_user.id)
    broadcasts = await store.list_broadcasts()
    view = merge_notifications(personal, broadcasts)
    return NotificationFeedRead(
        items=[_record_to_schema(record) for record in view],
        unread_count=count_unread(view),
    )


@router.post("/mark-read", response_model=NotificationMarkReadResponse)
async def mark_notifications_as_read(
    current_user: User = Depends(get_current_active_user),
    store: NotificationStore = Depends(get_notification_store),
) -> NotificationMarkReadResponse:
    """Mark every personal notification of the current user as read."""

    updated = await mark_all_as_read(store, current_user.id)
    return NotificationMarkReadResponse(updated=updated)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream the merged feed whenever personal notifications or broadcasts change."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return

    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    except HTTPException:
        await websocket.close(code=1008)
        return
    finally:
        session.close()

    if not user.is_active:
        await websocket.close(code=1008)
        return

    store: NotificationStore = websocket.app.state.notification_store
    await notification_manager.connect(user.id, websocket)

    feed = NotificationFeed(
        lambda view: realtime_event_publisher.dispatch_feed(
            user.id, websocket, view, count_unread(view)
        )
    )
    unsubscribe_personal = store.subscribe_notifications(user.id, feed.update_personal)
    unsubscribe_broadcasts = store.subscribe_broadcasts(feed.update_broadcasts)
    try:
        feed.load(
            await store.list_notifications(user.id),
            await store.list_broadcasts(),
        )
        while True:
            try:
                message = await websocket.receive_json()
            except (json.JSONDecodeError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
            elif message_type == "mark_read":
                await mark_all_as_read(store, user.id)
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for user %s", user.id)
    finally:
        unsubscribe_personal()
        unsubscribe_broadcasts()
        notification_manager.disconnect(user.id, websocket)


__all__ = ["router"]
