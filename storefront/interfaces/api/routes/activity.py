"""Endpoint reporting background activity of the back-office."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from storefront.application.activity import ActivityTracker
from storefront.domain.entities import User
from storefront.interfaces.api.dependencies import get_activity_tracker, require_admin
from storefront.interfaces.api.schemas import ActivityRead

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("", response_model=ActivityRead)
def read_activity(
    activity: ActivityTracker = Depends(get_activity_tracker),
    _: User = Depends(require_admin),
) -> ActivityRead:
    """Return whether long-running operations such as a fan-out are in progress."""

    return ActivityRead(busy=activity.busy, active_operations=activity.count)


__all__ = ["router"]
