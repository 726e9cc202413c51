"""Helpers for working with timezone-aware datetimes."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from functools import lru_cache
from typing import Final

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from storefront.config import get_settings

_DEFAULT_TIMEZONE: Final[str] = "UTC"

# Sort key used for records whose timestamp has not been assigned by the store.
PENDING_TIMESTAMP: Final[datetime] = datetime.max.replace(tzinfo=timezone.utc)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the timezone configured through ``APP_TIMEZONE``.

    Unknown names fall back to UTC so a typo in the environment never breaks
    notification timestamps.
    """

    settings = get_settings()
    tz_name = (settings.app_timezone or "").strip() or _DEFAULT_TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return timezone.utc


def now_in_app_timezone() -> datetime:
    """Return the current time localized to the configured timezone."""

    return datetime.now(tz=get_app_timezone())


def now_in_app_naive_datetime() -> datetime:
    """Return the current localized time without ``tzinfo`` (column default)."""

    return now_in_app_timezone().replace(tzinfo=None)


def ensure_app_timezone(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in the configured timezone."""

    if value is None:
        return None

    tz = get_app_timezone()
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value.astimezone(tz)


def ensure_app_naive_datetime(value: datetime | None) -> datetime | None:
    """Return ``value`` localized to the app timezone but without ``tzinfo``.

    The ``DateTime`` columns are declared without timezone support, so the
    domain works with aware datetimes and the database stores the localized
    naive representation.
    """

    localized = ensure_app_timezone(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)


def timestamp_sort_key(value: datetime | None) -> datetime:
    """Return a comparable key where pending (``None``) timestamps are the newest."""

    if value is None:
        return PENDING_TIMESTAMP
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value
