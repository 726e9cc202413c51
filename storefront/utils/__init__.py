"""Utility helpers for reusable functionality."""

from .datetime import (
    PENDING_TIMESTAMP,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    get_app_timezone,
    now_in_app_naive_datetime,
    now_in_app_timezone,
    timestamp_sort_key,
)

__all__ = [
    "PENDING_TIMESTAMP",
    "ensure_app_naive_datetime",
    "ensure_app_timezone",
    "get_app_timezone",
    "now_in_app_naive_datetime",
    "now_in_app_timezone",
    "timestamp_sort_key",
]
