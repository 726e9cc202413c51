"""Tests for application settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from storefront.config import (
    DEFAULT_FANOUT_CONCURRENCY,
    DEFAULT_WRITE_TIMEOUT_SECONDS,
    Settings,
)

BASE = {
    "database_url": "sqlite:///storefront.db",
    "secret_key": "secret",
    "access_token_expire_minutes": 30,
}


def test_notification_defaults() -> None:
    settings = Settings(_env_file=None, **BASE)

    assert settings.notification_fanout_concurrency == DEFAULT_FANOUT_CONCURRENCY == 20
    assert settings.notification_write_timeout_seconds == DEFAULT_WRITE_TIMEOUT_SECONDS == 8.0
    assert settings.broadcast_history_limit == 50


@pytest.mark.parametrize(
    "overrides",
    [
        {"notification_fanout_concurrency": 0},
        {"notification_write_timeout_seconds": 0},
        {"sendgrid_api_key": "SG.key"},
        {"sendgrid_sender": "tienda@example.com"},
        {"sendgrid_api_key": "SG.key", "sendgrid_sender": "not-an-email"},
    ],
)
def test_invalid_settings_are_rejected(overrides) -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **BASE, **overrides)


def test_sendgrid_pair_is_accepted() -> None:
    settings = Settings(
        _env_file=None, **BASE, sendgrid_api_key="SG.key", sendgrid_sender="tienda@example.com"
    )

    assert settings.sendgrid_sender == "tienda@example.com"
