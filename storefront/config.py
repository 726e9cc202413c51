"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"

# Ceiling of simultaneous per-user writes during a fan-out.
DEFAULT_FANOUT_CONCURRENCY = 20
DEFAULT_WRITE_TIMEOUT_SECONDS = 8.0


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending announcement emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of announcement emails",
        min_length=3,
    )
    app_timezone: str | None = Field(
        default=None,
        description="IANA timezone used to localize notification timestamps",
    )
    notification_fanout_concurrency: int = Field(
        default=DEFAULT_FANOUT_CONCURRENCY,
        description="Maximum number of per-user notification writes in flight",
        gt=0,
    )
    notification_write_timeout_seconds: float = Field(
        default=DEFAULT_WRITE_TIMEOUT_SECONDS,
        description="Seconds to wait for a per-user notification write before giving up",
        gt=0,
    )
    broadcast_history_limit: int = Field(
        default=50,
        description="Number of latest broadcasts merged into each user's feed",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "DEFAULT_FANOUT_CONCURRENCY",
    "DEFAULT_WRITE_TIMEOUT_SECONDS",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
