"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from storefront.config import get_settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def _engine_options(database_url: str) -> dict[str, Any]:
    """Return engine keyword arguments suited to ``database_url``."""

    if database_url.startswith("sqlite"):
        # Store calls run in worker threads.
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def create_database_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``."""

    return create_engine(database_url, **_engine_options(database_url))


def create_session_factory(bind: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``bind``."""

    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


settings = get_settings()

engine = create_database_engine(settings.database_url)
SessionLocal = create_session_factory(engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from storefront.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


def get_db() -> Generator:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionLocal",
    "create_database_engine",
    "create_session_factory",
    "engine",
    "get_db",
    "initialize_database",
]
