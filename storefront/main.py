"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.application.activity import ActivityTracker
from storefront.application.use_cases.notifications import NotificationStore
from storefront.config import get_settings
from storefront.infrastructure.database import SessionLocal, engine, initialize_database
from storefront.infrastructure.notifications import SqlNotificationStore
from storefront.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


def _log_activity_change(busy: bool) -> None:
    logger.info("Back-office activity %s", "started" if busy else "finished")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Inicializa la base de datos al arrancar y libera los recursos al cerrar."""

    initialize_database()
    yield
    engine.dispose()


def create_app(
    *,
    notification_store: NotificationStore | None = None,
    activity: ActivityTracker | None = None,
) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI."""

    settings = get_settings()
    app = FastAPI(lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.notification_store = notification_store or SqlNotificationStore(
        SessionLocal, broadcast_limit=settings.broadcast_history_limit
    )
    app.state.activity = activity or ActivityTracker(on_change=_log_activity_change)

    register_routes(app)
    return app
