from fastapi import FastAPI

from .activity import router as activity_router
from .admin_notifications import router as admin_notifications_router
from .auth import router as auth_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(auth_router)
    app.include_router(notifications_router)
    app.include_router(admin_notifications_router)
    app.include_router(activity_router)
