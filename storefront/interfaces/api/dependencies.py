"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from storefront.application.activity import ActivityTracker
from storefront.application.use_cases.notifications import NotificationStore
from storefront.application.use_cases.notifications.writer import EmailSender
from storefront.config import get_settings
from storefront.domain.entities import User
from storefront.infrastructure.database import get_db
from storefront.infrastructure.email import send_announcement_email
from storefront.infrastructure.notifications import (
    RealtimeEventPublisher,
    realtime_event_publisher,
)
from storefront.infrastructure.repositories import UserRepository
from storefront.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _credentials_error(detail: str = "Credenciales inválidas") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> User:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _credentials_error() from exc

    email = payload.get("sub")
    if not isinstance(email, str) or not email:
        raise _credentials_error()

    user = UserRepository(db).get_by_email(email)
    if user is None:
        raise _credentials_error("Usuario no encontrado")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Usuario inactivo",
        )
    return current_user


def require_admin(current_user: User = Depends(get_current_active_user)) -> User:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No autorizado",
        )
    return current_user


def get_notification_store(request: Request) -> NotificationStore:
    """Return the notification store configured for the application."""

    return request.app.state.notification_store


def get_activity_tracker(request: Request) -> ActivityTracker:
    """Return the activity tracker owned by the application."""

    return request.app.state.activity


def get_realtime_publisher() -> RealtimeEventPublisher:
    return realtime_event_publisher


def get_email_sender() -> EmailSender | None:
    """Return the announcement email sender when SendGrid is configured."""

    settings = get_settings()
    if not (settings.sendgrid_api_key and settings.sendgrid_sender):
        return None
    return send_announcement_email
