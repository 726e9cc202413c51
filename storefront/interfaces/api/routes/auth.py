"""Endpoints relacionados con autenticación."""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Form, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from storefront.application.use_cases.users import AuthenticationStatus, authenticate_user
from storefront.config import get_settings
from storefront.domain.entities import ROLE_ADMIN, ROLE_CUSTOMER
from storefront.infrastructure.database import get_db
from storefront.infrastructure.repositories import UserRepository
from storefront.infrastructure.security import create_access_token
from storefront.interfaces.api.schemas import Token

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    intended_role: str = Form(ROLE_CUSTOMER),
    db: Session = Depends(get_db),
) -> Token:
    """Autentica al usuario para el rol indicado y devuelve un token JWT."""

    intended_role = intended_role.strip().lower()
    if intended_role not in (ROLE_ADMIN, ROLE_CUSTOMER):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rol solicitado no válido",
        )

    user, auth_status = authenticate_user(
        db, form_data.username, form_data.password, intended_role
    )

    if auth_status is AuthenticationStatus.INVALID_CREDENTIALS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales incorrectas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if auth_status is AuthenticationStatus.INACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo",
        )

    if auth_status is AuthenticationStatus.ROLE_MISMATCH:
        logger.info(
            "User %s attempted to sign in as %s with role %s",
            user.email,
            intended_role,
            user.role.alias,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="El usuario no tiene acceso con el rol solicitado",
        )

    settings = get_settings()
    access_token = create_access_token(
        data={"sub": user.email, "role": user.role.alias},
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
    )
    UserRepository(db).record_login(user.id)
    return Token(access_token=access_token, token_type="bearer", role=user.role.alias)


__all__ = ["router"]
