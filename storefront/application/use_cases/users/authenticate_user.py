"""Use case for authenticating a user against the role they intend to use."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from storefront.infrastructure.repositories import UserRepository
from storefront.infrastructure.security import verify_password


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a user."""

    SUCCESS = auto()
    INVALID_CREDENTIALS = auto()
    INACTIVE = auto()
    ROLE_MISMATCH = auto()


def authenticate_user(session: Session, email: str, password: str, intended_role: str):
    """Return the authentication result along with the user when possible.

    ``intended_role`` is the role the caller is signing in as (the admin
    console or the storefront); it must match the role stored for the user.
    """

    repository = UserRepository(session)
    user = repository.get_by_email(email)

    if not user:
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not verify_password(password, user.password):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    if not user.is_active:
        return user, AuthenticationStatus.INACTIVE

    if not user.has_role(intended_role):
        return user, AuthenticationStatus.ROLE_MISMATCH

    return user, AuthenticationStatus.SUCCESS
