"""Use case for creating users."""

from sqlalchemy.orm import Session

from storefront.domain.entities import ROLE_ADMIN, ROLE_CUSTOMER, User
from storefront.infrastructure.repositories import RoleRepository, UserRepository
from storefront.infrastructure.security import get_password_hash
from storefront.utils import now_in_app_timezone

ROLE_NAMES = {
    ROLE_ADMIN: "Administrador",
    ROLE_CUSTOMER: "Cliente",
}


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password: str,
    role_alias: str = ROLE_CUSTOMER,
) -> User:
    """Create a new user ensuring unique email addresses."""

    alias = role_alias.lower()
    if alias not in ROLE_NAMES:
        raise ValueError("Rol no permitido")

    repository = UserRepository(session)
    if repository.get_by_email(email):
        raise ValueError("El correo electrónico ya está registrado")

    role = RoleRepository(session).ensure(alias=alias, name=ROLE_NAMES[alias])

    user = User(
        id=None,
        role=role,
        name=name,
        email=email,
        password=get_password_hash(password),
        last_login=None,
        created_at=now_in_app_timezone(),
        updated_at=None,
        is_active=True,
    )
    return repository.create(user)
