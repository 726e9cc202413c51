"""Bootstrap a storefront account, typically the first administrator.

Usage::

    python scripts/create_initial_user.py admin@tienda.com --admin
"""

from __future__ import annotations

import argparse
import os
from getpass import getpass
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError

from storefront.application.use_cases.users import create_user
from storefront.domain.entities import ROLE_ADMIN, ROLE_CUSTOMER
from storefront.infrastructure.database import SessionLocal, initialize_database

PASSWORD_ENV_VAR = "STOREFRONT_INITIAL_PASSWORD"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a storefront account.")
    parser.add_argument("email", help="Correo con el que iniciará sesión")
    parser.add_argument(
        "--name",
        help="Nombre visible; por defecto la parte local del correo",
    )
    parser.add_argument(
        "--admin",
        action="store_true",
        help="Crear la cuenta con rol de administrador",
    )
    return parser


def resolve_password() -> str:
    """Read the password from the environment or prompt for it twice."""

    password = os.environ.get(PASSWORD_ENV_VAR)
    if password:
        return password
    password = getpass("Contraseña: ")
    if password != getpass("Repite la contraseña: "):
        raise SystemExit("Las contraseñas no coinciden.")
    return password


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    password = resolve_password()
    if not password:
        raise SystemExit("La contraseña no puede estar vacía.")

    initialize_database()
    with SessionLocal() as session:
        try:
            user = create_user(
                session,
                name=args.name or args.email.split("@", 1)[0],
                email=args.email,
                password=password,
                role_alias=ROLE_ADMIN if args.admin else ROLE_CUSTOMER,
            )
        except (ValueError, SQLAlchemyError) as exc:
            session.rollback()
            raise SystemExit(f"No se pudo crear la cuenta: {exc}") from exc

    print(f"Cuenta {user.email} creada con id {user.id} (rol {user.role.alias}).")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
