"""Tests for the account bootstrap script."""

from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest

from storefront.infrastructure.database import Base, SessionLocal, engine, initialize_database
from storefront.infrastructure.repositories import UserRepository
from storefront.infrastructure.security import verify_password

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "create_initial_user.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("create_initial_user", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def password(monkeypatch, script):
    monkeypatch.setenv(script.PASSWORD_ENV_VAR, "StrongPass123")
    return "StrongPass123"


def _stored(email: str):
    with SessionLocal() as session:
        return UserRepository(session).get_by_email(email)


def test_creates_an_administrator(script, password, capsys) -> None:
    assert script.main(["admin@tienda.com", "--admin", "--name", "Dueña"]) == 0

    user = _stored("admin@tienda.com")
    assert user.role.alias == "admin"
    assert user.name == "Dueña"
    assert verify_password(password, user.password)
    assert "admin@tienda.com" in capsys.readouterr().out


def test_defaults_to_a_customer_named_after_the_email(script, password) -> None:
    script.main(["ana@tienda.com"])

    user = _stored("ana@tienda.com")
    assert user.role.alias == "customer"
    assert user.name == "ana"


def test_duplicate_email_exits_with_an_error(script, password) -> None:
    script.main(["ana@tienda.com"])

    with pytest.raises(SystemExit, match="ya está registrado"):
        script.main(["ana@tienda.com"])


def test_mismatched_prompted_passwords_abort(script, monkeypatch) -> None:
    monkeypatch.delenv(script.PASSWORD_ENV_VAR, raising=False)
    answers = iter(["uno", "dos"])
    monkeypatch.setattr(script, "getpass", lambda prompt: next(answers))

    with pytest.raises(SystemExit, match="no coinciden"):
        script.main(["ana@tienda.com"])

    assert _stored("ana@tienda.com") is None
