"""Persistence layer for user data."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session, joinedload

from storefront.domain.entities import Recipient, Role, User
from storefront.infrastructure.models import UserModel
from storefront.utils import ensure_app_naive_datetime, ensure_app_timezone, now_in_app_timezone


class UserRepository:
    """Provide CRUD operations for user entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self._get_model(id=user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self._get_model(email=email)
        return self._to_entity(model) if model else None

    def list_recipients(self) -> Sequence[Recipient]:
        """Return the directory of active users eligible for notifications."""

        query = (
            self.session.query(UserModel.id, UserModel.email, UserModel.name)
            .filter(UserModel.deleted.is_(False))
            .filter(UserModel.is_active.is_(True))
            .order_by(UserModel.id)
        )
        return [
            Recipient(id=user_id, email=email, name=name)
            for user_id, email, name in query.all()
        ]

    def create(self, user: User) -> User:
        model = UserModel(
            role_id=user.role.id,
            name=user.name,
            email=user.email,
            password=user.password,
            is_active=user.is_active,
            deleted=user.deleted,
        )
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def record_login(self, user_id: int) -> None:
        model = self._get_model(id=user_id)
        if model is None:
            return
        model.last_login = ensure_app_naive_datetime(now_in_app_timezone())
        self.session.add(model)
        self.session.commit()

    def _get_model(self, **filters) -> UserModel | None:
        return (
            self.session.query(UserModel)
            .options(joinedload(UserModel.role))
            .filter_by(deleted=False, **filters)
            .first()
        )

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        role = Role(id=model.role.id, name=model.role.name, alias=model.role.alias)
        return User(
            id=model.id,
            role=role,
            name=model.name,
            email=model.email,
            password=model.password,
            last_login=ensure_app_timezone(model.last_login),
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
            is_active=model.is_active,
            deleted=model.deleted,
            deleted_at=ensure_app_timezone(model.deleted_at),
        )


__all__ = ["UserRepository"]
