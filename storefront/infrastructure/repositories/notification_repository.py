"""Persistence helpers for personal notifications."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.domain.entities import NotificationRecord
from storefront.infrastructure.models import NotificationModel
from storefront.utils import ensure_app_naive_datetime, ensure_app_timezone


class NotificationRepository:
    """Append-only access to every user's personal notification list."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(
        self, user_id: int, *, limit: int | None = None
    ) -> Sequence[NotificationRecord]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.user_id == user_id)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def append(self, user_id: int, record: NotificationRecord) -> bool:
        """Add ``record`` to the user's list unless its id is already there.

        Returns ``True`` when a new row was written.
        """

        key = {"user_id": user_id, "id": record.id}
        if self.session.get(NotificationModel, key) is not None:
            return False

        model = NotificationModel(
            user_id=user_id,
            id=record.id,
            title=record.title,
            message=record.message,
            is_read=record.is_read,
        )
        if record.timestamp is not None:
            model.created_at = ensure_app_naive_datetime(record.timestamp)
        self.session.add(model)
        try:
            self.session.commit()
        except IntegrityError:
            # A concurrent append already stored the same record.
            self.session.rollback()
            return False
        return True

    def mark_all_as_read(self, user_id: int) -> int:
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.user_id == user_id,
                NotificationModel.is_read.is_(False),
            )
            .update({NotificationModel.is_read: True}, synchronize_session=False)
        )
        self.session.commit()
        return updated

    @staticmethod
    def _to_entity(model: NotificationModel) -> NotificationRecord:
        return NotificationRecord(
            id=model.id,
            title=model.title,
            message=model.message,
            timestamp=ensure_app_timezone(model.created_at),
            is_read=model.is_read,
        )


__all__ = ["NotificationRepository"]
