"""Persistence helpers for shared broadcasts."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from storefront.domain.entities import BroadcastRecord
from storefront.infrastructure.models import BroadcastModel
from storefront.utils import ensure_app_naive_datetime, ensure_app_timezone


class BroadcastRepository:
    """Store and read the broadcast log."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, record: BroadcastRecord) -> BroadcastRecord:
        model = BroadcastModel(id=record.id, title=record.title, message=record.message)
        if record.timestamp is not None:
            model.created_at = ensure_app_naive_datetime(record.timestamp)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_latest(self, *, limit: int | None = 50) -> Sequence[BroadcastRecord]:
        query = self.session.query(BroadcastModel).order_by(
            BroadcastModel.created_at.desc(), BroadcastModel.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    @staticmethod
    def _to_entity(model: BroadcastModel) -> BroadcastRecord:
        return BroadcastRecord(
            id=model.id,
            title=model.title,
            message=model.message,
            timestamp=ensure_app_timezone(model.created_at),
        )


__all__ = ["BroadcastRepository"]
