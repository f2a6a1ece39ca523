"""Repository for order submission Idempotency-Key records."""

from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.idempotency_record import IdempotencyRecord
from app.models.shared import utc_now


class IdempotencyRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_key(self, user_id: UUID, idempotency_key: str) -> IdempotencyRecord | None:
        return (
            self.db.query(IdempotencyRecord)
            .filter(
                IdempotencyRecord.user_id == user_id,
                IdempotencyRecord.idempotency_key == idempotency_key,
            )
            .first()
        )

    def create(
        self,
        *,
        user_id: UUID,
        idempotency_key: str,
        request_method: str,
        request_path: str,
        response_status: int | None = None,
        response_body: dict[str, Any] | None = None,
    ) -> IdempotencyRecord:
        record = IdempotencyRecord(
            user_id=user_id,
            idempotency_key=idempotency_key,
            request_method=request_method,
            request_path=request_path,
            response_status=response_status,
            response_body=response_body,
        )
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    def reserve(
        self,
        user_id: UUID,
        idempotency_key: str,
        request_method: str,
        request_path: str,
    ) -> IdempotencyRecord:
        """Return the record for this key, inserting a pending one if none exists.

        Two submissions racing on a fresh key both end up holding the same row.
        """
        existing = self.get_by_key(user_id, idempotency_key)
        if existing is not None:
            return existing
        try:
            return self.create(
                user_id=user_id,
                idempotency_key=idempotency_key,
                request_method=request_method,
                request_path=request_path,
            )
        except IntegrityError:
            self.db.rollback()
            winner = self.get_by_key(user_id, idempotency_key)
            if winner is None:
                raise
            return winner

    def update_response(
        self,
        record: IdempotencyRecord,
        response_status: int,
        response_body: dict[str, Any],
    ) -> IdempotencyRecord:
        record.response_status = response_status  # type: ignore[assignment]
        record.response_body = response_body  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete_expired(self, max_age_hours: int, now: datetime | None = None) -> int:
        """Delete records created more than ``max_age_hours`` before ``now``."""
        cutoff = (now or utc_now()) - timedelta(hours=max_age_hours)
        count = (
            self.db.query(IdempotencyRecord)
            .filter(IdempotencyRecord.created_at < cutoff)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return int(count)
