"""Tests for worker background tasks and cron job registration."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from app.core import database as db_module
from app.models.idempotency_record import IdempotencyRecord
from app.models.order import Order, OrderStatus
from app.repositories.idempotency_repository import IdempotencyRepository
from app.worker import (
    WorkerSettings,
    cleanup_idempotency_records_task,
    expire_unpaid_orders_task,
)
from tests.conftest import DEFAULT_USER_ID


def _order(db_session, merchant, number, payment_expires_at, status=OrderStatus.PENDING_PAYMENT):
    order = Order(
        order_number=number,
        user_id=DEFAULT_USER_ID,
        merchant_id=merchant.id,
        item_subtotal=Decimal("25.00"),
        delivery_fee=Decimal("5.00"),
        discount_amount=Decimal("0.00"),
        payable_amount=Decimal("30.00"),
        delivery_address={"name": "Ada"},
        status=status.value,
        payment_expires_at=payment_expires_at,
    )
    db_session.add(order)
    db_session.commit()
    return order


class TestExpireUnpaidOrdersTask:
    @pytest.mark.asyncio
    async def test_cancels_overdue_orders(self, db_session, merchant):
        now = datetime.now(UTC)
        overdue = _order(db_session, merchant, "W1", now - timedelta(minutes=1))
        pending = _order(db_session, merchant, "W2", now + timedelta(minutes=10))
        paid = _order(
            db_session,
            merchant,
            "W3",
            now - timedelta(minutes=1),
            status=OrderStatus.PENDING_CONFIRM,
        )

        with patch("app.worker.SessionLocal", db_module.SessionLocal):
            result = await expire_unpaid_orders_task({})

        assert result == 1
        for order in (overdue, pending, paid):
            db_session.refresh(order)
        assert overdue.status == OrderStatus.CANCELLED.value
        assert overdue.cancel_reason == "Payment timeout"
        assert overdue.cancelled_at is not None
        assert pending.status == OrderStatus.PENDING_PAYMENT.value
        assert paid.status == OrderStatus.PENDING_CONFIRM.value

    @pytest.mark.asyncio
    async def test_nothing_to_expire(self, db_session):
        with patch("app.worker.SessionLocal", db_module.SessionLocal):
            result = await expire_unpaid_orders_task({})
        assert result == 0

    @pytest.mark.asyncio
    async def test_closes_session_on_exception(self):
        mock_db = MagicMock()
        mock_service = MagicMock()
        mock_service.expire_unpaid_orders.side_effect = RuntimeError("DB error")

        with (
            patch("app.worker.SessionLocal", return_value=mock_db),
            patch("app.worker.OrderService", return_value=mock_service),
            pytest.raises(RuntimeError, match="DB error"),
        ):
            await expire_unpaid_orders_task({})

        mock_db.close.assert_called_once()


class TestCleanupIdempotencyRecordsTask:
    @pytest.mark.asyncio
    async def test_deletes_old_records(self, db_session):
        repo = IdempotencyRepository(db_session)
        old = repo.create(
            user_id=DEFAULT_USER_ID,
            idempotency_key="old",
            request_method="POST",
            request_path="/v1/orders/",
        )
        old.created_at = datetime.now(UTC) - timedelta(days=2)  # type: ignore[assignment]
        db_session.commit()
        repo.create(
            user_id=DEFAULT_USER_ID,
            idempotency_key="fresh",
            request_method="POST",
            request_path="/v1/orders/",
        )

        with patch("app.worker.SessionLocal", db_module.SessionLocal):
            result = await cleanup_idempotency_records_task({})

        assert result == 1
        keys = [r.idempotency_key for r in db_session.query(IdempotencyRecord).all()]
        assert keys == ["fresh"]


class TestWorkerSettings:
    def test_registers_tasks(self):
        assert expire_unpaid_orders_task in WorkerSettings.functions
        assert cleanup_idempotency_records_task in WorkerSettings.functions

    def test_cron_jobs(self):
        names = {job.name for job in WorkerSettings.cron_jobs}
        assert names == {
            "cron:expire_unpaid_orders_task",
            "cron:cleanup_idempotency_records_task",
        }
