"""Order repository for data access."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.sorting import apply_order_by
from app.models.order import Order, OrderStatus


class OrderRepository:
    """Repository for Order model.

    ``add`` only flushes: order creation commits once, in OrderService.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, order_id: UUID) -> Order | None:
        """Get an order by ID."""
        return self.db.query(Order).filter(Order.id == order_id).first()

    def get_for_user(self, user_id: UUID, order_id: UUID) -> Order | None:
        """Get an order only if it belongs to the user."""
        return (
            self.db.query(Order)
            .filter(Order.id == order_id, Order.user_id == user_id)
            .first()
        )

    def get_by_order_number(self, order_number: str) -> Order | None:
        """Get an order by its human-facing number."""
        return self.db.query(Order).filter(Order.order_number == order_number).first()

    def get_all(
        self,
        user_id: UUID,
        skip: int = 0,
        limit: int = 20,
        status: OrderStatus | None = None,
        order_by: str | None = None,
    ) -> list[Order]:
        """Get a user's orders with optional status filter."""
        query = self.db.query(Order).filter(Order.user_id == user_id)

        if status:
            query = query.filter(Order.status == status.value)

        query = apply_order_by(query, Order, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, user_id: UUID, status: OrderStatus | None = None) -> int:
        """Count a user's orders."""
        query = self.db.query(Order).filter(Order.user_id == user_id)
        if status:
            query = query.filter(Order.status == status.value)
        return query.count()

    def get_unpaid_expired(self, now: datetime) -> list[Order]:
        """Get orders still awaiting payment past their payment deadline."""
        return (
            self.db.query(Order)
            .filter(
                Order.status == OrderStatus.PENDING_PAYMENT.value,
                Order.payment_expires_at < now,
            )
            .all()
        )

    def add(self, order: Order) -> Order:
        """Stage a new order and flush so constraint violations surface immediately."""
        self.db.add(order)
        self.db.flush()
        return order

    def mark_cancelled(self, order: Order, reason: str, cancelled_at: datetime) -> Order:
        """Move an order to cancelled. The caller has already checked the transition."""
        order.status = OrderStatus.CANCELLED.value  # type: ignore[assignment]
        order.cancelled_at = cancelled_at  # type: ignore[assignment]
        order.cancel_reason = reason  # type: ignore[assignment]
        self.db.flush()
        return order
