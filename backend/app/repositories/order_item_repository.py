"""OrderItem repository for data access."""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.order_item import OrderItem


class OrderItemRepository:
    """Repository for OrderItem model. Items are inserted once and never updated."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_order_id(self, order_id: UUID) -> list[OrderItem]:
        """Get all items of an order."""
        return (
            self.db.query(OrderItem)
            .filter(OrderItem.order_id == order_id)
            .order_by(OrderItem.position.asc())
            .all()
        )

    def get_by_order_ids(self, order_ids: Iterable[UUID]) -> dict[UUID, list[OrderItem]]:
        """Get items for several orders, grouped by order ID."""
        ids = list(order_ids)
        grouped: dict[UUID, list[OrderItem]] = {order_id: [] for order_id in ids}
        if not ids:
            return grouped
        items = (
            self.db.query(OrderItem)
            .filter(OrderItem.order_id.in_(ids))
            .order_by(OrderItem.position.asc())
            .all()
        )
        for item in items:
            grouped[item.order_id].append(item)  # type: ignore[index]
        return grouped

    def add_bulk(self, order_id: UUID, items_data: list[dict[str, Any]]) -> list[OrderItem]:
        """Stage the items of a new order and flush."""
        items = [OrderItem(order_id=order_id, **data) for data in items_data]
        self.db.add_all(items)
        self.db.flush()
        return items
