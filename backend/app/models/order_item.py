"""OrderItem model: immutable line items copied from the catalog at order time."""

from typing import Any

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, event, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class OrderItem(Base):
    """OrderItem model."""

    __tablename__ = "order_items"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    # Not a foreign key: the catalog row may later change or disappear.
    product_id = Column(UUIDType, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    unit_price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False)
    options = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


@event.listens_for(OrderItem, "before_update")
@event.listens_for(OrderItem, "before_delete")
def _reject_order_item_changes(mapper: Any, connection: Any, target: OrderItem) -> None:
    raise ValueError("Order items are immutable")
