"""Order model for purchase commitments."""

from enum import Enum
from typing import Any

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import validates

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid

PRICE_FIELDS = ("item_subtotal", "delivery_fee", "discount_amount", "payable_amount")


class OrderStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    PENDING_CONFIRM = "pending_confirm"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    DELIVERING = "delivering"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


CANCELLABLE_STATUSES = frozenset(
    {OrderStatus.PENDING_PAYMENT.value, OrderStatus.PENDING_CONFIRM.value}
)


class Order(Base):
    """Order model. Price fields are write-once."""

    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("order_number", name="uq_orders_order_number"),)

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    order_number = Column(String(32), nullable=False)
    user_id = Column(UUIDType, nullable=False, index=True)
    merchant_id = Column(
        UUIDType, ForeignKey("merchants.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    item_subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False)
    payable_amount = Column(Numeric(10, 2), nullable=False)

    delivery_address = Column(JSON, nullable=False)
    remark = Column(Text, nullable=True)
    status = Column(
        String(20), nullable=False, index=True, default=OrderStatus.PENDING_PAYMENT.value
    )

    payment_expires_at = Column(DateTime(timezone=True), nullable=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(String(200), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates(*PRICE_FIELDS)
    def _freeze_price_fields(self, key: str, value: Any) -> Any:
        if getattr(self, key) is not None:
            raise ValueError(f"Order {key} cannot be changed once set")
        return value
