"""Merchant model: the operational state order creation reads."""

from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, Numeric, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class MerchantStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CLOSED = "closed"


class Merchant(Base):
    """Merchant model."""

    __tablename__ = "merchants"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=MerchantStatus.PENDING.value)
    is_open = Column(Boolean, nullable=False, default=True)

    delivery_fee = Column(Numeric(10, 2), nullable=False, default=0)
    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
