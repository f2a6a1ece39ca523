"""Coupon model for promotional discounts."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, Numeric, String, Text, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class Coupon(Base):
    """Coupon model for promotional discounts."""

    __tablename__ = "coupons"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    code = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    discount_type = Column(String(20), nullable=False)
    discount_value = Column(Numeric(10, 2), nullable=False)
    min_order_amount = Column(Numeric(10, 2), nullable=False, default=0)
    max_discount = Column(Numeric(10, 2), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)

    # None means any merchant
    merchant_id = Column(UUIDType, nullable=True, index=True)

    total_limit = Column(Integer, nullable=False, default=0)  # 0 = unlimited
    per_user_limit = Column(Integer, nullable=False, default=1)
    usage_count = Column(Integer, nullable=False, default=0)

    status = Column(String(20), nullable=False, default=CouponStatus.ACTIVE.value)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
