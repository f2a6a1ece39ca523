"""Coupon schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Self
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.models.coupon import CouponStatus, DiscountType

REQUIRED_UPDATE_FIELDS = frozenset(
    {
        "name",
        "discount_value",
        "min_order_amount",
        "start_date",
        "end_date",
        "total_limit",
        "per_user_limit",
        "status",
    }
)


class CouponCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0, decimal_places=2)
    min_order_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    max_discount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    start_date: datetime
    end_date: datetime
    merchant_id: UUID | None = None
    total_limit: int = Field(default=0, ge=0)
    per_user_limit: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def validate_window(self) -> Self:
        """Validate the validity window is not inverted."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

    @model_validator(mode="after")
    def validate_percentage_range(self) -> Self:
        """Validate percentage coupons stay within 0-100."""
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount_value must not exceed 100")
        return self


class CouponUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    discount_value: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    min_order_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    max_discount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    start_date: datetime | None = None
    end_date: datetime | None = None
    merchant_id: UUID | None = None
    total_limit: int | None = Field(default=None, ge=0)
    per_user_limit: int | None = Field(default=None, ge=1)
    status: CouponStatus | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> Self:
        """Validate that columns which cannot be empty are not explicitly cleared."""
        cleared = sorted(
            field
            for field in self.model_fields_set & REQUIRED_UPDATE_FIELDS
            if getattr(self, field) is None
        )
        if cleared:
            raise ValueError(f"{', '.join(cleared)} cannot be null")
        return self


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    name: str
    description: str | None = None
    discount_type: str
    discount_value: Decimal
    min_order_amount: Decimal
    max_discount: Decimal | None = None
    start_date: datetime
    end_date: datetime
    merchant_id: UUID | None = None
    total_limit: int
    per_user_limit: int
    usage_count: int
    status: str
    created_at: datetime
    updated_at: datetime


class CouponValidateRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)
    merchant_id: UUID
    order_amount: Decimal = Field(ge=0, decimal_places=2)


class CouponValidationResponse(BaseModel):
    """Outcome of a coupon eligibility check. Never consumes the coupon."""

    model_config = ConfigDict(from_attributes=True)

    valid: bool
    discount_amount: Decimal = Decimal("0.00")
    reason: str | None = None
    message: str | None = None
    coupon: CouponResponse | None = None
