"""Order and OrderItem schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.order import OrderStatus


class OrderItemCreate(BaseModel):
    product_id: UUID
    # Positivity is enforced by OrderService so it surfaces as a typed error.
    quantity: int
    options: list[str] = Field(default_factory=list)


class OrderCreate(BaseModel):
    merchant_id: UUID
    address_id: UUID
    items: list[OrderItemCreate]
    remark: str | None = Field(default=None, max_length=500)
    coupon_code: str | None = Field(default=None, max_length=64)


class OrderCreateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order_id: UUID
    order_number: str
    item_subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    payable_amount: Decimal
    payment_expires_at: datetime


class OrderCancelRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=200)


class DeliveryAddress(BaseModel):
    name: str
    phone: str
    province: str
    city: str
    district: str
    detail: str
    longitude: float | None = None
    latitude: float | None = None


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    name: str
    image: str | None = None
    unit_price: Decimal
    quantity: int
    options: list[str]


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    user_id: UUID
    merchant_id: UUID
    item_subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    payable_amount: Decimal
    delivery_address: DeliveryAddress
    remark: str | None = None
    status: OrderStatus
    payment_expires_at: datetime
    paid_at: datetime | None = None
    confirmed_at: datetime | None = None
    delivered_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)
