from app.schemas.coupon import (
    CouponCreate,
    CouponResponse,
    CouponUpdate,
    CouponValidateRequest,
    CouponValidationResponse,
)
from app.schemas.order import (
    DeliveryAddress,
    OrderCancelRequest,
    OrderCreate,
    OrderCreateResponse,
    OrderItemCreate,
    OrderItemResponse,
    OrderResponse,
)

__all__ = [
    "CouponCreate",
    "CouponResponse",
    "CouponUpdate",
    "CouponValidateRequest",
    "CouponValidationResponse",
    "DeliveryAddress",
    "OrderCancelRequest",
    "OrderCreate",
    "OrderCreateResponse",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderResponse",
]
