from app.models.address import Address
from app.models.coupon import Coupon, CouponStatus, DiscountType
from app.models.idempotency_record import IdempotencyRecord
from app.models.merchant import Merchant, MerchantStatus
from app.models.order import Order, OrderStatus
from app.models.order_item import OrderItem
from app.models.product import Product
from app.models.user_coupon import UserCoupon

__all__ = [
    "Address",
    "Coupon",
    "CouponStatus",
    "DiscountType",
    "IdempotencyRecord",
    "Merchant",
    "MerchantStatus",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Product",
    "UserCoupon",
]
