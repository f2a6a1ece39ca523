from app.repositories.address_repository import AddressRepository
from app.repositories.coupon_repository import CouponRepository
from app.repositories.idempotency_repository import IdempotencyRepository
from app.repositories.merchant_repository import MerchantRepository
from app.repositories.order_item_repository import OrderItemRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.user_coupon_repository import UserCouponRepository

__all__ = [
    "AddressRepository",
    "CouponRepository",
    "IdempotencyRepository",
    "MerchantRepository",
    "OrderItemRepository",
    "OrderRepository",
    "ProductRepository",
    "UserCouponRepository",
]
