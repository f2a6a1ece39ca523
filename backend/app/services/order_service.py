"""Order assembly, cancellation and payment-timeout expiry."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import (
    AddressNotFound,
    EmptyOrder,
    InvalidOrderStatus,
    InvalidQuantity,
    MerchantClosed,
    MerchantNotFound,
    MerchantUnavailable,
    OrderNotFound,
    OrderNumberConflict,
    ProductUnavailable,
)
from app.models.coupon import Coupon
from app.models.merchant import Merchant, MerchantStatus
from app.models.order import CANCELLABLE_STATUSES, Order, OrderStatus
from app.models.order_item import OrderItem
from app.models.shared import utc_now
from app.repositories.address_repository import AddressRepository
from app.repositories.merchant_repository import MerchantRepository
from app.repositories.order_item_repository import OrderItemRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.schemas.order import OrderCreate, OrderItemCreate
from app.services.coupon_ledger import CouponRedemptionLedger
from app.services.coupon_service import CouponService
from app.services.order_number import generate_order_number
from app.services.order_pricing import (
    ZERO,
    PricedLine,
    calculate_item_subtotal,
    calculate_totals,
    ensure_minimum_order,
)

logger = logging.getLogger(__name__)

PAYMENT_WINDOW = timedelta(minutes=15)
PAYMENT_TIMEOUT_REASON = "Payment timeout"


@dataclass(frozen=True)
class OrderCreationResult:
    order_id: UUID
    order_number: str
    item_subtotal: Decimal
    delivery_fee: Decimal
    discount_amount: Decimal
    payable_amount: Decimal
    payment_expires_at: datetime


def _is_order_number_collision(exc: IntegrityError) -> bool:
    return "order_number" in str(exc.orig)


class OrderService:
    """Service for placing and cancelling orders.

    ``create_order`` owns its transaction: the order, its items and the
    coupon redemption are committed together or rolled back together.
    """

    def __init__(
        self,
        db: Session,
        clock: Callable[[], datetime] = utc_now,
        order_number_generator: Callable[[datetime], str] = generate_order_number,
        max_number_attempts: int | None = None,
    ):
        self.db = db
        self.clock = clock
        self.order_number_generator = order_number_generator
        self.max_number_attempts = max_number_attempts or settings.ORDER_NUMBER_MAX_ATTEMPTS
        self.merchant_repo = MerchantRepository(db)
        self.address_repo = AddressRepository(db)
        self.product_repo = ProductRepository(db)
        self.order_repo = OrderRepository(db)
        self.order_item_repo = OrderItemRepository(db)
        self.coupon_service = CouponService(db, clock=clock)
        self.ledger = CouponRedemptionLedger(db, clock=clock)

    def create_order(self, user_id: UUID, data: OrderCreate) -> OrderCreationResult:
        """Validate a cart, price it and persist it as a pending-payment order.

        An order-number collision rolls the attempt back and starts over with a
        fresh number, up to ``max_number_attempts`` times.

        Raises:
            EmptyOrder, InvalidQuantity: Malformed cart.
            MerchantNotFound, MerchantUnavailable, MerchantClosed: Merchant checks.
            AddressNotFound: Address missing or owned by someone else.
            ProductUnavailable: Product missing, unavailable or from another merchant.
            MinOrderAmountNotMet: Pre-discount subtotal below the merchant minimum.
            CouponUsageConflict, CouponRedemptionConflict: Coupon race lost at redemption.
            OrderNumberConflict: Every generated order number collided.
        """
        self._validate_cart(data.items)

        for attempt in range(1, self.max_number_attempts + 1):
            try:
                result = self._place_order(user_id, data)
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                if not _is_order_number_collision(exc):
                    raise
                logger.warning(
                    "Order number collision for user %s (attempt %d/%d)",
                    user_id,
                    attempt,
                    self.max_number_attempts,
                )
                continue
            except Exception:
                self.db.rollback()
                raise

            logger.info(
                "Created order %s (%s) for user %s: payable %s",
                result.order_number,
                result.order_id,
                user_id,
                result.payable_amount,
            )
            return result

        raise OrderNumberConflict(self.max_number_attempts)

    def _validate_cart(self, items: list[OrderItemCreate]) -> None:
        if not items:
            raise EmptyOrder()
        for item in items:
            if item.quantity <= 0:
                raise InvalidQuantity(item.product_id, item.quantity)

    def _load_merchant(self, merchant_id: UUID) -> Merchant:
        merchant = self.merchant_repo.get_by_id(merchant_id)
        if not merchant:
            raise MerchantNotFound(merchant_id)
        if merchant.status != MerchantStatus.ACTIVE.value:
            raise MerchantUnavailable(merchant_id, str(merchant.status))
        if not merchant.is_open:
            raise MerchantClosed(merchant_id)
        return merchant

    def _price_lines(self, merchant_id: UUID, items: list[OrderItemCreate]) -> list[PricedLine]:
        products = self.product_repo.get_by_ids(merchant_id, (item.product_id for item in items))

        lines: list[PricedLine] = []
        for item in items:
            product = products.get(item.product_id)
            if not product:
                raise ProductUnavailable(item.product_id)
            if not product.is_available:
                raise ProductUnavailable(item.product_id, str(product.name))
            lines.append(
                PricedLine(
                    product_id=item.product_id,
                    name=str(product.name),
                    image=product.image,  # type: ignore[arg-type]
                    unit_price=Decimal(product.price),
                    quantity=item.quantity,
                    options=list(item.options),
                )
            )
        return lines

    def _resolve_discount(
        self,
        user_id: UUID,
        merchant_id: UUID,
        code: str | None,
        item_subtotal: Decimal,
    ) -> tuple[Decimal, Coupon | None]:
        if not code:
            return ZERO, None

        validation = self.coupon_service.validate_coupon(user_id, code, merchant_id, item_subtotal)
        if not validation.valid:
            # An unusable coupon at checkout yields no discount instead of failing the order.
            logger.info(
                "Ignoring coupon %r for user %s: %s", code, user_id, validation.message
            )
            return ZERO, None
        return validation.discount_amount, validation.coupon

    def _place_order(self, user_id: UUID, data: OrderCreate) -> OrderCreationResult:
        now = self.clock()
        merchant = self._load_merchant(data.merchant_id)

        address = self.address_repo.get_for_user(user_id, data.address_id)
        if not address:
            raise AddressNotFound(data.address_id)

        lines = self._price_lines(data.merchant_id, data.items)
        item_subtotal = calculate_item_subtotal(lines)
        ensure_minimum_order(item_subtotal, Decimal(merchant.min_order_amount))

        discount, coupon = self._resolve_discount(
            user_id, data.merchant_id, data.coupon_code, item_subtotal
        )
        totals = calculate_totals(item_subtotal, Decimal(merchant.delivery_fee), discount)

        payment_expires_at = now + PAYMENT_WINDOW
        order = Order(
            order_number=self.order_number_generator(now),
            user_id=user_id,
            merchant_id=data.merchant_id,
            item_subtotal=totals.item_subtotal,
            delivery_fee=totals.delivery_fee,
            discount_amount=totals.discount_amount,
            payable_amount=totals.payable_amount,
            delivery_address=address.snapshot(),
            remark=data.remark,
            status=OrderStatus.PENDING_PAYMENT.value,
            payment_expires_at=payment_expires_at,
            created_at=now,
            updated_at=now,
        )
        self.order_repo.add(order)
        order_id: UUID = order.id  # type: ignore[assignment]

        self.order_item_repo.add_bulk(
            order_id,
            [
                {
                    "product_id": line.product_id,
                    "position": position,
                    "name": line.name,
                    "image": line.image,
                    "unit_price": line.unit_price,
                    "quantity": line.quantity,
                    "options": line.options,
                }
                for position, line in enumerate(lines)
            ],
        )

        if coupon is not None:
            self.ledger.redeem(user_id, coupon.id, order_id)  # type: ignore[arg-type]

        return OrderCreationResult(
            order_id=order_id,
            order_number=str(order.order_number),
            item_subtotal=totals.item_subtotal,
            delivery_fee=totals.delivery_fee,
            discount_amount=totals.discount_amount,
            payable_amount=totals.payable_amount,
            payment_expires_at=payment_expires_at,
        )

    def get_order(self, user_id: UUID, order_id: UUID) -> Order:
        order = self.order_repo.get_for_user(user_id, order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order

    def get_order_items(self, order_id: UUID) -> list[OrderItem]:
        return self.order_item_repo.get_by_order_id(order_id)

    def cancel_order(self, user_id: UUID, order_id: UUID, reason: str) -> Order:
        """Cancel one of the user's orders while it is awaiting payment or confirmation.

        Raises:
            OrderNotFound: If the order does not exist or belongs to another user.
            InvalidOrderStatus: If the order has moved past the cancellable states.
        """
        order = self.get_order(user_id, order_id)
        if order.status not in CANCELLABLE_STATUSES:
            raise InvalidOrderStatus(order_id, str(order.status))

        self.order_repo.mark_cancelled(order, reason, self.clock())
        self.db.commit()
        self.db.refresh(order)
        logger.info("User %s cancelled order %s: %s", user_id, order.order_number, reason)
        return order

    def expire_unpaid_orders(self) -> int:
        """Cancel pending-payment orders whose payment window has passed.

        Returns:
            Number of orders cancelled.
        """
        now = self.clock()
        expired = self.order_repo.get_unpaid_expired(now)
        for order in expired:
            self.order_repo.mark_cancelled(order, PAYMENT_TIMEOUT_REASON, now)
        self.db.commit()
        if expired:
            logger.info("Expired %d unpaid orders", len(expired))
        return len(expired)
