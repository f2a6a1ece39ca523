"""Coupon eligibility evaluation and coupon administration."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import CouponCodeExists, CouponNotFound, InvalidCouponDefinition
from app.models.coupon import Coupon, CouponStatus, DiscountType
from app.models.shared import as_utc, round_money, utc_now
from app.repositories.coupon_repository import CouponRepository
from app.repositories.user_coupon_repository import UserCouponRepository
from app.schemas.coupon import CouponCreate, CouponUpdate

logger = logging.getLogger(__name__)


class CouponRejection(str, Enum):
    INVALID_CODE = "invalid_code"
    NOT_ACTIVE = "not_active"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    MIN_ORDER_NOT_MET = "min_order_not_met"
    MERCHANT_MISMATCH = "merchant_mismatch"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    ALREADY_USED = "already_used"


@dataclass(frozen=True)
class CouponCheck:
    """What a coupon is being checked against."""

    user_id: UUID
    merchant_id: UUID
    subtotal: Decimal
    now: datetime
    # Deferred so the ledger is only queried once every cheaper rule passed.
    user_redemptions: Callable[[], int]


@dataclass(frozen=True)
class CouponRule:
    rejection: CouponRejection
    passes: Callable[[Coupon, CouponCheck], bool]
    message: Callable[[Coupon], str]


COUPON_RULES: tuple[CouponRule, ...] = (
    CouponRule(
        CouponRejection.NOT_ACTIVE,
        lambda c, chk: c.status == CouponStatus.ACTIVE.value,
        lambda c: "Coupon is not active",
    ),
    CouponRule(
        CouponRejection.NOT_YET_VALID,
        lambda c, chk: chk.now >= as_utc(c.start_date),
        lambda c: "Coupon is not yet valid",
    ),
    CouponRule(
        CouponRejection.EXPIRED,
        lambda c, chk: chk.now <= as_utc(c.end_date),
        lambda c: "Coupon has expired",
    ),
    CouponRule(
        CouponRejection.MIN_ORDER_NOT_MET,
        lambda c, chk: chk.subtotal >= c.min_order_amount,
        lambda c: f"Minimum order amount is {round_money(c.min_order_amount)}",
    ),
    CouponRule(
        CouponRejection.MERCHANT_MISMATCH,
        lambda c, chk: c.merchant_id is None or c.merchant_id == chk.merchant_id,
        lambda c: "Coupon is not valid for this merchant",
    ),
    CouponRule(
        CouponRejection.USAGE_LIMIT_REACHED,
        lambda c, chk: c.total_limit == 0 or c.usage_count < c.total_limit,
        lambda c: "Coupon usage limit reached",
    ),
    CouponRule(
        CouponRejection.ALREADY_USED,
        lambda c, chk: chk.user_redemptions() < c.per_user_limit,
        lambda c: "You have already used this coupon",
    ),
)
"""Eligibility rules in evaluation order. The first failing rule is reported."""


@dataclass
class CouponValidation:
    """Result of a coupon eligibility check."""

    valid: bool
    discount_amount: Decimal = Decimal("0.00")
    coupon: Coupon | None = None
    reason: CouponRejection | None = None
    message: str | None = None

    @classmethod
    def rejected(cls, reason: CouponRejection, message: str) -> "CouponValidation":
        return cls(valid=False, reason=reason, message=message)


def calculate_discount(coupon: Coupon, subtotal: Decimal) -> Decimal:
    """Discount granted by ``coupon`` on a pre-discount ``subtotal``.

    Percentage coupons take ``subtotal * value / 100``, clamped to
    ``max_discount`` when one is set (a zero cap counts as no cap). Fixed
    coupons take ``value``. The result never exceeds the subtotal and is
    rounded half-up to cents.
    """
    value = Decimal(coupon.discount_value)
    if coupon.discount_type == DiscountType.PERCENTAGE.value:
        discount = subtotal * value / Decimal("100")
        if coupon.max_discount and discount > coupon.max_discount:
            discount = Decimal(coupon.max_discount)
    else:
        discount = value

    return round_money(min(discount, subtotal))


class CouponService:
    """Service for coupon eligibility and administration."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.coupon_repo = CouponRepository(db)
        self.user_coupon_repo = UserCouponRepository(db)

    def validate_coupon(
        self,
        user_id: UUID,
        code: str,
        merchant_id: UUID,
        order_amount: Decimal,
    ) -> CouponValidation:
        """Check whether a coupon applies to an order and compute its discount.

        Read-only: calling it any number of times consumes nothing.

        Args:
            user_id: The acting user.
            code: The coupon code, matched exactly.
            merchant_id: The merchant the order is placed with.
            order_amount: The pre-discount item subtotal (delivery fee excluded).

        Returns:
            CouponValidation carrying either the discount or the first failed rule.
        """
        coupon = self.coupon_repo.get_by_code(code)
        if not coupon:
            return CouponValidation.rejected(CouponRejection.INVALID_CODE, "Invalid coupon code")

        subtotal = Decimal(order_amount)
        check = CouponCheck(
            user_id=user_id,
            merchant_id=merchant_id,
            subtotal=subtotal,
            now=self.clock(),
            user_redemptions=lambda: self.user_coupon_repo.count_by_user_and_coupon(
                user_id,
                coupon.id,  # type: ignore[arg-type]
            ),
        )

        for rule in COUPON_RULES:
            if not rule.passes(coupon, check):
                return CouponValidation.rejected(rule.rejection, rule.message(coupon))

        return CouponValidation(
            valid=True,
            discount_amount=calculate_discount(coupon, subtotal),
            coupon=coupon,
        )

    def list_available_coupons(
        self,
        user_id: UUID,
        merchant_id: UUID | None = None,
        order_amount: Decimal | None = None,
    ) -> list[Coupon]:
        """Coupons the user could redeem right now, with optional merchant/amount filters."""
        candidates = self.coupon_repo.get_redeemable(self.clock(), merchant_id, order_amount)

        available: list[Coupon] = []
        for coupon in candidates:
            if coupon.total_limit > 0 and coupon.usage_count >= coupon.total_limit:
                continue
            used = self.user_coupon_repo.count_by_user_and_coupon(
                user_id,
                coupon.id,  # type: ignore[arg-type]
            )
            if used >= coupon.per_user_limit:
                continue
            available.append(coupon)
        return available

    def get_coupon(self, coupon_id: UUID) -> Coupon:
        coupon = self.coupon_repo.get_by_id(coupon_id)
        if not coupon:
            raise CouponNotFound(coupon_id)
        return coupon

    def create_coupon(self, data: CouponCreate) -> Coupon:
        """Create a coupon.

        Raises:
            CouponCodeExists: If the code is taken.
        """
        if self.coupon_repo.get_by_code(data.code):
            raise CouponCodeExists(data.code)
        try:
            coupon = self.coupon_repo.create(data)
        except IntegrityError:
            self.db.rollback()
            raise CouponCodeExists(data.code) from None
        logger.info("Created coupon %s (%s)", coupon.code, coupon.id)
        return coupon

    def update_coupon(self, coupon_id: UUID, data: CouponUpdate) -> Coupon:
        """Apply a partial update, re-checking the rules creation enforces.

        Raises:
            CouponNotFound: If no coupon has this id.
            InvalidCouponDefinition: If the merged coupon would be invalid.
        """
        coupon = self.get_coupon(coupon_id)
        changes = data.model_dump(exclude_unset=True)

        start = as_utc(changes.get("start_date", coupon.start_date))
        end = as_utc(changes.get("end_date", coupon.end_date))
        if end < start:
            raise InvalidCouponDefinition(coupon_id, "end_date must not be before start_date")

        value = changes.get("discount_value", coupon.discount_value)
        if coupon.discount_type == DiscountType.PERCENTAGE.value and value > 100:
            raise InvalidCouponDefinition(
                coupon_id, "percentage discount_value must not exceed 100"
            )

        updated = self.coupon_repo.update(coupon_id, data)
        if not updated:
            raise CouponNotFound(coupon_id)
        return updated

    def disable_coupon(self, coupon_id: UUID) -> Coupon:
        coupon = self.coupon_repo.disable(coupon_id)
        if not coupon:
            raise CouponNotFound(coupon_id)
        logger.info("Disabled coupon %s", coupon.code)
        return coupon
