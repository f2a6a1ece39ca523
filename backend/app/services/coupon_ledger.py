"""Coupon redemption ledger."""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import CouponNotFound, CouponRedemptionConflict, CouponUsageConflict
from app.models.shared import utc_now
from app.models.user_coupon import UserCoupon
from app.repositories.coupon_repository import CouponRepository
from app.repositories.user_coupon_repository import UserCouponRepository

logger = logging.getLogger(__name__)


class CouponRedemptionLedger:
    """Records coupon redemptions inside the caller's transaction.

    ``redeem`` never commits or rolls back. The order service owns the
    transaction, so a redemption lands together with its order or not at all.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock
        self.coupon_repo = CouponRepository(db)
        self.user_coupon_repo = UserCouponRepository(db)

    def redeem(self, user_id: UUID, coupon_id: UUID, order_id: UUID) -> UserCoupon:
        """Append a redemption record and consume one global usage slot.

        Raises:
            CouponNotFound: If the coupon vanished since it was validated.
            CouponUsageConflict: If the global limit was reached concurrently.
            CouponRedemptionConflict: If the user's limit was reached concurrently.
        """
        coupon = self.coupon_repo.get_by_id(coupon_id)
        if not coupon:
            raise CouponNotFound(coupon_id)
        # A failed flush expires every loaded instance, so read what the logs need now.
        code = coupon.code
        per_user_limit = coupon.per_user_limit

        if not self.coupon_repo.increment_usage(coupon_id):
            logger.warning("Coupon %s usage limit reached during redemption", code)
            raise CouponUsageConflict(coupon_id)

        redemption_seq = self.user_coupon_repo.count_by_user_and_coupon(user_id, coupon_id) + 1
        if redemption_seq > per_user_limit:
            raise CouponRedemptionConflict(coupon_id, user_id)

        try:
            record = self.user_coupon_repo.add(
                user_id=user_id,
                coupon_id=coupon_id,
                order_id=order_id,
                redemption_seq=redemption_seq,
                redeemed_at=self.clock(),
            )
        except IntegrityError:
            logger.warning(
                "Concurrent redemption of coupon %s by user %s", code, user_id
            )
            raise CouponRedemptionConflict(coupon_id, user_id) from None

        logger.info(
            "User %s redeemed coupon %s on order %s (#%d)",
            user_id,
            code,
            order_id,
            redemption_seq,
        )
        return record
