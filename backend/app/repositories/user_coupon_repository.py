"""UserCoupon repository for data access."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.user_coupon import UserCoupon


class UserCouponRepository:
    """Repository for UserCoupon redemption records. Append-only."""

    def __init__(self, db: Session):
        self.db = db

    def count_by_user_and_coupon(self, user_id: UUID, coupon_id: UUID) -> int:
        """Count how many times a user has redeemed a coupon."""
        return (
            self.db.query(func.count(UserCoupon.id))
            .filter(UserCoupon.user_id == user_id, UserCoupon.coupon_id == coupon_id)
            .scalar()
            or 0
        )

    def get_by_order_id(self, order_id: UUID) -> list[UserCoupon]:
        """Get redemption records attached to an order."""
        return self.db.query(UserCoupon).filter(UserCoupon.order_id == order_id).all()

    def add(
        self,
        user_id: UUID,
        coupon_id: UUID,
        order_id: UUID,
        redemption_seq: int,
        redeemed_at: datetime,
    ) -> UserCoupon:
        """Stage a redemption record and flush. Does not commit."""
        record = UserCoupon(
            user_id=user_id,
            coupon_id=coupon_id,
            order_id=order_id,
            redemption_seq=redemption_seq,
            redeemed_at=redeemed_at,
        )
        self.db.add(record)
        self.db.flush()
        return record
