"""UserCoupon model: one append-only row per coupon redemption."""

from typing import Any

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, event

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class UserCoupon(Base):
    """Redemption record of a coupon by a user against an order.

    ``redemption_seq`` is the user's n-th redemption of the coupon. The unique
    constraint makes two concurrent redemptions of the same slot collide at
    commit time.
    """

    __tablename__ = "user_coupons"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "coupon_id", "redemption_seq", name="uq_user_coupons_redemption_seq"
        ),
    )

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, nullable=False, index=True)
    coupon_id = Column(
        UUIDType, ForeignKey("coupons.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    order_id = Column(
        UUIDType, ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    redemption_seq = Column(Integer, nullable=False)
    redeemed_at = Column(DateTime(timezone=True), nullable=False)


@event.listens_for(UserCoupon, "before_update")
@event.listens_for(UserCoupon, "before_delete")
def _reject_redemption_changes(mapper: Any, connection: Any, target: UserCoupon) -> None:
    raise ValueError("Coupon redemptions are append-only")
