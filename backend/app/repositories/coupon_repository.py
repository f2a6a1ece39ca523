"""Coupon repository for data access."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import or_, update
from sqlalchemy.orm import Session

from app.core.sorting import apply_order_by
from app.models.coupon import Coupon, CouponStatus
from app.schemas.coupon import CouponCreate, CouponUpdate


class CouponRepository:
    """Repository for Coupon model."""

    def __init__(self, db: Session):
        self.db = db

    def get_all(
        self,
        skip: int = 0,
        limit: int = 100,
        status: CouponStatus | None = None,
        order_by: str | None = None,
    ) -> list[Coupon]:
        """Get all coupons with optional filters."""
        query = self.db.query(Coupon)

        if status:
            query = query.filter(Coupon.status == status.value)

        query = apply_order_by(query, Coupon, order_by)
        return query.offset(skip).limit(limit).all()

    def count(self, status: CouponStatus | None = None) -> int:
        """Count coupons."""
        query = self.db.query(Coupon)
        if status:
            query = query.filter(Coupon.status == status.value)
        return query.count()

    def get_by_id(self, coupon_id: UUID) -> Coupon | None:
        """Get a coupon by ID."""
        return self.db.query(Coupon).filter(Coupon.id == coupon_id).first()

    def get_by_code(self, code: str) -> Coupon | None:
        """Get a coupon by code. Codes match exactly, case included."""
        return self.db.query(Coupon).filter(Coupon.code == code).first()

    def get_redeemable(
        self,
        now: datetime,
        merchant_id: UUID | None = None,
        order_amount: Decimal | None = None,
    ) -> list[Coupon]:
        """Get active coupons in their validity window, optionally narrowed by merchant/amount."""
        query = self.db.query(Coupon).filter(
            Coupon.status == CouponStatus.ACTIVE.value,
            Coupon.start_date <= now,
            Coupon.end_date >= now,
        )
        if merchant_id:
            query = query.filter(
                or_(Coupon.merchant_id.is_(None), Coupon.merchant_id == merchant_id)
            )
        if order_amount is not None:
            query = query.filter(Coupon.min_order_amount <= order_amount)
        return query.order_by(Coupon.end_date.asc()).all()

    def create(self, data: CouponCreate) -> Coupon:
        """Create a new coupon."""
        coupon = Coupon(
            code=data.code,
            name=data.name,
            description=data.description,
            discount_type=data.discount_type.value,
            discount_value=data.discount_value,
            min_order_amount=data.min_order_amount,
            max_discount=data.max_discount,
            start_date=data.start_date,
            end_date=data.end_date,
            merchant_id=data.merchant_id,
            total_limit=data.total_limit,
            per_user_limit=data.per_user_limit,
            status=CouponStatus.ACTIVE.value,
        )
        self.db.add(coupon)
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def update(self, coupon_id: UUID, data: CouponUpdate) -> Coupon | None:
        """Update a coupon by ID."""
        coupon = self.get_by_id(coupon_id)
        if not coupon:
            return None

        update_data = data.model_dump(exclude_unset=True)

        if "status" in update_data and update_data["status"]:
            update_data["status"] = update_data["status"].value

        for key, value in update_data.items():
            setattr(coupon, key, value)

        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def disable(self, coupon_id: UUID) -> Coupon | None:
        """Disable a coupon by ID."""
        coupon = self.get_by_id(coupon_id)
        if not coupon:
            return None

        coupon.status = CouponStatus.DISABLED.value  # type: ignore[assignment]
        self.db.commit()
        self.db.refresh(coupon)
        return coupon

    def increment_usage(self, coupon_id: UUID) -> bool:
        """Atomically consume one global usage slot.

        A single conditional UPDATE re-checks the limit and increments in one
        statement, so concurrent redemptions of the last slot serialize on the
        row. Returns False when no slot was left. Does not commit.
        """
        result = self.db.execute(
            update(Coupon)
            .where(
                Coupon.id == coupon_id,
                or_(Coupon.total_limit == 0, Coupon.usage_count < Coupon.total_limit),
            )
            .values(usage_count=Coupon.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # type: ignore[attr-defined]
