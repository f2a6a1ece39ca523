"""Merchant repository for data access."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.merchant import Merchant, MerchantStatus


class MerchantRepository:
    """Repository for Merchant model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, merchant_id: UUID) -> Merchant | None:
        """Get a merchant by ID."""
        return self.db.query(Merchant).filter(Merchant.id == merchant_id).first()

    def create(
        self,
        name: str,
        status: MerchantStatus = MerchantStatus.ACTIVE,
        is_open: bool = True,
        delivery_fee: Decimal = Decimal("0"),
        min_order_amount: Decimal = Decimal("0"),
    ) -> Merchant:
        """Create a new merchant."""
        merchant = Merchant(
            name=name,
            status=status.value,
            is_open=is_open,
            delivery_fee=delivery_fee,
            min_order_amount=min_order_amount,
        )
        self.db.add(merchant)
        self.db.commit()
        self.db.refresh(merchant)
        return merchant
