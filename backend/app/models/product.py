"""Product model: catalog entries owned by a merchant."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Numeric, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class Product(Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    merchant_id = Column(
        UUIDType, ForeignKey("merchants.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
