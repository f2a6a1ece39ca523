"""Address model: a user's saved shipping address."""

from sqlalchemy import Column, DateTime, Float, String, func

from app.core.database import Base
from app.models.shared import UUIDType, generate_uuid


class Address(Base):
    """Address model."""

    __tablename__ = "addresses"

    id = Column(UUIDType, primary_key=True, default=generate_uuid)
    user_id = Column(UUIDType, nullable=False, index=True)

    name = Column(String(50), nullable=False)
    phone = Column(String(20), nullable=False)
    province = Column(String(50), nullable=False)
    city = Column(String(50), nullable=False)
    district = Column(String(50), nullable=False)
    detail = Column(String(200), nullable=False)
    longitude = Column(Float, nullable=True)
    latitude = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def snapshot(self) -> dict[str, object]:
        """Copy of the address fields stored on an order."""
        data: dict[str, object] = {
            "name": self.name,
            "phone": self.phone,
            "province": self.province,
            "city": self.city,
            "district": self.district,
            "detail": self.detail,
        }
        if self.longitude is not None:
            data["longitude"] = self.longitude
        if self.latitude is not None:
            data["latitude"] = self.latitude
        return data
