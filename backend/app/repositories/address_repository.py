"""Address repository for data access."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.models.address import Address


class AddressRepository:
    """Repository for Address model."""

    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, user_id: UUID, address_id: UUID) -> Address | None:
        """Get an address only if it belongs to the user."""
        return (
            self.db.query(Address)
            .filter(Address.id == address_id, Address.user_id == user_id)
            .first()
        )

    def create(
        self,
        user_id: UUID,
        name: str,
        phone: str,
        province: str,
        city: str,
        district: str,
        detail: str,
        longitude: float | None = None,
        latitude: float | None = None,
    ) -> Address:
        """Create a new address."""
        address = Address(
            user_id=user_id,
            name=name,
            phone=phone,
            province=province,
            city=city,
            district=district,
            detail=detail,
            longitude=longitude,
            latitude=latitude,
        )
        self.db.add(address)
        self.db.commit()
        self.db.refresh(address)
        return address
