"""Product repository for data access."""

from collections.abc import Iterable
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.product import Product


class ProductRepository:
    """Repository for Product model."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, product_id: UUID) -> Product | None:
        """Get a product by ID."""
        return self.db.query(Product).filter(Product.id == product_id).first()

    def get_by_ids(self, merchant_id: UUID, product_ids: Iterable[UUID]) -> dict[UUID, Product]:
        """Get the requested products that belong to a merchant, keyed by ID.

        IDs that do not exist or belong to another merchant are absent.
        """
        ids = set(product_ids)
        if not ids:
            return {}
        products = (
            self.db.query(Product)
            .filter(Product.merchant_id == merchant_id, Product.id.in_(ids))
            .all()
        )
        return {product.id: product for product in products}  # type: ignore[misc]

    def create(
        self,
        merchant_id: UUID,
        name: str,
        price: Decimal,
        image: str | None = None,
        is_available: bool = True,
    ) -> Product:
        """Create a new product."""
        product = Product(
            merchant_id=merchant_id,
            name=name,
            price=price,
            image=image,
            is_available=is_available,
        )
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product
