"""SQLAlchemy models for the product catalog."""

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from product_catalog.infrastructure.database import Base


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Unique product identifier, assigned on first save.
        name: Product name.
        price: Price with exactly two fraction digits.
        category: Category label.
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, name={self.name[:30]}, price={self.price})>"
