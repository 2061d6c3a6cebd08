"""Product repository for database operations.

Provides the store contract used by the catalog service.
"""

from collections.abc import Sequence
from decimal import Decimal
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from product_catalog.catalog.models import Product


class ProductRepository:
    """Repository for Product database operations.

    Works on the session of the caller's transaction scope and never
    commits on its own.

    Example usage:
        async with transactions.begin(read_only=True) as session:
            repo = ProductRepository(session)
            products = await repo.search(category="Peripherals")
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save(self, product: Product) -> Product:
        """Save a product to database.

        The id is assigned on the first save; later saves persist
        in-place mutations.

        Args:
            product: Product to save.

        Returns:
            Saved product.
        """
        self.session.add(product)
        await self.session.flush()
        return product

    async def get_by_id(self, product_id: UUID) -> Product | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(
            select(Product).where(Product.id == product_id)
        )
        return result.scalar_one_or_none()

    async def find_all(self) -> Sequence[Product]:
        """Get every product in store order."""
        result = await self.session.execute(select(Product))
        return result.scalars().all()

    async def search(
        self,
        name: str | None = None,
        price: Decimal | None = None,
        category: str | None = None,
    ) -> Sequence[Product]:
        """Find products matching every supplied filter.

        Args:
            name: Exact product name.
            price: Exact price.
            category: Exact category.

        Returns:
            Sequence of matching products.
        """
        query = select(Product)

        # Build filter conditions
        conditions = []

        if name is not None:
            conditions.append(Product.name == name)

        if price is not None:
            conditions.append(Product.price == price)

        if category is not None:
            conditions.append(Product.category == category)

        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalars().all()

    async def delete(self, product: Product) -> None:
        """Delete a product.

        Args:
            product: Product to delete.
        """
        await self.session.delete(product)
        await self.session.flush()
