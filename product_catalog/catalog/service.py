"""Catalog service for product operations.

Runs each catalog operation inside its own transaction scope and
publishes a creation event once a new product has been committed.
"""

from decimal import Decimal
from uuid import UUID

import structlog

from product_catalog.catalog import mapper
from product_catalog.catalog.repository import ProductRepository
from product_catalog.catalog.schemas import ProductRequest, ProductResponse
from product_catalog.domain.exceptions import EventPublishError, ProductNotFoundError
from product_catalog.events.channel import EventPublisher
from product_catalog.infrastructure.database import TransactionManager

logger = structlog.get_logger()


class ProductService:
    """Service for product catalog operations.

    Example usage:
        service = ProductService(TransactionManager(session_factory), channel)
        created = await service.create_product(
            ProductRequest(name="Mouse", price=19.9, category="Peripherals")
        )
    """

    def __init__(self, transactions: TransactionManager, publisher: EventPublisher) -> None:
        """Initialize service.

        Args:
            transactions: Source of transaction scopes.
            publisher: Channel that receives creation events.
        """
        self.transactions = transactions
        self.publisher = publisher

    async def list_products(self) -> list[ProductResponse]:
        """List every product."""
        async with self.transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).find_all()
            return [mapper.to_response(p) for p in products]

    async def get_product(self, product_id: UUID) -> ProductResponse:
        """Get a product by id.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        async with self.transactions.begin(read_only=True) as session:
            product = await ProductRepository(session).get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            return mapper.to_response(product)

    async def search_products(
        self,
        name: str | None = None,
        price: Decimal | None = None,
        category: str | None = None,
    ) -> list[ProductResponse]:
        """Find products matching all supplied filters.

        Args:
            name: Exact name, or None for any.
            price: Exact price, or None for any.
            category: Exact category, or None for any.

        Returns:
            Matching products; empty when nothing matches.
        """
        async with self.transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search(
                name=name,
                price=price,
                category=category,
            )
            return [mapper.to_response(p) for p in products]

    async def create_product(self, request: ProductRequest) -> ProductResponse:
        """Create a product and announce it.

        The event is published after the transaction commits. A publish
        failure is logged and the created product is still returned.

        Args:
            request: Validated product data.

        Returns:
            The created product with its generated id.
        """
        async with self.transactions.begin() as session:
            product = await ProductRepository(session).save(mapper.to_entity(request))
            response = mapper.to_response(product)
            event = mapper.to_event(product)

        logger.info("Product created", product_id=str(response.id))

        try:
            await self.publisher.publish(event)
        except EventPublishError as e:
            logger.warning(
                "Product creation event dropped",
                product_id=str(response.id),
                event_id=str(event.event_id),
                reason=e.message,
            )

        return response

    async def update_product(self, product_id: UUID, request: ProductRequest) -> ProductResponse:
        """Overwrite name, price and category of an existing product.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        async with self.transactions.begin() as session:
            repository = ProductRepository(session)
            product = await repository.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            await repository.save(mapper.to_entity(request, product))
            response = mapper.to_response(product)

        logger.info("Product updated", product_id=str(product_id))
        return response

    async def delete_product(self, product_id: UUID) -> None:
        """Delete a product.

        Raises:
            ProductNotFoundError: If no product has this id.
        """
        async with self.transactions.begin() as session:
            repository = ProductRepository(session)
            product = await repository.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)

            await repository.delete(product)

        logger.info("Product deleted", product_id=str(product_id))
