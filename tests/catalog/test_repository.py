"""Tests for ProductRepository against a SQLite database."""

import uuid
from decimal import Decimal

import pytest

from product_catalog.catalog.models import Product
from product_catalog.catalog.repository import ProductRepository
from product_catalog.infrastructure.database import TransactionManager


async def _seed(transactions: TransactionManager) -> list[Product]:
    async with transactions.begin() as session:
        repo = ProductRepository(session)
        return [
            await repo.save(Product(name="Mouse", price=Decimal("19.90"), category="Peripherals")),
            await repo.save(Product(name="Keyboard", price=Decimal("45.00"), category="Peripherals")),
            await repo.save(Product(name="Monitor", price=Decimal("19.90"), category="Displays")),
        ]


class TestSave:
    """Tests for saving products."""

    @pytest.mark.asyncio
    async def test_first_save_assigns_id(self, transactions: TransactionManager) -> None:
        """Should assign an id on the first save."""
        async with transactions.begin() as session:
            product = await ProductRepository(session).save(
                Product(name="Mouse", price=Decimal("19.90"), category="Peripherals")
            )
            assert isinstance(product.id, uuid.UUID)

    @pytest.mark.asyncio
    async def test_later_save_persists_mutation(self, transactions: TransactionManager) -> None:
        """Should persist in-place changes on a later save."""
        [mouse, *_] = await _seed(transactions)

        async with transactions.begin() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(mouse.id)
            product.name = "Wireless Mouse"
            await repo.save(product)

        async with transactions.begin(read_only=True) as session:
            product = await ProductRepository(session).get_by_id(mouse.id)
            assert product.name == "Wireless Mouse"


class TestQueries:
    """Tests for lookups and searches."""

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, transactions: TransactionManager) -> None:
        """Should return None for an unknown id."""
        async with transactions.begin(read_only=True) as session:
            assert await ProductRepository(session).get_by_id(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_find_all(self, transactions: TransactionManager) -> None:
        """Should return every product."""
        seeded = await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).find_all()
        assert {p.id for p in products} == {p.id for p in seeded}

    @pytest.mark.asyncio
    async def test_search_without_filters_matches_all(self, transactions: TransactionManager) -> None:
        """Should not constrain anything when no filter is given."""
        seeded = await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search()
        assert len(products) == len(seeded)

    @pytest.mark.asyncio
    async def test_search_by_category(self, transactions: TransactionManager) -> None:
        """Should return exactly the products in the category."""
        await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search(category="Peripherals")
        assert sorted(p.name for p in products) == ["Keyboard", "Mouse"]

    @pytest.mark.asyncio
    async def test_search_by_price(self, transactions: TransactionManager) -> None:
        """Should match the exact price."""
        await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search(price=Decimal("19.90"))
        assert sorted(p.name for p in products) == ["Monitor", "Mouse"]

    @pytest.mark.asyncio
    async def test_search_combines_filters(self, transactions: TransactionManager) -> None:
        """Should AND the supplied filters."""
        await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search(
                price=Decimal("19.90"),
                category="Peripherals",
            )
        assert [p.name for p in products] == ["Mouse"]

    @pytest.mark.asyncio
    async def test_search_no_match(self, transactions: TransactionManager) -> None:
        """Should return an empty sequence when nothing matches."""
        await _seed(transactions)
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).search(name="Webcam")
        assert list(products) == []


class TestDelete:
    """Tests for deleting products."""

    @pytest.mark.asyncio
    async def test_delete_removes_record(self, transactions: TransactionManager) -> None:
        """Should remove the product."""
        [mouse, *_] = await _seed(transactions)

        async with transactions.begin() as session:
            repo = ProductRepository(session)
            await repo.delete(await repo.get_by_id(mouse.id))

        async with transactions.begin(read_only=True) as session:
            assert await ProductRepository(session).get_by_id(mouse.id) is None
