"""Shared fixtures for catalog tests."""

from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from product_catalog.catalog.schemas import ProductRequest
from product_catalog.catalog.service import ProductService
from product_catalog.infrastructure.config import Settings
from product_catalog.infrastructure.database import (
    TransactionManager,
    create_engine,
    create_schema,
    create_session_factory,
)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway SQLite database."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}",
        database_auto_create=True,
        event_transport="memory",
        event_queue_maxsize=100,
        log_json=False,
    )


@pytest_asyncio.fixture
async def transactions(settings: Settings) -> AsyncIterator[TransactionManager]:
    """Transaction manager over a freshly created schema."""
    engine = create_engine(settings)
    await create_schema(engine)
    yield TransactionManager(create_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def publisher() -> AsyncMock:
    """Publisher that records every event it receives."""
    return AsyncMock()


@pytest.fixture
def service(transactions: TransactionManager, publisher: AsyncMock) -> ProductService:
    """Product service wired to the test database and recording publisher."""
    return ProductService(transactions, publisher)


@pytest.fixture
def mouse_request() -> ProductRequest:
    """A valid product request."""
    return ProductRequest(name="Mouse", price=19.9, category="Peripherals")
