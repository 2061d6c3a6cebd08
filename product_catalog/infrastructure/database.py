"""Database configuration and transaction management.

Provides the async SQLAlchemy engine factory, the declarative base and
explicit transaction scopes used by the service layer.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from product_catalog.infrastructure.config import Settings

# Base class for models
Base = declarative_base()


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    Args:
        settings: Application settings.

    Returns:
        AsyncEngine bound to ``settings.database_url``.
    """
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the session factory for an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables known to the declarative base."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


class TransactionManager:
    """Hands out read-only or read-write transaction scopes.

    Every scope owns its own session. A read-write scope commits when the
    block exits normally; a read-only scope is always rolled back, after its
    loaded objects are detached so they stay readable once the scope ends.
    Both roll back and re-raise when the block raises.

    Example usage:
        async with transactions.begin(read_only=True) as session:
            products = await ProductRepository(session).find_all()
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def begin(self, read_only: bool = False) -> AsyncIterator[AsyncSession]:
        """Open a transaction scope.

        Args:
            read_only: Whether the scope only reads.

        Yields:
            AsyncSession bound to the scope.
        """
        async with self.session_factory() as session:
            try:
                if read_only and session.bind.dialect.name == "postgresql":
                    await session.execute(text("SET TRANSACTION READ ONLY"))
                yield session
            except Exception:
                await session.rollback()
                raise
            if read_only:
                session.expunge_all()
                await session.rollback()
            else:
                await session.commit()

    async def ping(self) -> None:
        """Run a trivial statement to check connectivity."""
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))
