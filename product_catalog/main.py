"""Product Catalog API main application module.

This module builds the FastAPI application and wires the process-scoped
handles (database engine, event channel, listener worker) in its
lifespan.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI

from product_catalog.api.errors import setup_exception_handlers
from product_catalog.api.health import router as health_router
from product_catalog.api.middleware import setup_middleware
from product_catalog.api.products import router as products_router
from product_catalog.catalog.service import ProductService
from product_catalog.events.channel import build_event_channel
from product_catalog.events.listener import ListenerWorker, ProductCreatedListener
from product_catalog.infrastructure.config import Settings, settings as default_settings
from product_catalog.infrastructure.database import (
    TransactionManager,
    create_engine,
    create_schema,
    create_session_factory,
)
from product_catalog.infrastructure.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Starting Product Catalog API",
        version=settings.api_version,
        debug=settings.debug,
        event_transport=settings.event_transport,
    )

    engine = create_engine(settings)
    if settings.database_auto_create:
        await create_schema(engine)
    transactions = TransactionManager(create_session_factory(engine))

    channel = build_event_channel(settings)
    await channel.start()

    listener = ProductCreatedListener(structlog.get_logger("product_catalog.listener"))
    worker = ListenerWorker(channel, listener)
    worker.start()

    app.state.transactions = transactions
    app.state.event_channel = channel
    app.state.creation_listener = listener
    app.state.listener_worker = worker
    app.state.product_service = ProductService(transactions, channel)

    yield

    logger.info("Shutting down Product Catalog API")
    await worker.stop()
    await channel.close()
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application for a settings object.

    Args:
        settings: Settings to use; the environment-loaded ones by default.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or default_settings
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="Product Catalog API",
        description="Product catalog management with creation notifications",
        version=settings.api_version,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    setup_middleware(app)
    setup_exception_handlers(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(products_router)

    return app


app = create_app()
