"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from product_catalog.infrastructure.config import Settings
from product_catalog.main import create_app


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    """Application bound to the test database."""
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the application lifespan running."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def mouse_payload() -> dict:
    """JSON body of a valid product."""
    return {"name": "Mouse", "price": 19.9, "category": "Peripherals"}
