"""Domain layer for the product catalog.

Contains:
- Events: ProductCreated and its base class
- Exceptions: Domain errors and their problem-detail rendering
"""

from product_catalog.domain.events import DomainEvent, ProductCreated
from product_catalog.domain.exceptions import (
    DomainError,
    EventPublishError,
    ProductNotFoundError,
)

__all__ = [
    # Events
    "DomainEvent",
    "ProductCreated",
    # Exceptions
    "DomainError",
    "EventPublishError",
    "ProductNotFoundError",
]
