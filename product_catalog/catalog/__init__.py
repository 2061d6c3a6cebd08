"""Product catalog.

Store, transform and service layers for catalog products.
"""

from product_catalog.catalog.models import Product
from product_catalog.catalog.repository import ProductRepository
from product_catalog.catalog.schemas import ProductRequest, ProductResponse
from product_catalog.catalog.service import ProductService

__all__ = [
    # Models
    "Product",
    # Repository
    "ProductRepository",
    # Schemas
    "ProductRequest",
    "ProductResponse",
    # Service
    "ProductService",
]
