"""Mapping between product requests, stored records, responses and events."""

from product_catalog.catalog.models import Product
from product_catalog.catalog.schemas import ProductRequest, ProductResponse
from product_catalog.domain.events import ProductCreated


def to_entity(request: ProductRequest, existing: Product | None = None) -> Product:
    """Copy request fields onto a product record.

    Args:
        request: Validated product request.
        existing: Record to update in place. A new record without an id
            is built when omitted.

    Returns:
        The new record, or ``existing`` after the copy.
    """
    if existing is None:
        return Product(
            name=request.name,
            price=request.price,
            category=request.category,
        )

    existing.name = request.name
    existing.price = request.price
    existing.category = request.category
    return existing


def to_response(product: Product) -> ProductResponse:
    """Project a stored product to its response shape."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        price=product.price,
        category=product.category,
    )


def to_event(product: Product) -> ProductCreated:
    """Snapshot a persisted product as a creation event."""
    return ProductCreated(
        product_id=str(product.id),
        name=product.name,
        price=product.price,
        category=product.category,
    )
