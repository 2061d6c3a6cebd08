"""Product API endpoints.

Provides listing, lookup, search, creation, update and deletion of
catalog products under ``/v1/produto``.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status

from product_catalog.api.schemas import ProblemDetail
from product_catalog.catalog.schemas import Price, ProductRequest, ProductResponse
from product_catalog.catalog.service import ProductService

router = APIRouter(prefix="/v1/produto", tags=["Products"])

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ProblemDetail, "description": "Invalid request"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ProblemDetail, "description": "Internal error"},
}
NOT_FOUND_RESPONSE = {
    422: {
        "model": ProblemDetail,
        "description": "No product with this id",
    },
}


# ============================================================================
# Dependencies
# ============================================================================


def get_product_service(request: Request) -> ProductService:
    """Get the product service built at startup."""
    return request.app.state.product_service


ServiceDep = Annotated[ProductService, Depends(get_product_service)]


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=list[ProductResponse],
    status_code=status.HTTP_200_OK,
    summary="List products",
    description="Return every product in the catalog.",
    responses=ERROR_RESPONSES,
)
async def list_products(service: ServiceDep) -> list[ProductResponse]:
    """List all products."""
    return await service.list_products()


@router.get(
    "/busca",
    response_model=list[ProductResponse],
    status_code=status.HTTP_200_OK,
    summary="Search products",
    description="Return products matching every supplied filter.",
    responses=ERROR_RESPONSES,
)
async def search_products(
    service: ServiceDep,
    name: Annotated[str | None, Query(alias="nome", description="Exact name")] = None,
    price: Annotated[Price | None, Query(alias="preco", description="Exact price")] = None,
    category: Annotated[str | None, Query(alias="categoria", description="Exact category")] = None,
) -> list[ProductResponse]:
    """Search products by name, price and category.

    Absent filters do not constrain the result.
    """
    return await service.search_products(
        name=name,
        price=price,
        category=category,
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Get product",
    description="Return the product with the given id.",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def get_product(product_id: UUID, service: ServiceDep) -> ProductResponse:
    """Get a product by id."""
    return await service.get_product(product_id)


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create product",
    description="Create a product and announce it to creation listeners.",
    responses=ERROR_RESPONSES,
)
async def create_product(data: ProductRequest, service: ServiceDep) -> ProductResponse:
    """Create a product."""
    return await service.create_product(data)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Update product",
    description="Overwrite name, price and category of an existing product.",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def update_product(
    product_id: UUID,
    data: ProductRequest,
    service: ServiceDep,
) -> ProductResponse:
    """Update a product."""
    return await service.update_product(product_id, data)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete product",
    description="Remove the product with the given id.",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def delete_product(product_id: UUID, service: ServiceDep) -> Response:
    """Delete a product."""
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
