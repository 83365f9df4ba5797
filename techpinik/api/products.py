"""Product catalog endpoints."""

from decimal import Decimal
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, status

from techpinik.core.database import AsyncSessionDep
from techpinik.core.deps import CurrentAdmin
from techpinik.schemas.common import ApiResponse, PaginatedResponse, Pagination
from techpinik.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductResponse,
    ProductSortField,
    ProductUpdate,
    SortOrder,
)
from techpinik.services import product_service

logger = structlog.get_logger()

router = APIRouter(prefix="/products", tags=["products"])

MAX_PAGE_SIZE = 100


@router.get("", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    session: AsyncSessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1)] = 12,
    category_id: UUID | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    is_featured: bool = False,
    search: str | None = None,
    sort_by: ProductSortField = "created_at",
    sort_order: SortOrder = "desc",
) -> PaginatedResponse[ProductResponse]:
    """List products with filtering, sorting and pagination.

    `limit` above 100 is clamped to 100.
    """
    limit = min(limit, MAX_PAGE_SIZE)
    filters = ProductFilters(
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        is_featured=is_featured,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    products, total = await product_service.list_products(
        session=session,
        filters=filters,
        page=page,
        limit=limit,
    )
    return PaginatedResponse[ProductResponse](
        data=[ProductResponse.model_validate(product) for product in products],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    product_data: ProductCreate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[ProductResponse]:
    """Create a product. Slugs must be unique."""
    product = await product_service.create_product(session, product_data)
    await session.commit()
    logger.info("Product created", product_id=str(product.id), slug=product.slug)
    return ApiResponse[ProductResponse](
        data=ProductResponse.model_validate(product),
        message="Product created successfully",
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(
    product_id: UUID,
    session: AsyncSessionDep,
) -> ApiResponse[ProductResponse]:
    """Get a product with its category."""
    product = await product_service.get_product_or_404(session, product_id)
    return ApiResponse[ProductResponse](data=ProductResponse.model_validate(product))


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: UUID,
    product_data: ProductUpdate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[ProductResponse]:
    """Update the fields of a product that are present in the body."""
    product = await product_service.get_product_or_404(session, product_id)
    product = await product_service.update_product(session, product, product_data)
    await session.commit()
    logger.info("Product updated", product_id=str(product_id))
    return ApiResponse[ProductResponse](
        data=ProductResponse.model_validate(product),
        message="Product updated successfully",
    )


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(
    product_id: UUID,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[None]:
    """Delete a product that has never been ordered."""
    product = await product_service.get_product_or_404(session, product_id)
    await product_service.delete_product(session, product)
    await session.commit()
    logger.info("Product deleted", product_id=str(product_id))
    return ApiResponse[None](message="Product deleted successfully")
