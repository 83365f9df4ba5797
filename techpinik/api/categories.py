"""Category endpoints."""

from uuid import UUID

import structlog
from fastapi import APIRouter, status

from techpinik.core.database import AsyncSessionDep
from techpinik.core.deps import CurrentAdmin
from techpinik.core.errors import InvalidRequestError
from techpinik.models.category import Category
from techpinik.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithProducts,
)
from techpinik.schemas.common import ApiResponse
from techpinik.services import category_service
from techpinik.services.category import ROOTS_ONLY

logger = structlog.get_logger()

router = APIRouter(prefix="/categories", tags=["categories"])


def _serialize(category: Category, include_products: bool) -> CategoryWithProducts:
    if include_products:
        return CategoryWithProducts.model_validate(category)
    # Reading `products` here would lazy-load outside the async context
    return CategoryWithProducts(**CategoryResponse.model_validate(category).model_dump())


def _parse_parent_filter(parent_id: str | None) -> UUID | str | None:
    if parent_id is None or parent_id == ROOTS_ONLY:
        return parent_id
    try:
        return UUID(parent_id)
    except ValueError:
        raise InvalidRequestError("parent_id must be a UUID or 'null'")


@router.get("", response_model=ApiResponse[list[CategoryWithProducts]])
async def list_categories(
    session: AsyncSessionDep,
    include_products: bool = False,
    parent_id: str | None = None,
) -> ApiResponse[list[CategoryWithProducts]]:
    """List categories by name.

    Pass `parent_id=null` for root categories only, or a category ID for its
    children.
    """
    categories = await category_service.list_categories(
        session,
        parent_id=_parse_parent_filter(parent_id),
        include_products=include_products,
    )
    return ApiResponse(data=[_serialize(c, include_products) for c in categories])


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    category_data: CategoryCreate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[CategoryResponse]:
    """Create a category, optionally under an existing parent."""
    category = await category_service.create_category(session, category_data)
    await session.commit()
    logger.info("Category created", category_id=str(category.id), slug=category.slug)
    return ApiResponse[CategoryResponse](
        data=CategoryResponse.model_validate(category),
        message="Category created successfully",
    )


@router.get(
    "/{category_id}",
    response_model=ApiResponse[CategoryWithProducts],
)
async def get_category(
    category_id: UUID,
    session: AsyncSessionDep,
    include_products: bool = False,
) -> ApiResponse[CategoryWithProducts]:
    """Get a category, optionally with its products."""
    category = await category_service.get_category_or_404(
        session,
        category_id,
        include_products=include_products,
    )
    return ApiResponse(data=_serialize(category, include_products))


@router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_category(
    category_id: UUID,
    category_data: CategoryUpdate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[CategoryResponse]:
    """Update a category."""
    category = await category_service.get_category_or_404(session, category_id)
    category = await category_service.update_category(session, category, category_data)
    await session.commit()
    logger.info("Category updated", category_id=str(category_id))
    return ApiResponse[CategoryResponse](
        data=CategoryResponse.model_validate(category),
        message="Category updated successfully",
    )


@router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(
    category_id: UUID,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[None]:
    """Delete a category with no child categories and no products."""
    category = await category_service.get_category_or_404(session, category_id)
    await category_service.delete_category(session, category)
    await session.commit()
    logger.info("Category deleted", category_id=str(category_id))
    return ApiResponse[None](message="Category deleted successfully")
