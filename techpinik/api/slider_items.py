"""Homepage slider endpoints."""

from uuid import UUID

import structlog
from fastapi import APIRouter, status

from techpinik.core.database import AsyncSessionDep
from techpinik.core.deps import CurrentAdmin
from techpinik.schemas.common import ApiResponse
from techpinik.schemas.product import SortOrder
from techpinik.schemas.slider import (
    SliderItemCreate,
    SliderItemResponse,
    SliderItemUpdate,
    SliderSortField,
)
from techpinik.services import slider_service

logger = structlog.get_logger()

router = APIRouter(prefix="/slider-items", tags=["slider"])


@router.get("", response_model=ApiResponse[list[SliderItemResponse]])
async def list_slider_items(
    session: AsyncSessionDep,
    is_active: bool | None = None,
    sort_by: SliderSortField = "sort_order",
    sort_order: SortOrder = "asc",
) -> ApiResponse[list[SliderItemResponse]]:
    """List slider items in display order."""
    items = await slider_service.list_slider_items(
        session,
        is_active=is_active,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ApiResponse[list[SliderItemResponse]](
        data=[SliderItemResponse.model_validate(item) for item in items],
    )


@router.post(
    "",
    response_model=ApiResponse[SliderItemResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_slider_item(
    item_data: SliderItemCreate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[SliderItemResponse]:
    """Add a slider item; without `sort_order` it goes last."""
    item = await slider_service.create_slider_item(session, item_data)
    await session.commit()
    logger.info("Slider item created", item_id=str(item.id), sort_order=item.sort_order)
    return ApiResponse[SliderItemResponse](
        data=SliderItemResponse.model_validate(item),
        message="Slider item created successfully",
    )


@router.get("/{item_id}", response_model=ApiResponse[SliderItemResponse])
async def get_slider_item(
    item_id: UUID,
    session: AsyncSessionDep,
) -> ApiResponse[SliderItemResponse]:
    """Get a slider item."""
    item = await slider_service.get_slider_item_or_404(session, item_id)
    return ApiResponse[SliderItemResponse](data=SliderItemResponse.model_validate(item))


@router.put("/{item_id}", response_model=ApiResponse[SliderItemResponse])
async def update_slider_item(
    item_id: UUID,
    item_data: SliderItemUpdate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[SliderItemResponse]:
    """Update a slider item."""
    item = await slider_service.get_slider_item_or_404(session, item_id)
    item = await slider_service.update_slider_item(session, item, item_data)
    await session.commit()
    logger.info("Slider item updated", item_id=str(item_id))
    return ApiResponse[SliderItemResponse](
        data=SliderItemResponse.model_validate(item),
        message="Slider item updated successfully",
    )


@router.delete("/{item_id}", response_model=ApiResponse[None])
async def delete_slider_item(
    item_id: UUID,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[None]:
    """Delete a slider item."""
    item = await slider_service.get_slider_item_or_404(session, item_id)
    await slider_service.delete_slider_item(session, item)
    await session.commit()
    logger.info("Slider item deleted", item_id=str(item_id))
    return ApiResponse[None](message="Slider item deleted successfully")
