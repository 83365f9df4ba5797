"""Delivery district endpoints."""

from uuid import UUID

import structlog
from fastapi import APIRouter, status

from techpinik.core.database import AsyncSessionDep
from techpinik.core.deps import CurrentAdmin
from techpinik.schemas.common import ApiResponse
from techpinik.schemas.district import (
    DistrictCreate,
    DistrictResponse,
    DistrictSortField,
    DistrictUpdate,
)
from techpinik.schemas.product import SortOrder
from techpinik.services import district_service

logger = structlog.get_logger()

router = APIRouter(prefix="/districts", tags=["districts"])


@router.get("", response_model=ApiResponse[list[DistrictResponse]])
async def list_districts(
    session: AsyncSessionDep,
    search: str | None = None,
    sort_by: DistrictSortField = "name",
    sort_order: SortOrder = "asc",
) -> ApiResponse[list[DistrictResponse]]:
    """List districts, optionally filtered by part of the name."""
    districts = await district_service.list_districts(
        session,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return ApiResponse[list[DistrictResponse]](
        data=[DistrictResponse.model_validate(d) for d in districts],
    )


@router.post(
    "",
    response_model=ApiResponse[DistrictResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_district(
    district_data: DistrictCreate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[DistrictResponse]:
    """Create a district. Names are unique ignoring case."""
    district = await district_service.create_district(session, district_data)
    await session.commit()
    logger.info("District created", district_id=str(district.id), name=district.name)
    return ApiResponse[DistrictResponse](
        data=DistrictResponse.model_validate(district),
        message="District created successfully",
    )


@router.get("/{district_id}", response_model=ApiResponse[DistrictResponse])
async def get_district(
    district_id: UUID,
    session: AsyncSessionDep,
) -> ApiResponse[DistrictResponse]:
    """Get a district."""
    district = await district_service.get_district_or_404(session, district_id)
    return ApiResponse[DistrictResponse](data=DistrictResponse.model_validate(district))


@router.put("/{district_id}", response_model=ApiResponse[DistrictResponse])
async def update_district(
    district_id: UUID,
    district_data: DistrictUpdate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[DistrictResponse]:
    """Update a district's name, delivery charge or active flag."""
    district = await district_service.get_district_or_404(session, district_id)
    district = await district_service.update_district(session, district, district_data)
    await session.commit()
    logger.info("District updated", district_id=str(district_id))
    return ApiResponse[DistrictResponse](
        data=DistrictResponse.model_validate(district),
        message="District updated successfully",
    )


@router.delete("/{district_id}", response_model=ApiResponse[None])
async def delete_district(
    district_id: UUID,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[None]:
    """Delete a district no order has been delivered to."""
    district = await district_service.get_district_or_404(session, district_id)
    await district_service.delete_district(session, district)
    await session.commit()
    logger.info("District deleted", district_id=str(district_id))
    return ApiResponse[None](message="District deleted successfully")
