"""District service for database operations."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from techpinik.core.errors import ConflictError, InvalidRequestError, NotFoundError
from techpinik.models.district import District
from techpinik.models.order import Order
from techpinik.schemas.district import DistrictCreate, DistrictUpdate

SORT_COLUMNS = {
    "name": District.name,
    "delivery_charge": District.delivery_charge,
    "created_at": District.created_at,
}


async def get_district_by_id(session: AsyncSession, district_id: UUID) -> District | None:
    """Get a district by its ID."""
    result = await session.execute(select(District).where(District.id == district_id))
    return result.scalar_one_or_none()


async def get_district_or_404(session: AsyncSession, district_id: UUID) -> District:
    """Get a district by its ID or raise NotFoundError."""
    district = await get_district_by_id(session, district_id)
    if district is None:
        raise NotFoundError("District")
    return district


async def list_districts(
    session: AsyncSession,
    search: str | None = None,
    sort_by: str = "name",
    sort_order: str = "asc",
) -> list[District]:
    """Get all districts, optionally filtered by a name substring."""
    query = select(District)
    if search:
        query = query.where(District.name.ilike(f"%{search}%"))

    column = SORT_COLUMNS[sort_by]
    query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
    result = await session.execute(query)
    return list(result.scalars().all())


def _check_charge(delivery_charge: Decimal) -> None:
    if delivery_charge < 0:
        raise InvalidRequestError("Delivery charge must be non-negative")


async def _check_name(
    session: AsyncSession,
    name: str,
    exclude_id: UUID | None = None,
) -> None:
    # Names are unique regardless of case
    query = select(District.id).where(func.lower(District.name) == name.lower())
    if exclude_id:
        query = query.where(District.id != exclude_id)
    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("District with this name already exists")


async def create_district(
    session: AsyncSession,
    district_data: DistrictCreate,
) -> District:
    """Create a new district with a trimmed name."""
    _check_charge(district_data.delivery_charge)
    name = district_data.name.strip()
    if not name:
        raise InvalidRequestError("District name cannot be empty")
    await _check_name(session, name)

    district = District(
        name=name,
        delivery_charge=district_data.delivery_charge,
        is_active=district_data.is_active,
    )
    session.add(district)
    await session.flush()
    await session.refresh(district)
    return district


async def update_district(
    session: AsyncSession,
    district: District,
    district_data: DistrictUpdate,
) -> District:
    """Update an existing district."""
    update_data = district_data.model_dump(exclude_unset=True)

    if update_data.get("delivery_charge") is not None:
        _check_charge(update_data["delivery_charge"])

    if update_data.get("name") is not None:
        name = update_data["name"].strip()
        if not name:
            raise InvalidRequestError("District name cannot be empty")
        if name.lower() != district.name.lower():
            await _check_name(session, name, exclude_id=district.id)
        update_data["name"] = name

    for field, value in update_data.items():
        if value is not None:
            setattr(district, field, value)
    await session.flush()
    await session.refresh(district)
    return district


async def delete_district(session: AsyncSession, district: District) -> None:
    """Delete a district that no order refers to."""
    result = await session.execute(
        select(Order.id).where(Order.district_id == district.id).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Cannot delete district that is referenced in orders")

    await session.delete(district)
    await session.flush()
