"""Slider item service for database operations."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from techpinik.core.errors import NotFoundError
from techpinik.models.slider import SliderItem
from techpinik.schemas.slider import SliderItemCreate, SliderItemUpdate

SORT_COLUMNS = {
    "sort_order": SliderItem.sort_order,
    "created_at": SliderItem.created_at,
    "title": SliderItem.title,
}


async def get_slider_item_by_id(session: AsyncSession, item_id: UUID) -> SliderItem | None:
    """Get a slider item by its ID."""
    result = await session.execute(select(SliderItem).where(SliderItem.id == item_id))
    return result.scalar_one_or_none()


async def get_slider_item_or_404(session: AsyncSession, item_id: UUID) -> SliderItem:
    """Get a slider item by its ID or raise NotFoundError."""
    item = await get_slider_item_by_id(session, item_id)
    if item is None:
        raise NotFoundError("Slider item")
    return item


async def list_slider_items(
    session: AsyncSession,
    is_active: bool | None = None,
    sort_by: str = "sort_order",
    sort_order: str = "asc",
) -> list[SliderItem]:
    """Get slider items, optionally only the active or inactive ones."""
    query = select(SliderItem)
    if is_active is not None:
        query = query.where(SliderItem.is_active == is_active)

    column = SORT_COLUMNS[sort_by]
    query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
    result = await session.execute(query)
    return list(result.scalars().all())


async def next_sort_order(session: AsyncSession) -> int:
    """Position after the current last item, or 0 for an empty slider."""
    result = await session.execute(select(func.max(SliderItem.sort_order)))
    highest = result.scalar()
    return 0 if highest is None else highest + 1


async def create_slider_item(
    session: AsyncSession,
    item_data: SliderItemCreate,
) -> SliderItem:
    """Create a new slider item."""
    values = item_data.model_dump()
    if values["sort_order"] is None:
        values["sort_order"] = await next_sort_order(session)

    item = SliderItem(**values)
    session.add(item)
    await session.flush()
    await session.refresh(item)
    return item


async def update_slider_item(
    session: AsyncSession,
    item: SliderItem,
    item_data: SliderItemUpdate,
) -> SliderItem:
    """Update an existing slider item."""
    update_data = item_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("title", "image_url", "sort_order", "is_active"):
            continue
        setattr(item, field, value)
    await session.flush()
    await session.refresh(item)
    return item


async def delete_slider_item(session: AsyncSession, item: SliderItem) -> None:
    """Delete a slider item."""
    await session.delete(item)
    await session.flush()
