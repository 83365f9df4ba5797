"""Category service for database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from techpinik.core.errors import ConflictError, InvalidRequestError, NotFoundError
from techpinik.models.category import Category
from techpinik.models.product import Product
from techpinik.schemas.category import CategoryCreate, CategoryUpdate

# Sentinel for the `parent_id=null` filter, which selects root categories
ROOTS_ONLY = "null"


async def get_category_by_id(
    session: AsyncSession,
    category_id: UUID,
    include_products: bool = False,
) -> Category | None:
    """Get a category by its ID, optionally with its products loaded."""
    query = select(Category).where(Category.id == category_id)
    if include_products:
        query = query.options(selectinload(Category.products))
    result = await session.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def get_category_or_404(
    session: AsyncSession,
    category_id: UUID,
    include_products: bool = False,
) -> Category:
    """Get a category by its ID or raise NotFoundError."""
    category = await get_category_by_id(session, category_id, include_products)
    if category is None:
        raise NotFoundError("Category")
    return category


async def list_categories(
    session: AsyncSession,
    parent_id: UUID | str | None = None,
    include_products: bool = False,
) -> list[Category]:
    """Get all categories ordered by name.

    `parent_id` narrows the list to the children of one category, or to the
    root categories when it is the string "null".
    """
    query = select(Category).order_by(Category.name)
    if parent_id == ROOTS_ONLY:
        query = query.where(Category.parent_id.is_(None))
    elif parent_id is not None:
        query = query.where(Category.parent_id == parent_id)
    if include_products:
        query = query.options(selectinload(Category.products))

    result = await session.execute(query)
    return list(result.scalars().all())


async def _check_slug(
    session: AsyncSession,
    slug: str,
    exclude_id: UUID | None = None,
) -> None:
    query = select(Category.id).where(Category.slug == slug)
    if exclude_id:
        query = query.where(Category.id != exclude_id)
    result = await session.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Category with this slug already exists")


async def _check_parent(session: AsyncSession, parent_id: UUID) -> None:
    result = await session.execute(select(Category.id).where(Category.id == parent_id))
    if result.scalar_one_or_none() is None:
        raise InvalidRequestError("Parent category not found")


async def create_category(
    session: AsyncSession,
    category_data: CategoryCreate,
) -> Category:
    """Create a new category."""
    await _check_slug(session, category_data.slug)
    if category_data.parent_id:
        await _check_parent(session, category_data.parent_id)

    category = Category(**category_data.model_dump())
    session.add(category)
    await session.flush()
    return await get_category_or_404(session, category.id)


async def update_category(
    session: AsyncSession,
    category: Category,
    category_data: CategoryUpdate,
) -> Category:
    """Update an existing category.

    Raises ConflictError on a slug clash and InvalidRequestError when the new
    parent is the category itself or does not exist.
    """
    update_data = category_data.model_dump(exclude_unset=True)

    new_slug = update_data.get("slug")
    if new_slug and new_slug != category.slug:
        await _check_slug(session, new_slug, exclude_id=category.id)

    if "parent_id" in update_data:
        parent_id = update_data["parent_id"]
        if parent_id == category.id:
            raise InvalidRequestError("Category cannot be its own parent")
        if parent_id:
            await _check_parent(session, parent_id)

    for field, value in update_data.items():
        if value is None and field in ("name", "slug"):
            continue
        setattr(category, field, value)
    await session.flush()
    return await get_category_or_404(session, category.id)


async def delete_category(session: AsyncSession, category: Category) -> None:
    """Delete a category with no children and no products."""
    children = await session.execute(
        select(Category.id).where(Category.parent_id == category.id).limit(1)
    )
    if children.scalar_one_or_none() is not None:
        raise ConflictError("Cannot delete category that has child categories")

    products = await session.execute(
        select(Product.id).where(Product.category_id == category.id).limit(1)
    )
    if products.scalar_one_or_none() is not None:
        raise ConflictError("Cannot delete category that has products")

    await session.delete(category)
    await session.flush()
