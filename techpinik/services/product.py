"""Product service for catalog database operations."""

from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from techpinik.core.errors import ConflictError, NotFoundError
from techpinik.models.order import OrderItem
from techpinik.models.product import Product
from techpinik.schemas.product import ProductCreate, ProductFilters, ProductUpdate

SORT_COLUMNS = {
    "name": Product.name,
    "price": Product.price,
    "created_at": Product.created_at,
}

# Columns an update may not clear
REQUIRED_FIELDS = frozenset(
    {"name", "price", "slug", "images", "stock_quantity", "is_active", "is_featured"}
)


async def get_product_by_id(session: AsyncSession, product_id: UUID) -> Product | None:
    """Get a product by its ID."""
    result = await session.execute(
        select(Product)
        .where(Product.id == product_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_product_or_404(session: AsyncSession, product_id: UUID) -> Product:
    """Get a product by its ID or raise NotFoundError."""
    product = await get_product_by_id(session, product_id)
    if product is None:
        raise NotFoundError("Product")
    return product


async def is_slug_taken(
    session: AsyncSession,
    slug: str,
    exclude_id: UUID | None = None,
) -> bool:
    """Check whether another product already uses the slug."""
    query = select(Product.id).where(Product.slug == slug)
    if exclude_id:
        query = query.where(Product.id != exclude_id)
    result = await session.execute(query.limit(1))
    return result.scalar_one_or_none() is not None


async def list_products(
    session: AsyncSession,
    filters: ProductFilters,
    page: int = 1,
    limit: int = 12,
) -> tuple[list[Product], int]:
    """Get a filtered, sorted page of products.

    Returns tuple of (products, total_count).
    """
    conditions = []
    if filters.category_id:
        conditions.append(Product.category_id == filters.category_id)
    if filters.min_price is not None:
        conditions.append(Product.price >= filters.min_price)
    if filters.max_price is not None:
        conditions.append(Product.price <= filters.max_price)
    if filters.is_featured:
        conditions.append(Product.is_featured == True)  # noqa: E712
    if filters.search:
        pattern = f"%{filters.search}%"
        conditions.append(
            or_(Product.name.ilike(pattern), Product.description.ilike(pattern))
        )

    count_result = await session.execute(
        select(func.count(Product.id)).where(*conditions)
    )
    total = count_result.scalar() or 0

    column = SORT_COLUMNS[filters.sort_by]
    ordering = column.asc() if filters.sort_order == "asc" else column.desc()
    offset = (page - 1) * limit
    result = await session.execute(
        select(Product)
        .where(*conditions)
        .order_by(ordering, Product.id)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_product(session: AsyncSession, product_data: ProductCreate) -> Product:
    """Create a new product.

    Raises ConflictError if the slug is already used.
    """
    if await is_slug_taken(session, product_data.slug):
        raise ConflictError("Product with this slug already exists")

    product = Product(**product_data.model_dump())
    session.add(product)
    await session.flush()
    return await get_product_or_404(session, product.id)


async def update_product(
    session: AsyncSession,
    product: Product,
    product_data: ProductUpdate,
) -> Product:
    """Update an existing product with the fields that were sent."""
    update_data = product_data.model_dump(exclude_unset=True)

    new_slug = update_data.get("slug")
    if new_slug and new_slug != product.slug:
        if await is_slug_taken(session, new_slug, exclude_id=product.id):
            raise ConflictError("Product with this slug already exists")

    for field, value in update_data.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(product, field, value)
    await session.flush()
    return await get_product_or_404(session, product.id)


async def delete_product(session: AsyncSession, product: Product) -> None:
    """Delete a product that no order refers to.

    Raises ConflictError if any order item references it.
    """
    result = await session.execute(
        select(OrderItem.id).where(OrderItem.product_id == product.id).limit(1)
    )
    if result.scalar_one_or_none() is not None:
        raise ConflictError("Cannot delete product that is referenced in orders")

    await session.delete(product)
    await session.flush()
