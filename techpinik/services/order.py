"""Order service: checkout, back-office edits and deletion."""

import secrets
import string
from datetime import datetime
from decimal import Decimal
from uuid import UUID

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from techpinik.core.database import utc_now
from techpinik.core.errors import ConflictError, InvalidRequestError, NotFoundError
from techpinik.models.district import District
from techpinik.models.order import STATUS_TRANSITIONS, Order, OrderItem, OrderStatus
from techpinik.models.product import Product
from techpinik.schemas.order import OrderCreate, OrderUpdate

logger = structlog.get_logger()

# Characters for the random part of order numbers (no 0/O or 1/I look-alikes)
ORDER_NUMBER_CHARS = "".join(
    c for c in string.ascii_uppercase + string.digits if c not in "0O1I"
)
ORDER_NUMBER_SUFFIX_LENGTH = 6

SORT_COLUMNS = {
    "created_at": Order.created_at,
    "total_amount": Order.total_amount,
    "status": Order.status,
}

DELETABLE_STATUSES = (OrderStatus.PENDING.value, OrderStatus.CANCELLED.value)


def generate_order_number(now: datetime | None = None) -> str:
    """Generate an order number like TP-20250101-7KX3QH."""
    now = now or utc_now()
    suffix = "".join(
        secrets.choice(ORDER_NUMBER_CHARS) for _ in range(ORDER_NUMBER_SUFFIX_LENGTH)
    )
    return f"TP-{now:%Y%m%d}-{suffix}"


async def generate_unique_order_number(
    session: AsyncSession,
    max_attempts: int = 10,
) -> str:
    """Generate an order number no other order uses.

    Raises ConflictError if no free number is found after max_attempts.
    """
    for _ in range(max_attempts):
        number = generate_order_number()
        result = await session.execute(
            select(Order.id).where(Order.order_number == number)
        )
        if result.scalar_one_or_none() is None:
            return number
    raise ConflictError("Unable to generate a unique order number")


async def get_order_by_id(session: AsyncSession, order_id: UUID) -> Order | None:
    """Get an order with its items and district."""
    result = await session.execute(
        select(Order)
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_order_or_404(session: AsyncSession, order_id: UUID) -> Order:
    """Get an order by its ID or raise NotFoundError."""
    order = await get_order_by_id(session, order_id)
    if order is None:
        raise NotFoundError("Order")
    return order


async def list_orders(
    session: AsyncSession,
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    customer_phone: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
) -> tuple[list[Order], int]:
    """Get a filtered, sorted page of orders.

    Returns tuple of (orders, total_count).
    """
    conditions = []
    if status:
        conditions.append(Order.status == status)
    if customer_phone:
        conditions.append(Order.customer_phone.ilike(f"%{customer_phone}%"))
    if date_from:
        conditions.append(Order.created_at >= date_from)
    if date_to:
        conditions.append(Order.created_at <= date_to)

    count_result = await session.execute(select(func.count(Order.id)).where(*conditions))
    total = count_result.scalar() or 0

    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    offset = (page - 1) * limit
    result = await session.execute(
        select(Order)
        .where(*conditions)
        .order_by(ordering, Order.id)
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total


async def create_order(session: AsyncSession, order_data: OrderCreate) -> Order:
    """Place an order.

    Validates the district and every product, prices the cart from current
    product prices, and decrements stock. Everything happens in the caller's
    transaction, so a failure leaves no partial order behind.
    """
    district = await session.get(District, order_data.district_id)
    if district is None:
        raise InvalidRequestError("Invalid district")

    subtotal = Decimal("0")
    items: list[OrderItem] = []
    for line in order_data.items:
        result = await session.execute(
            select(Product).where(Product.id == line.product_id).with_for_update()
        )
        product = result.scalar_one_or_none()
        if product is None:
            raise InvalidRequestError(f"Product not found: {line.product_id}")
        if product.stock_quantity < line.quantity:
            raise InvalidRequestError(f"Insufficient stock for product: {product.name}")

        subtotal += product.price * line.quantity
        product.stock_quantity -= line.quantity
        items.append(
            OrderItem(
                product_id=product.id,
                quantity=line.quantity,
                unit_price=product.price,
            )
        )

    delivery_charge = district.delivery_charge
    order = Order(
        order_number=await generate_unique_order_number(session),
        customer_name=order_data.customer_name,
        customer_phone=order_data.customer_phone,
        customer_email=order_data.customer_email,
        customer_address=order_data.customer_address,
        district_id=district.id,
        notes=order_data.notes,
        payment_method=order_data.payment_method,
        subtotal=subtotal,
        delivery_charge=delivery_charge,
        total_amount=subtotal + delivery_charge,
        status=OrderStatus.PENDING.value,
        items=items,
    )
    session.add(order)
    await session.flush()

    logger.info(
        "Order placed",
        order_id=str(order.id),
        order_number=order.order_number,
        item_count=len(items),
        total_amount=str(order.total_amount),
    )
    return await get_order_or_404(session, order.id)


def check_status_transition(current: str, requested: OrderStatus) -> None:
    """Raise InvalidRequestError unless `current -> requested` is allowed."""
    if current == requested.value:
        return
    try:
        allowed = STATUS_TRANSITIONS[OrderStatus(current)]
    except ValueError:
        allowed = ()
    if requested not in allowed:
        raise InvalidRequestError(
            f"Cannot change status from {current} to {requested.value}"
        )


async def update_order(
    session: AsyncSession,
    order: Order,
    order_data: OrderUpdate,
) -> Order:
    """Apply a back-office edit to an order.

    Status changes must follow the fulfilment flow. Moving the order to
    another district re-prices delivery and the total.
    """
    update_data = order_data.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    if new_status is not None:
        check_status_transition(order.status, new_status)
        order.status = new_status.value

    new_district_id = update_data.pop("district_id", None)
    if new_district_id is not None and new_district_id != order.district_id:
        district = await session.get(District, new_district_id)
        if district is None:
            raise InvalidRequestError("Invalid district")
        order.district_id = district.id
        order.delivery_charge = district.delivery_charge
        order.total_amount = order.subtotal + district.delivery_charge

    for field, value in update_data.items():
        if value is None and field not in ("notes", "customer_email"):
            continue
        setattr(order, field, value)

    await session.flush()
    return await get_order_or_404(session, order.id)


async def delete_order(session: AsyncSession, order: Order) -> None:
    """Delete a pending or cancelled order.

    Stock reserved by a pending order is put back; a cancelled order's stock
    stays as it is.
    """
    if order.status not in DELETABLE_STATUSES:
        raise ConflictError(f"Cannot delete order with status: {order.status}")

    if order.status == OrderStatus.PENDING.value:
        for item in order.items:
            if item.product is not None:
                item.product.stock_quantity += item.quantity

    await session.delete(order)
    await session.flush()
