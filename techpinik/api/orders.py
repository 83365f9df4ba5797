"""Order endpoints: public checkout and tracking, back-office management."""

from datetime import datetime
from typing import Annotated
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, Request, status

from techpinik.core.database import AsyncSessionDep
from techpinik.core.deps import CurrentAdmin
from techpinik.core.observability import record_order_operation
from techpinik.core.rate_limit import RATE_LIMIT_CHECKOUT, limiter
from techpinik.schemas.common import ApiResponse, PaginatedResponse, Pagination
from techpinik.schemas.order import OrderCreate, OrderResponse, OrderSortField, OrderUpdate
from techpinik.schemas.product import SortOrder
from techpinik.services import order_service

logger = structlog.get_logger()

router = APIRouter(prefix="/orders", tags=["orders"])


@router.get("", response_model=PaginatedResponse[OrderResponse])
async def list_orders(
    admin: CurrentAdmin,
    session: AsyncSessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    customer_phone: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    sort_by: OrderSortField = "created_at",
    sort_order: SortOrder = "desc",
) -> PaginatedResponse[OrderResponse]:
    """List orders with their items and district (paginated)."""
    orders, total = await order_service.list_orders(
        session=session,
        page=page,
        limit=limit,
        status=status_filter,
        customer_phone=customer_phone,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return PaginatedResponse[OrderResponse](
        data=[OrderResponse.model_validate(order) for order in orders],
        pagination=Pagination.build(page, limit, total),
    )


@router.post(
    "",
    response_model=ApiResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(RATE_LIMIT_CHECKOUT)
async def create_order(
    request: Request,
    order_data: OrderCreate,
    session: AsyncSessionDep,
) -> ApiResponse[OrderResponse]:
    """Place an order (checkout).

    Prices come from the catalog at the time of the order, delivery from the
    chosen district. Stock is reserved for every line.
    """
    order = await order_service.create_order(session, order_data)
    await session.commit()
    record_order_operation("create")
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order),
        message="Order created successfully",
    )


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(
    order_id: UUID,
    session: AsyncSessionDep,
) -> ApiResponse[OrderResponse]:
    """Get an order for the confirmation and tracking pages."""
    order = await order_service.get_order_or_404(session, order_id)
    return ApiResponse[OrderResponse](data=OrderResponse.model_validate(order))


@router.put("/{order_id}", response_model=ApiResponse[OrderResponse])
async def update_order(
    order_id: UUID,
    order_data: OrderUpdate,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[OrderResponse]:
    """Update an order's status, payment, district, notes or contact details."""
    order = await order_service.get_order_or_404(session, order_id)
    previous_status = order.status
    order = await order_service.update_order(session, order, order_data)
    await session.commit()

    logger.info(
        "Order updated",
        order_id=str(order_id),
        previous_status=previous_status,
        status=order.status,
        admin_id=admin.user_id,
    )
    record_order_operation("update")
    return ApiResponse[OrderResponse](
        data=OrderResponse.model_validate(order),
        message="Order updated successfully",
    )


@router.delete("/{order_id}", response_model=ApiResponse[None])
async def delete_order(
    order_id: UUID,
    admin: CurrentAdmin,
    session: AsyncSessionDep,
) -> ApiResponse[None]:
    """Delete a pending or cancelled order; a pending order's stock is restored."""
    order = await order_service.get_order_or_404(session, order_id)
    await order_service.delete_order(session, order)
    await session.commit()

    logger.info("Order deleted", order_id=str(order_id), admin_id=admin.user_id)
    record_order_operation("delete")
    return ApiResponse[None](message="Order deleted successfully")
