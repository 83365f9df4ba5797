"""Read-only queries behind the statistics reports."""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any, Protocol

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from techpinik.core.errors import DataAccessError
from techpinik.models.category import Category
from techpinik.models.district import District
from techpinik.models.order import Order, OrderItem
from techpinik.models.product import Product
from techpinik.schemas.stats import (
    ItemQuantity,
    LowStockProduct,
    OrderFigure,
    ProductSummary,
    RecentOrder,
)

logger = structlog.get_logger()


class StatsRepository(Protocol):
    """Data access needed by the StatsAggregator.

    Every method is an independent read, so the aggregator may await several
    of them concurrently. Failures surface as DataAccessError.
    """

    async def count_products(self) -> int: ...

    async def count_categories(self) -> int: ...

    async def count_orders(self) -> int: ...

    async def count_districts(self) -> int: ...

    async def orders_between(self, start: datetime, end: datetime) -> list[OrderFigure]: ...

    async def low_stock_products(
        self,
        threshold: int,
        limit: int | None = None,
        active_only: bool = False,
    ) -> list[LowStockProduct]: ...

    async def recent_orders(self, limit: int) -> list[RecentOrder]: ...

    async def order_item_quantities(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ItemQuantity]: ...

    async def paid_order_amounts(self) -> list[Decimal | None]: ...


class SqlStatsRepository:
    """StatsRepository backed by the SQLAlchemy session factory.

    Each query runs in its own short-lived session because an AsyncSession
    cannot serve concurrent awaits.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def _rows(self, operation: str, statement: Select[Any]) -> Sequence[Any]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(statement)
                return result.all()
        except (SQLAlchemyError, OSError) as e:
            # Connection failures from the driver surface as plain OSError
            logger.error("Statistics query failed", operation=operation, error=str(e))
            raise DataAccessError(f"Statistics query failed: {operation}", operation) from e

    async def _count(self, operation: str, column: Any) -> int:
        rows = await self._rows(operation, select(func.count(column)))
        return int(rows[0][0] or 0) if rows else 0

    async def count_products(self) -> int:
        return await self._count("count_products", Product.id)

    async def count_categories(self) -> int:
        return await self._count("count_categories", Category.id)

    async def count_orders(self) -> int:
        return await self._count("count_orders", Order.id)

    async def count_districts(self) -> int:
        return await self._count("count_districts", District.id)

    async def orders_between(self, start: datetime, end: datetime) -> list[OrderFigure]:
        """Orders created within [start, end], both ends inclusive."""
        rows = await self._rows(
            "orders_between",
            select(Order.total_amount, Order.status, Order.created_at)
            .where(Order.created_at >= start, Order.created_at <= end)
            .order_by(Order.created_at),
        )
        return [
            OrderFigure(total_amount=row.total_amount, status=row.status, created_at=row.created_at)
            for row in rows
        ]

    async def low_stock_products(
        self,
        threshold: int,
        limit: int | None = None,
        active_only: bool = False,
    ) -> list[LowStockProduct]:
        """Products with fewer than `threshold` units, lowest stock first."""
        statement = (
            select(Product.id, Product.name, Product.stock_quantity, Product.images)
            .where(Product.stock_quantity < threshold)
            .order_by(Product.stock_quantity.asc(), Product.name)
        )
        if active_only:
            statement = statement.where(Product.is_active == True)  # noqa: E712
        if limit is not None:
            statement = statement.limit(limit)

        rows = await self._rows("low_stock_products", statement)
        return [
            LowStockProduct(
                id=row.id,
                name=row.name,
                stock_quantity=row.stock_quantity,
                images=row.images or [],
            )
            for row in rows
        ]

    async def recent_orders(self, limit: int) -> list[RecentOrder]:
        """Newest orders of any status, with the district name joined in."""
        rows = await self._rows(
            "recent_orders",
            select(
                Order.id,
                Order.order_number,
                Order.customer_name,
                Order.customer_phone,
                Order.total_amount,
                Order.status,
                Order.created_at,
                District.name.label("district_name"),
            )
            .outerjoin(District, Order.district_id == District.id)
            .order_by(Order.created_at.desc(), Order.id)
            .limit(limit),
        )
        return [
            RecentOrder(
                id=row.id,
                order_number=row.order_number,
                customer_name=row.customer_name,
                customer_phone=row.customer_phone,
                total_amount=float(row.total_amount) if row.total_amount is not None else None,
                status=row.status,
                created_at=row.created_at,
                district_name=row.district_name,
            )
            for row in rows
        ]

    async def order_item_quantities(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ItemQuantity]:
        """Order lines, optionally limited to orders created in [start, end].

        Lines come back in order creation order so ranking ties are stable.
        """
        statement = (
            select(
                OrderItem.product_id,
                OrderItem.quantity,
                Product.name.label("product_name"),
                Product.images.label("product_images"),
            )
            .join(Order, OrderItem.order_id == Order.id)
            .outerjoin(Product, OrderItem.product_id == Product.id)
            .order_by(Order.created_at, OrderItem.id)
        )
        if start is not None:
            statement = statement.where(Order.created_at >= start)
        if end is not None:
            statement = statement.where(Order.created_at <= end)

        rows = await self._rows("order_item_quantities", statement)
        return [
            ItemQuantity(
                product_id=row.product_id,
                quantity=row.quantity,
                product=(
                    ProductSummary(
                        id=row.product_id,
                        name=row.product_name,
                        images=row.product_images or [],
                    )
                    if row.product_name is not None
                    else None
                ),
            )
            for row in rows
        ]

    async def paid_order_amounts(self) -> list[Decimal | None]:
        """Totals of every order whose payment has been received."""
        rows = await self._rows(
            "paid_order_amounts",
            select(Order.total_amount).where(Order.payment_status == "paid"),
        )
        return [row.total_amount for row in rows]
