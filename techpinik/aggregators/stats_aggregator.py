"""Statistics aggregation for the admin dashboard and the storefront."""

import asyncio
import time
from collections.abc import Awaitable, Callable, Iterable
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Annotated, Literal, TypeVar
from zoneinfo import ZoneInfo

import structlog
from fastapi import Depends

from techpinik.aggregators.stats_repository import SqlStatsRepository, StatsRepository
from techpinik.core.config import get_settings
from techpinik.core.database import SessionFactoryDep
from techpinik.core.errors import DataAccessError, InvalidRequestError
from techpinik.core.observability import record_stats_fetch_failure, record_stats_report
from techpinik.models.order import OrderStatus
from techpinik.schemas.stats import (
    ItemQuantity,
    OrderFigure,
    OrderStatusCounts,
    ProductSummary,
    RevenuePoint,
    StatsOverview,
    StatsReport,
    StorefrontStats,
    StorefrontTopSeller,
    StorefrontTotals,
    TopSellingProduct,
)

settings = get_settings()
logger = structlog.get_logger()

T = TypeVar("T")

FetchErrorMode = Literal["strict", "lenient"]

RECENT_ORDERS_LIMIT = 10
STOREFRONT_LIST_LIMIT = 5
TOP_SELLING_LIMIT = 5
REVENUE_CHART_DAYS = 7

KNOWN_STATUSES = frozenset(status.value for status in OrderStatus)


def sum_revenue(amounts: Iterable[Decimal | None]) -> Decimal:
    """Sum order totals, counting a missing total as zero."""
    return sum((amount or Decimal("0") for amount in amounts), Decimal("0"))


def count_by_status(orders: Iterable[OrderFigure]) -> OrderStatusCounts:
    """Histogram of orders over the known statuses.

    Statuses outside OrderStatus are tallied in `other` only.
    """
    counts = dict.fromkeys(KNOWN_STATUSES, 0)
    other = 0
    for order in orders:
        if order.status in counts:
            counts[order.status] += 1
        else:
            other += 1
    return OrderStatusCounts(**counts, other=other)


def rank_top_selling(
    items: Iterable[ItemQuantity],
    limit: int = TOP_SELLING_LIMIT,
) -> list[tuple[ProductSummary | None, int]]:
    """Products by summed quantity, highest first.

    Ties keep the order in which products were first seen.
    """
    totals: dict = {}
    for item in items:
        product, quantity = totals.get(item.product_id, (item.product, 0))
        totals[item.product_id] = (product, quantity + item.quantity)

    ranked = sorted(totals.values(), key=lambda entry: entry[1], reverse=True)
    return ranked[:limit]


def local_date(moment: datetime, tz: ZoneInfo) -> date:
    """Calendar date of a timestamp in `tz`; naive timestamps are UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(tz).date()


def build_revenue_chart(
    orders: Iterable[OrderFigure],
    today: date,
    tz: ZoneInfo,
    days: int = REVENUE_CHART_DAYS,
) -> list[RevenuePoint]:
    """Daily revenue for the `days` calendar days ending with `today`."""
    first_day = today - timedelta(days=days - 1)
    totals = {first_day + timedelta(days=offset): Decimal("0") for offset in range(days)}
    for order in orders:
        day = local_date(order.created_at, tz)
        if day in totals:
            totals[day] += order.total_amount or Decimal("0")

    return [
        RevenuePoint(date=day.isoformat(), revenue=float(revenue))
        for day, revenue in totals.items()
    ]


class StatsAggregator:
    """Builds statistics reports from a StatsRepository.

    Reports are computed fresh on every call and nothing is cached. Each
    report issues its reads concurrently.

    A failed read is handled according to `fetch_error_mode`:
    - "strict": any failure aborts the report with DataAccessError.
    - "lenient": only reads the report cannot do without abort it; other
      failures are logged and replaced by an empty value.

    Usage:
        aggregator = StatsAggregator(SqlStatsRepository(session_factory))
        report = await aggregator.compute_stats(period_days=30)
    """

    def __init__(
        self,
        repository: StatsRepository,
        timezone_name: str = "UTC",
        fetch_error_mode: FetchErrorMode = "lenient",
        low_stock_threshold: int = 10,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the aggregator.

        Args:
            repository: Source of the counts, orders and products.
            timezone_name: IANA timezone the revenue chart's days are cut in.
            fetch_error_mode: How failed reads are handled, see class docs.
            low_stock_threshold: Products below this many units are low stock.
            clock: Returns the current aware time; tests pin it.
        """
        self._repository = repository
        self._tz = ZoneInfo(timezone_name)
        self._fetch_error_mode = fetch_error_mode
        self._low_stock_threshold = low_stock_threshold
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def _fetch(
        self,
        name: str,
        fetch: Awaitable[T],
        default: T,
        required: bool = False,
    ) -> T:
        try:
            return await fetch
        except DataAccessError as e:
            fatal = required or self._fetch_error_mode == "strict"
            record_stats_fetch_failure(name, fatal)
            if fatal:
                logger.error("Statistics fetch failed", fetch=name, error=e.message)
                raise
            logger.warning(
                "Statistics fetch failed, using empty result",
                fetch=name,
                error=e.message,
            )
            return default

    @staticmethod
    async def _gather(*fetches: Awaitable) -> list:
        # Let every fetch finish before re-raising so none is left pending
        results = await asyncio.gather(*fetches, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results

    async def compute_stats(self, period_days: int) -> StatsReport:
        """Admin dashboard report for the trailing `period_days` days.

        Raises:
            InvalidRequestError: period_days is below 1.
            DataAccessError: A read the error mode treats as fatal failed.
        """
        if period_days < 1:
            raise InvalidRequestError("Period must be at least 1 day")

        started = time.perf_counter()
        now = self._clock()
        window_start = now - timedelta(days=period_days)
        repo = self._repository

        (
            total_products,
            total_categories,
            total_orders,
            total_districts,
            window_orders,
        ) = await self._gather(
            self._fetch("count_products", repo.count_products(), 0),
            self._fetch("count_categories", repo.count_categories(), 0),
            self._fetch("count_orders", repo.count_orders(), 0),
            self._fetch("count_districts", repo.count_districts(), 0),
            self._fetch(
                "orders_between",
                repo.orders_between(window_start, now),
                [],
                required=True,
            ),
        )

        low_stock, recent, window_items = await self._gather(
            self._fetch(
                "low_stock_products",
                repo.low_stock_products(self._low_stock_threshold),
                [],
            ),
            self._fetch("recent_orders", repo.recent_orders(RECENT_ORDERS_LIMIT), []),
            self._fetch(
                "order_item_quantities",
                repo.order_item_quantities(window_start, now),
                [],
            ),
        )

        report = StatsReport(
            overview=StatsOverview(
                total_products=total_products,
                total_categories=total_categories,
                total_orders=total_orders,
                total_districts=total_districts,
                total_revenue=float(sum_revenue(o.total_amount for o in window_orders)),
                period_orders=len(window_orders),
            ),
            order_status=count_by_status(window_orders),
            low_stock_products=low_stock,
            recent_orders=recent,
            top_selling_products=[
                TopSellingProduct(product=product, total_quantity=quantity)
                for product, quantity in rank_top_selling(window_items)
            ],
            revenue_chart=build_revenue_chart(
                window_orders,
                today=now.astimezone(self._tz).date(),
                tz=self._tz,
            ),
            period=period_days,
        )

        duration = time.perf_counter() - started
        record_stats_report("admin", duration)
        logger.info(
            "Statistics report computed",
            period_days=period_days,
            period_orders=len(window_orders),
            duration_ms=round(duration * 1000, 2),
        )
        return report

    async def compute_storefront_summary(self) -> StorefrontStats:
        """All-time summary behind the public statistics endpoint."""
        started = time.perf_counter()
        repo = self._repository

        (
            total_orders,
            total_products,
            total_categories,
            paid_amounts,
            recent,
            low_stock,
            all_items,
        ) = await self._gather(
            self._fetch("count_orders", repo.count_orders(), 0),
            self._fetch("count_products", repo.count_products(), 0),
            self._fetch("count_categories", repo.count_categories(), 0),
            self._fetch("paid_order_amounts", repo.paid_order_amounts(), []),
            self._fetch("recent_orders", repo.recent_orders(STOREFRONT_LIST_LIMIT), []),
            self._fetch(
                "low_stock_products",
                repo.low_stock_products(
                    self._low_stock_threshold,
                    limit=STOREFRONT_LIST_LIMIT,
                    active_only=True,
                ),
                [],
            ),
            self._fetch("order_item_quantities", repo.order_item_quantities(), []),
        )

        summary = StorefrontStats(
            stats=StorefrontTotals(
                total_orders=total_orders,
                total_products=total_products,
                total_categories=total_categories,
                total_revenue=float(sum_revenue(paid_amounts)),
            ),
            recent_orders=recent,
            low_stock_products=low_stock,
            top_selling_products=[
                StorefrontTopSeller(product=product, total_sold=quantity)
                for product, quantity in rank_top_selling(all_items)
            ],
        )

        record_stats_report("storefront", time.perf_counter() - started)
        return summary


def get_stats_aggregator(session_factory: SessionFactoryDep) -> StatsAggregator:
    """Dependency that provides a StatsAggregator over the database."""
    return StatsAggregator(
        SqlStatsRepository(session_factory),
        timezone_name=settings.stats_timezone,
        fetch_error_mode=settings.stats_fetch_error_mode,
        low_stock_threshold=settings.low_stock_threshold,
    )


StatsAggregatorDep = Annotated[StatsAggregator, Depends(get_stats_aggregator)]
