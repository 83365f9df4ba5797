"""Tests for the statistics aggregator."""

import asyncio
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from techpinik.aggregators.stats_aggregator import (
    StatsAggregator,
    build_revenue_chart,
    count_by_status,
    local_date,
    rank_top_selling,
    sum_revenue,
)
from techpinik.core.errors import DataAccessError, InvalidRequestError
from techpinik.schemas.stats import (
    ItemQuantity,
    LowStockProduct,
    OrderFigure,
    ProductSummary,
    RecentOrder,
)

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)
UTC = ZoneInfo("UTC")


def order(amount, status="pending", created_at=NOW - timedelta(hours=1)) -> OrderFigure:
    return OrderFigure(
        total_amount=Decimal(str(amount)) if amount is not None else None,
        status=status,
        created_at=created_at,
    )


def product(name: str) -> ProductSummary:
    return ProductSummary(id=uuid4(), name=name)


def item(summary: ProductSummary, quantity: int) -> ItemQuantity:
    return ItemQuantity(product_id=summary.id, quantity=quantity, product=summary)


class FakeStatsRepository:
    """In-memory StatsRepository; names in `failing` raise DataAccessError."""

    def __init__(
        self,
        *,
        products: int = 0,
        categories: int = 0,
        orders: int = 0,
        districts: int = 0,
        window_orders: list[OrderFigure] | None = None,
        low_stock: list[LowStockProduct] | None = None,
        recent: list[RecentOrder] | None = None,
        items: list[ItemQuantity] | None = None,
        paid: list[Decimal | None] | None = None,
        failing: tuple[str, ...] = (),
    ):
        self.products = products
        self.categories = categories
        self.orders = orders
        self.districts = districts
        self.window_orders = window_orders or []
        self.low_stock = low_stock or []
        self.recent = recent or []
        self.items = items or []
        self.paid = paid or []
        self.failing = failing
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise DataAccessError(f"{name} failed", name)

    async def count_products(self) -> int:
        self._record("count_products")
        return self.products

    async def count_categories(self) -> int:
        self._record("count_categories")
        return self.categories

    async def count_orders(self) -> int:
        self._record("count_orders")
        return self.orders

    async def count_districts(self) -> int:
        self._record("count_districts")
        return self.districts

    async def orders_between(self, start, end) -> list[OrderFigure]:
        self._record("orders_between", start, end)
        return [o for o in self.window_orders if start <= o.created_at <= end]

    async def low_stock_products(self, threshold, limit=None, active_only=False):
        self._record("low_stock_products", threshold, limit, active_only)
        rows = [p for p in self.low_stock if p.stock_quantity < threshold]
        return rows[:limit] if limit is not None else rows

    async def recent_orders(self, limit):
        self._record("recent_orders", limit)
        return self.recent[:limit]

    async def order_item_quantities(self, start=None, end=None):
        self._record("order_item_quantities", start, end)
        return self.items

    async def paid_order_amounts(self):
        self._record("paid_order_amounts")
        return self.paid


def make_aggregator(repository, **kwargs) -> StatsAggregator:
    kwargs.setdefault("clock", lambda: NOW)
    return StatsAggregator(repository, **kwargs)


def recent_order(name: str = "Karim") -> RecentOrder:
    return RecentOrder(
        id=uuid4(),
        order_number="TP-20250315-ABC234",
        customer_name=name,
        total_amount=160.0,
        status="pending",
        created_at=NOW,
        district_name="Dhaka",
    )


class TestSumRevenue:
    """Tests for revenue summing."""

    def test_missing_totals_count_as_zero(self):
        assert sum_revenue([Decimal("100"), None, Decimal("250")]) == Decimal("350")

    def test_empty_is_zero(self):
        assert sum_revenue([]) == Decimal("0")


class TestCountByStatus:
    """Tests for the status histogram."""

    def test_counts_known_statuses(self):
        counts = count_by_status(
            [order(1, "pending"), order(1, "delivered"), order(1, "delivered")]
        )

        assert counts.pending == 1
        assert counts.delivered == 2
        assert counts.confirmed == 0
        assert counts.cancelled == 0

    def test_unknown_status_only_counted_as_other(self):
        counts = count_by_status([order(1, "returned"), order(1, "pending")])

        assert counts.other == 1
        assert counts.pending == 1
        known = counts.model_dump(exclude={"other"})
        assert sum(known.values()) == 1


class TestRankTopSelling:
    """Tests for best-seller ranking."""

    def test_sums_quantities_per_product(self):
        phone, case = product("Phone"), product("Case")

        ranked = rank_top_selling([item(phone, 2), item(case, 1), item(phone, 3)])

        assert [(p.name, qty) for p, qty in ranked] == [("Phone", 5), ("Case", 1)]

    def test_ties_keep_first_seen_order(self):
        a, b = product("A"), product("B")

        ranked = rank_top_selling([item(a, 5), item(b, 5)])

        assert [p.name for p, _ in ranked] == ["A", "B"]

    def test_limited_to_five(self):
        products = [product(f"P{i}") for i in range(7)]

        ranked = rank_top_selling([item(p, i + 1) for i, p in enumerate(products)])

        assert len(ranked) == 5
        assert [qty for _, qty in ranked] == [7, 6, 5, 4, 3]

    def test_deleted_product_is_ranked_without_details(self):
        orphan = ItemQuantity(product_id=uuid4(), quantity=4, product=None)

        ranked = rank_top_selling([orphan])

        assert ranked == [(None, 4)]


class TestRevenueChart:
    """Tests for the seven-day revenue chart."""

    def test_seven_consecutive_days_ending_today(self):
        chart = build_revenue_chart([], today=date(2025, 3, 15), tz=UTC)

        assert [point.date for point in chart] == [
            "2025-03-09",
            "2025-03-10",
            "2025-03-11",
            "2025-03-12",
            "2025-03-13",
            "2025-03-14",
            "2025-03-15",
        ]
        assert all(point.revenue == 0 for point in chart)

    def test_orders_bucketed_by_day(self):
        orders = [
            order(100, created_at=datetime(2025, 3, 15, 1, tzinfo=timezone.utc)),
            order(None, created_at=datetime(2025, 3, 15, 2, tzinfo=timezone.utc)),
            order(250, created_at=datetime(2025, 3, 13, 9, tzinfo=timezone.utc)),
            order(999, created_at=datetime(2025, 3, 1, 9, tzinfo=timezone.utc)),
        ]

        chart = build_revenue_chart(orders, today=date(2025, 3, 15), tz=UTC)
        revenue = {point.date: point.revenue for point in chart}

        assert revenue["2025-03-15"] == 100.0
        assert revenue["2025-03-13"] == 250.0
        assert sum(revenue.values()) == 350.0

    def test_days_cut_in_configured_timezone(self):
        dhaka = ZoneInfo("Asia/Dhaka")
        late_evening_utc = datetime(2025, 3, 10, 20, 0, tzinfo=timezone.utc)

        assert local_date(late_evening_utc, dhaka) == date(2025, 3, 11)

        chart = build_revenue_chart(
            [order(80, created_at=late_evening_utc)],
            today=date(2025, 3, 15),
            tz=dhaka,
        )
        revenue = {point.date: point.revenue for point in chart}
        assert revenue["2025-03-11"] == 80.0
        assert revenue["2025-03-10"] == 0.0

    def test_naive_timestamps_are_utc(self):
        assert local_date(datetime(2025, 3, 10, 23, 30), UTC) == date(2025, 3, 10)


class TestComputeStats:
    """Tests for the admin report."""

    def test_revenue_and_status_breakdown(self):
        repo = FakeStatsRepository(
            products=12,
            categories=3,
            orders=40,
            districts=64,
            window_orders=[
                order(100, "pending"),
                order(None, "delivered"),
                order(250, "delivered"),
            ],
        )

        report = asyncio.run(make_aggregator(repo).compute_stats(30))

        assert report.overview.total_revenue == 350.0
        assert report.overview.period_orders == 3
        assert report.overview.total_products == 12
        assert report.overview.total_districts == 64
        assert report.order_status.pending == 1
        assert report.order_status.delivered == 2
        assert report.order_status.shipped == 0
        assert report.period == 30

    def test_no_orders_in_window(self):
        repo = FakeStatsRepository(orders=5, recent=[recent_order()])

        report = asyncio.run(make_aggregator(repo).compute_stats(30))

        assert report.overview.total_revenue == 0
        assert report.overview.period_orders == 0
        assert report.order_status.model_dump() == dict.fromkeys(
            ["pending", "confirmed", "processing", "shipped", "delivered", "cancelled", "other"],
            0,
        )
        assert len(report.revenue_chart) == 7
        assert all(point.revenue == 0 for point in report.revenue_chart)
        assert len(report.recent_orders) == 1
        assert report.top_selling_products == []

    def test_window_spans_period_ending_now(self):
        repo = FakeStatsRepository()

        asyncio.run(make_aggregator(repo).compute_stats(7))

        window_calls = [call for call in repo.calls if call[0] == "orders_between"]
        assert window_calls == [("orders_between", NOW - timedelta(days=7), NOW)]
        item_calls = [call for call in repo.calls if call[0] == "order_item_quantities"]
        assert item_calls == [("order_item_quantities", NOW - timedelta(days=7), NOW)]

    def test_orders_outside_window_ignored(self):
        repo = FakeStatsRepository(
            window_orders=[
                order(100, created_at=NOW - timedelta(days=2)),
                order(500, created_at=NOW - timedelta(days=9)),
            ]
        )

        report = asyncio.run(make_aggregator(repo).compute_stats(7))

        assert report.overview.total_revenue == 100.0
        assert report.overview.period_orders == 1

    def test_top_selling_ties(self):
        a, b = product("A"), product("B")
        repo = FakeStatsRepository(items=[item(a, 5), item(b, 5)])

        report = asyncio.run(make_aggregator(repo).compute_stats(30))

        assert [entry.product.name for entry in report.top_selling_products] == ["A", "B"]
        assert [entry.total_quantity for entry in report.top_selling_products] == [5, 5]

    def test_low_stock_uses_threshold_without_limit(self):
        repo = FakeStatsRepository(
            low_stock=[
                LowStockProduct(id=uuid4(), name="Cable", stock_quantity=2),
                LowStockProduct(id=uuid4(), name="Charger", stock_quantity=9),
                LowStockProduct(id=uuid4(), name="Phone", stock_quantity=10),
            ]
        )

        report = asyncio.run(make_aggregator(repo).compute_stats(30))

        assert [p.name for p in report.low_stock_products] == ["Cable", "Charger"]
        assert ("low_stock_products", 10, None, False) in repo.calls

    def test_recent_orders_limited_to_ten(self):
        repo = FakeStatsRepository(recent=[recent_order(f"C{i}") for i in range(12)])

        report = asyncio.run(make_aggregator(repo).compute_stats(30))

        assert len(report.recent_orders) == 10

    def test_period_below_one_rejected(self):
        with pytest.raises(InvalidRequestError):
            asyncio.run(make_aggregator(FakeStatsRepository()).compute_stats(0))

    def test_serializes_with_camel_case_keys(self):
        report = asyncio.run(make_aggregator(FakeStatsRepository()).compute_stats(30))

        data = report.model_dump(by_alias=True)

        assert set(data) == {
            "overview",
            "orderStatus",
            "lowStockProducts",
            "recentOrders",
            "topSellingProducts",
            "revenueChart",
            "period",
        }
        assert "totalRevenue" in data["overview"]
        assert "periodOrders" in data["overview"]


class TestFetchErrorModes:
    """Tests for failed reads under each error mode."""

    def test_lenient_replaces_optional_failures(self):
        repo = FakeStatsRepository(
            products=4,
            window_orders=[order(100)],
            failing=("low_stock_products", "recent_orders", "count_categories"),
        )

        report = asyncio.run(make_aggregator(repo, fetch_error_mode="lenient").compute_stats(30))

        assert report.low_stock_products == []
        assert report.recent_orders == []
        assert report.overview.total_categories == 0
        assert report.overview.total_products == 4
        assert report.overview.total_revenue == 100.0

    def test_window_failure_is_fatal_even_when_lenient(self):
        repo = FakeStatsRepository(failing=("orders_between",))

        with pytest.raises(DataAccessError) as exc_info:
            asyncio.run(make_aggregator(repo, fetch_error_mode="lenient").compute_stats(30))

        assert exc_info.value.operation == "orders_between"

    def test_strict_aborts_on_any_failure(self):
        repo = FakeStatsRepository(failing=("recent_orders",))

        with pytest.raises(DataAccessError):
            asyncio.run(make_aggregator(repo, fetch_error_mode="strict").compute_stats(30))

    def test_storefront_lenient_returns_empty_summary(self):
        repo = FakeStatsRepository(
            failing=(
                "count_orders",
                "count_products",
                "count_categories",
                "paid_order_amounts",
                "recent_orders",
                "low_stock_products",
                "order_item_quantities",
            )
        )

        summary = asyncio.run(make_aggregator(repo).compute_storefront_summary())

        assert summary.stats.total_orders == 0
        assert summary.stats.total_revenue == 0
        assert summary.recent_orders == []
        assert summary.top_selling_products == []

    def test_storefront_strict_raises(self):
        repo = FakeStatsRepository(failing=("paid_order_amounts",))

        with pytest.raises(DataAccessError):
            asyncio.run(
                make_aggregator(repo, fetch_error_mode="strict").compute_storefront_summary()
            )


class TestStorefrontSummary:
    """Tests for the public all-time summary."""

    def test_totals_and_best_sellers(self):
        phone, case = product("Phone"), product("Case")
        repo = FakeStatsRepository(
            orders=3,
            products=2,
            categories=1,
            paid=[Decimal("560.00"), None, Decimal("100.50")],
            items=[item(case, 1), item(phone, 2), item(phone, 1)],
            recent=[recent_order(f"C{i}") for i in range(8)],
        )

        summary = asyncio.run(make_aggregator(repo).compute_storefront_summary())

        assert summary.stats.total_orders == 3
        assert summary.stats.total_revenue == 660.5
        assert len(summary.recent_orders) == 5
        assert [(e.product.name, e.total_sold) for e in summary.top_selling_products] == [
            ("Phone", 3),
            ("Case", 1),
        ]

    def test_low_stock_limited_to_active_products(self):
        repo = FakeStatsRepository()

        asyncio.run(make_aggregator(repo).compute_storefront_summary())

        assert ("low_stock_products", 10, 5, True) in repo.calls
        assert ("order_item_quantities", None, None) in repo.calls

    def test_serializes_with_camel_case_keys(self):
        summary = asyncio.run(make_aggregator(FakeStatsRepository()).compute_storefront_summary())

        data = summary.model_dump(by_alias=True)

        assert set(data) == {"stats", "recentOrders", "lowStockProducts", "topSellingProducts"}
        assert set(data["stats"]) == {
            "totalOrders",
            "totalProducts",
            "totalCategories",
            "totalRevenue",
        }
