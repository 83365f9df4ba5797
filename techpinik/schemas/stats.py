"""Pydantic schemas for the statistics endpoints.

Report-level keys are camelCase on the wire (`totalRevenue`, `orderStatus`)
because the dashboards consume them that way. Row records embedded in the
report (orders, products) keep the snake_case column names.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for report models serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Rows read by the repository


class OrderFigure(BaseModel):
    """The columns of an order that the revenue and status metrics need."""

    total_amount: Decimal | None
    status: str
    created_at: datetime


class ProductSummary(BaseModel):
    """Product fields embedded in top-selling entries."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    images: list[str] = Field(default_factory=list)


class ItemQuantity(BaseModel):
    """One order line: which product and how many units."""

    product_id: UUID
    quantity: int
    product: ProductSummary | None = None


class LowStockProduct(BaseModel):
    """Product on the low-stock watchlist."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    stock_quantity: int
    images: list[str] = Field(default_factory=list)


class RecentOrder(BaseModel):
    """Order row shown in the recent-orders lists."""

    id: UUID
    order_number: str | None = None
    customer_name: str
    customer_phone: str | None = None
    total_amount: float | None
    status: str
    created_at: datetime
    district_name: str | None = None


# Admin report


class TopSellingProduct(CamelModel):
    """Product ranked by units sold within the report window."""

    product: ProductSummary | None
    total_quantity: int


class RevenuePoint(BaseModel):
    """Revenue for one calendar day."""

    date: str = Field(description="ISO date, YYYY-MM-DD")
    revenue: float


class StatsOverview(CamelModel):
    """Headline figures for the admin dashboard."""

    total_products: int
    total_categories: int
    total_orders: int
    total_districts: int
    total_revenue: float = Field(description="Sum of order totals within the window")
    period_orders: int


class OrderStatusCounts(BaseModel):
    """Window orders per status; `other` holds values outside the known set."""

    pending: int = 0
    confirmed: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    other: int = 0


class StatsReport(CamelModel):
    """Admin dashboard statistics for a trailing window of days."""

    overview: StatsOverview
    order_status: OrderStatusCounts
    low_stock_products: list[LowStockProduct]
    recent_orders: list[RecentOrder]
    top_selling_products: list[TopSellingProduct]
    revenue_chart: list[RevenuePoint]
    period: int


# Storefront summary


class StorefrontTopSeller(CamelModel):
    """Product ranked by all-time units sold."""

    product: ProductSummary | None
    total_sold: int


class StorefrontTotals(CamelModel):
    """All-time totals for the storefront summary."""

    total_orders: int
    total_products: int
    total_categories: int
    total_revenue: float = Field(description="Sum of paid order totals")


class StorefrontStats(CamelModel):
    """Response body of the public statistics endpoint."""

    stats: StorefrontTotals
    recent_orders: list[RecentOrder]
    low_stock_products: list[LowStockProduct]
    top_selling_products: list[StorefrontTopSeller]


class StatsReportResponse(BaseModel):
    """Success envelope of the admin statistics endpoint."""

    success: bool = True
    data: StatsReport
