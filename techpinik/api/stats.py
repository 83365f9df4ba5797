"""Statistics endpoints for the storefront and the admin dashboard."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from techpinik.aggregators.stats_aggregator import StatsAggregatorDep
from techpinik.core.deps import CurrentAdmin
from techpinik.core.errors import DataAccessError, error_response
from techpinik.schemas.stats import StatsReportResponse, StorefrontStats

logger = structlog.get_logger()

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StorefrontStats)
async def get_storefront_stats(
    aggregator: StatsAggregatorDep,
) -> StorefrontStats | JSONResponse:
    """All-time totals, recent orders, low stock and best sellers."""
    try:
        return await aggregator.compute_storefront_summary()
    except DataAccessError as e:
        logger.error("Storefront statistics failed", error=e.message)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


@router.get("/admin/stats", response_model=StatsReportResponse)
async def get_admin_stats(
    admin: CurrentAdmin,
    aggregator: StatsAggregatorDep,
    period: Annotated[int, Query(ge=1, le=3650, description="Window length in days")] = 30,
) -> StatsReportResponse | JSONResponse:
    """Dashboard statistics for the last `period` days."""
    try:
        report = await aggregator.compute_stats(period)
    except DataAccessError as e:
        logger.error(
            "Admin statistics failed",
            error=e.message,
            operation=e.operation,
            period=period,
        )
        return error_response(500, "Failed to fetch order statistics")
    return StatsReportResponse(data=report)
