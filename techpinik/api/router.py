"""API router - aggregates all /api endpoints."""

from fastapi import APIRouter

from techpinik.api.admin_auth import router as admin_auth_router
from techpinik.api.categories import router as categories_router
from techpinik.api.districts import router as districts_router
from techpinik.api.orders import router as orders_router
from techpinik.api.products import router as products_router
from techpinik.api.slider_items import router as slider_items_router
from techpinik.api.stats import router as stats_router

router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(admin_auth_router)
router.include_router(categories_router)
router.include_router(districts_router)
router.include_router(orders_router)
router.include_router(products_router)
router.include_router(slider_items_router)
router.include_router(stats_router)


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
