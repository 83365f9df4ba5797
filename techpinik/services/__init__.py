"""Business logic over the database session."""

from techpinik.services import admin_auth as admin_auth_service
from techpinik.services import category as category_service
from techpinik.services import district as district_service
from techpinik.services import order as order_service
from techpinik.services import product as product_service
from techpinik.services import slider as slider_service

__all__ = [
    "admin_auth_service",
    "category_service",
    "district_service",
    "order_service",
    "product_service",
    "slider_service",
]
