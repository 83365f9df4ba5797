"""Pydantic schemas."""

from techpinik.schemas.auth import AdminSessionResponse, LoginRequest
from techpinik.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    CategoryWithProducts,
)
from techpinik.schemas.common import ApiResponse, PaginatedResponse, Pagination
from techpinik.schemas.district import DistrictCreate, DistrictResponse, DistrictUpdate
from techpinik.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderResponse,
    OrderUpdate,
)
from techpinik.schemas.product import (
    ProductCreate,
    ProductFilters,
    ProductResponse,
    ProductUpdate,
)
from techpinik.schemas.slider import SliderItemCreate, SliderItemResponse, SliderItemUpdate
from techpinik.schemas.stats import StatsReport, StatsReportResponse, StorefrontStats

__all__ = [
    "AdminSessionResponse",
    "ApiResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "CategoryWithProducts",
    "DistrictCreate",
    "DistrictResponse",
    "DistrictUpdate",
    "LoginRequest",
    "OrderCreate",
    "OrderItemCreate",
    "OrderResponse",
    "OrderUpdate",
    "PaginatedResponse",
    "Pagination",
    "ProductCreate",
    "ProductFilters",
    "ProductResponse",
    "ProductUpdate",
    "SliderItemCreate",
    "SliderItemResponse",
    "SliderItemUpdate",
    "StatsReport",
    "StatsReportResponse",
    "StorefrontStats",
]
