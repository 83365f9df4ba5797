"""Product Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"

ProductSortField = Literal["name", "price", "created_at"]
SortOrder = Literal["asc", "desc"]


class ProductBase(BaseModel):
    """Base schema for product data."""

    name: str = Field(min_length=2, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    price: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    sale_price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    category_id: UUID | None = None
    images: list[str] = Field(default_factory=list)
    stock_quantity: int = Field(default=0, ge=0)
    is_active: bool = True
    is_featured: bool = False
    brand: str | None = Field(default=None, max_length=100)
    slug: str = Field(max_length=255, pattern=SLUG_PATTERN)


class ProductCreate(ProductBase):
    """Schema for creating a product."""


class ProductUpdate(BaseModel):
    """Schema for updating a product; only fields that are sent change."""

    name: str | None = Field(default=None, min_length=2, max_length=255)
    description: str | None = Field(default=None, max_length=2000)
    price: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    sale_price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    category_id: UUID | None = None
    images: list[str] | None = None
    stock_quantity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None
    is_featured: bool | None = None
    brand: str | None = Field(default=None, max_length=100)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)


class CategoryRef(BaseModel):
    """Category summary embedded in product responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str


class ProductBrief(BaseModel):
    """Product summary embedded in category and order responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    price: float
    images: list[str]
    is_featured: bool
    stock_quantity: int


class ProductResponse(BaseModel):
    """Schema for product response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    price: float
    sale_price: float | None
    category_id: UUID | None
    images: list[str]
    stock_quantity: int
    is_active: bool
    is_featured: bool
    brand: str | None
    slug: str
    created_at: datetime
    updated_at: datetime
    category: CategoryRef | None = None


class ProductFilters(BaseModel):
    """Query filters for the product list."""

    category_id: UUID | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    is_featured: bool = False
    search: str | None = None
    sort_by: ProductSortField = "created_at"
    sort_order: SortOrder = "desc"
