"""Category Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from techpinik.schemas.product import SLUG_PATTERN, ProductBrief


class CategoryCreate(BaseModel):
    """Schema for creating a category."""

    name: str = Field(min_length=2, max_length=100)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    icon_url: str | None = None
    banner_url: str | None = None
    slug: str = Field(max_length=120, pattern=SLUG_PATTERN)
    parent_id: UUID | None = None


class CategoryUpdate(BaseModel):
    """Schema for updating a category.

    Sending `parent_id: null` explicitly moves the category to the root.
    """

    name: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    icon: str | None = Field(default=None, max_length=100)
    icon_url: str | None = None
    banner_url: str | None = None
    slug: str | None = Field(default=None, max_length=120, pattern=SLUG_PATTERN)
    parent_id: UUID | None = None


class CategoryResponse(BaseModel):
    """Schema for category response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    icon: str | None
    icon_url: str | None
    banner_url: str | None
    slug: str
    parent_id: UUID | None
    created_at: datetime
    updated_at: datetime | None


class CategoryWithProducts(CategoryResponse):
    """Category response; `products` is only filled when requested."""

    products: list[ProductBrief] | None = None
