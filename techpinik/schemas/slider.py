"""Slider item Pydantic schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

SliderSortField = Literal["sort_order", "created_at", "title"]


class SliderItemCreate(BaseModel):
    """Schema for creating a slider item.

    When `sort_order` is omitted the item goes after the current last one.
    """

    title: str = Field(min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    image_url: str = Field(min_length=1)
    link_url: str | None = None
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool = True


class SliderItemUpdate(BaseModel):
    """Schema for updating a slider item."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    subtitle: str | None = Field(default=None, max_length=255)
    image_url: str | None = Field(default=None, min_length=1)
    link_url: str | None = None
    sort_order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class SliderItemResponse(BaseModel):
    """Schema for slider item response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    subtitle: str | None
    image_url: str
    link_url: str | None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
