"""District Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

DistrictSortField = Literal["name", "delivery_charge", "created_at"]


class DistrictCreate(BaseModel):
    """Schema for creating a district."""

    name: str = Field(min_length=1, max_length=100)
    delivery_charge: Decimal = Field(max_digits=10, decimal_places=2)
    is_active: bool = True


class DistrictUpdate(BaseModel):
    """Schema for updating a district."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    delivery_charge: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    is_active: bool | None = None


class DistrictResponse(BaseModel):
    """Schema for district response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    delivery_charge: float
    is_active: bool
    created_at: datetime
    updated_at: datetime | None
