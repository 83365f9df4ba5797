"""Order Pydantic schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from techpinik.models.order import OrderStatus

# Bangladeshi mobile numbers, with or without the +88 country prefix
PHONE_PATTERN = r"^(\+88)?01[3-9]\d{8}$"

OrderSortField = Literal["created_at", "total_amount", "status"]
PaymentStatus = Literal["pending", "paid", "refunded"]


class OrderItemCreate(BaseModel):
    """A cart line submitted at checkout."""

    product_id: UUID
    quantity: int = Field(gt=0, le=1000)


class OrderCreate(BaseModel):
    """Schema for placing an order."""

    customer_name: str = Field(min_length=2, max_length=100)
    customer_phone: str = Field(pattern=PHONE_PATTERN)
    customer_email: EmailStr | None = None
    customer_address: str = Field(min_length=10, max_length=500)
    district_id: UUID
    notes: str | None = Field(default=None, max_length=1000)
    payment_method: str = Field(default="cash_on_delivery", max_length=32)
    items: list[OrderItemCreate] = Field(min_length=1)


class OrderUpdate(BaseModel):
    """Schema for the back-office order edit."""

    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    notes: str | None = Field(default=None, max_length=1000)
    district_id: UUID | None = None
    customer_name: str | None = Field(default=None, min_length=2, max_length=100)
    customer_phone: str | None = Field(default=None, pattern=PHONE_PATTERN)
    customer_email: EmailStr | None = None
    customer_address: str | None = Field(default=None, min_length=10, max_length=500)


class OrderProduct(BaseModel):
    """Product summary embedded in order items."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    price: float
    images: list[str]


class OrderItemResponse(BaseModel):
    """Schema for an order line in responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    quantity: int
    unit_price: float
    product: OrderProduct | None = None


class DistrictRef(BaseModel):
    """District summary embedded in order responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    delivery_charge: float


class OrderResponse(BaseModel):
    """Schema for order response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    customer_name: str
    customer_phone: str
    customer_email: str | None
    customer_address: str
    district_id: UUID
    notes: str | None
    subtotal: float
    delivery_charge: float
    total_amount: float | None
    payment_method: str
    payment_status: str
    status: str
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)
    district: DistrictRef | None = None
