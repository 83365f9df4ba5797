"""Storefront SQLAlchemy models."""

from techpinik.core.database import Base
from techpinik.models.category import Category
from techpinik.models.district import District
from techpinik.models.order import STATUS_TRANSITIONS, Order, OrderItem, OrderStatus
from techpinik.models.product import Product
from techpinik.models.profile import Profile
from techpinik.models.slider import SliderItem

__all__ = [
    "Base",
    "Category",
    "District",
    "Order",
    "OrderItem",
    "OrderStatus",
    "Product",
    "Profile",
    "STATUS_TRANSITIONS",
    "SliderItem",
]
