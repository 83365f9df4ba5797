"""Response envelopes shared by all resources."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class Pagination(BaseModel):
    """Paging metadata for list endpoints."""

    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        """Derive paging metadata from the request and the total row count."""
        total_pages = math.ceil(total / limit) if total > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Success envelope for paginated lists."""

    success: bool = True
    data: list[T] = Field(default_factory=list)
    pagination: Pagination
