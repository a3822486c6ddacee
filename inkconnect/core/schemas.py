"""
inkconnect/core/schemas.py

Response envelopes shared by every router:
- PaginatedResponse for list endpoints (skip/limit paging)
- MessageResponse and SuccessResponse for endpoints without a resource body
"""

from collections.abc import Sequence
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    total_count: int = Field(..., description="Total number of matching items")
    has_next_page: bool = Field(..., description="True when items exist past this page")
    items: list[T] = Field(..., description="Items on the current page")

    @classmethod
    def from_page(cls, items: Sequence[T], total: int, skip: int) -> "PaginatedResponse[T]":
        """Wrap one already-fetched page of a result set holding `total` items."""
        return cls(total_count=total, has_next_page=skip + len(items) < total, items=list(items))


class MessageResponse(BaseModel):
    detail: str = Field(..., description="Human-readable outcome")


class SuccessResponse(BaseModel):
    success: bool = True
