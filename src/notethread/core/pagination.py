from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from notethread.errors import ValidationError

T = TypeVar("T")


class SortOrder(StrEnum):
    """Sort direction on creation time."""

    ASC = "asc"
    DESC = "desc"

    @property
    def direction(self) -> int:
        """MongoDB sort direction."""
        return 1 if self is SortOrder.ASC else -1


class PaginationResult(BaseModel, Generic[T]):
    """Pagination result wrapper for list endpoints."""

    total: int = Field(..., description="Total number of items across all pages", ge=0)
    items: list[T] = Field(..., description="List of items in current page")


def page_offset(page: int, size: int) -> int:
    """Number of items to skip for a 1-based page."""
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if size < 1:
        raise ValidationError("Page size must be at least 1")
    return (page - 1) * size
