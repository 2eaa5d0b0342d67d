"""
Shared Schemas

- CamelModel: base for every API schema. Python code uses snake_case,
  JSON uses camelCase (publishedYear, averageRating, hasNextPage, ...).
  Both spellings are accepted on input.
- Envelope: the {success, message, data, errors} wrapper around every
  response body.
- Pagination blocks and the page_window() helper they are built from.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model with camelCase aliases and ORM attribute loading."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorDetail(BaseModel):
    field: str
    message: str


class Envelope(BaseModel, Generic[DataT]):
    """
    Response envelope used by every endpoint.

    Example:
        {
            "success": true,
            "message": "Books retrieved successfully",
            "data": {...}
        }
    """

    success: bool = Field(default=True, description="Whether the request succeeded")
    message: str = Field(..., description="Human-readable outcome")
    data: DataT | None = Field(default=None, description="Payload, if any")
    errors: list[ErrorDetail] | None = Field(
        default=None,
        description="One entry per violated constraint",
    )

    @model_serializer(mode="wrap")
    def _omit_empty_parts(self, handler):
        # data and errors are optional keys, not nulls
        body = handler(self)
        for key in ("data", "errors"):
            if body.get(key) is None:
                body.pop(key, None)
        return body


# =============================================================================
# Pagination
# =============================================================================


def page_window(page: int, limit: int, total: int) -> dict:
    """
    Compute the navigation fields of a paged result.

    Pages are 1-indexed. Next/previous indicators depend only on page
    versus total_pages, so a page past the end reports no next page and a
    previous page even though its slice is empty.

    Example:
        >>> page_window(3, 10, 25)["prev_page"]
        2
    """
    total_pages = math.ceil(total / limit)
    has_next = page < total_pages
    has_prev = page > 1
    return {
        "current_page": page,
        "total_pages": total_pages,
        "has_next_page": has_next,
        "has_prev_page": has_prev,
        "next_page": page + 1 if has_next else None,
        "prev_page": page - 1 if has_prev else None,
    }


def page_offset(page: int, limit: int) -> int:
    """Rows to skip for a 1-indexed page."""
    return (page - 1) * limit


class PageInfo(CamelModel):
    current_page: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None = None
    prev_page: int | None = None


class BookPagination(PageInfo):
    total_books: int = Field(..., ge=0)


class ReviewPagination(PageInfo):
    total_reviews: int = Field(..., ge=0)


class SearchPagination(PageInfo):
    total_results: int = Field(..., ge=0)
