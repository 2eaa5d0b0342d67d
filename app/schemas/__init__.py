"""
Pydantic Schemas Package

This package contains Pydantic models for request/response validation.

Schema Naming Convention:
- XxxCreate / XxxUpdate: Request bodies
- XxxResponse: A single resource in a response
- XxxData: The `data` payload of a response envelope
- XxxSummary: A small embedded view of a related resource
"""

from app.schemas.book import (
    BookCreate,
    BookDetailData,
    BookListData,
    BookResponse,
    BookSearchData,
    BookWithRating,
    CreatorSummary,
)
from app.schemas.common import (
    BookPagination,
    CamelModel,
    Envelope,
    ErrorDetail,
    ReviewPagination,
    SearchPagination,
    page_offset,
    page_window,
)
from app.schemas.review import (
    BookReviewItem,
    ReviewCreate,
    ReviewResponse,
    ReviewUpdate,
)
from app.schemas.user import (
    AuthData,
    LoginRequest,
    SignupRequest,
    UserSummary,
)

__all__ = [
    # Common
    "CamelModel",
    "Envelope",
    "ErrorDetail",
    "BookPagination",
    "ReviewPagination",
    "SearchPagination",
    "page_offset",
    "page_window",
    # Book schemas
    "BookCreate",
    "BookResponse",
    "BookWithRating",
    "BookListData",
    "BookDetailData",
    "BookSearchData",
    "CreatorSummary",
    # Review schemas
    "ReviewCreate",
    "ReviewUpdate",
    "ReviewResponse",
    "BookReviewItem",
    # User schemas
    "SignupRequest",
    "LoginRequest",
    "UserSummary",
    "AuthData",
]
