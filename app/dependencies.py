"""
FastAPI Dependencies Module

Dependencies are reusable components injected into route handlers.
FastAPI's Depends() function manages their lifecycle.

Common Dependency Patterns used here:
- Database sessions (per-request)
- Authentication (resolve the bearer token to a user)
- Pagination parameters
- Book list filters
"""

from typing import Annotated

from fastapi import Depends, Query
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.models.user import User
from app.services.identity import authenticate

settings = get_settings()

# Instead of writing:
#   def list_books(db: Session = Depends(get_db)):
#
# You can write:
#   def list_books(db: DbSession):

DbSession = Annotated[Session, Depends(get_db)]

# Largest page whose row offset still fits a signed 64-bit integer column.
MAX_PAGE = (2**63 - 1) // settings.max_page_size


# =============================================================================
# Pagination Parameters
# =============================================================================
class PaginationParams:
    """
    Common pagination parameters for list endpoints.

    - page: Which page to return (1-indexed for user-friendliness)
    - limit: How many items per page

    Usage:
        GET /api/books?page=2&limit=20
    """

    def __init__(
        self,
        page: int = Query(
            default=1,
            ge=1,
            le=MAX_PAGE,
            description="Page number (1-indexed)",
            examples=[1, 2, 3],
        ),
        limit: int = Query(
            default=settings.default_page_size,
            ge=1,
            le=settings.max_page_size,
            description=f"Number of items per page (max {settings.max_page_size})",
            examples=[10, 25, 50],
        ),
    ) -> None:
        self.page = page
        self.limit = limit


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Book List Filters
# =============================================================================
class BookListParams:
    """
    Filter and sort parameters for GET /api/books.

    All parameters are optional and can be combined.

    Usage:
        GET /api/books?author=orwell&genre=fiction&year=1949
        GET /api/books?sort=title&order=asc
    """

    def __init__(
        self,
        author: str | None = Query(
            default=None,
            max_length=100,
            description="Filter by author (partial match, case-insensitive)",
            examples=["orwell"],
        ),
        genre: str | None = Query(
            default=None,
            max_length=50,
            description="Filter by genre (partial match, case-insensitive)",
            examples=["fiction"],
        ),
        year: int | None = Query(
            default=None,
            description="Filter by exact publication year",
            examples=[1949],
        ),
        sort: str | None = Query(
            default=None,
            description="Field to sort by (default createdAt)",
            examples=["title", "publishedYear", "createdAt"],
        ),
        order: str | None = Query(
            default=None,
            description="'asc' for ascending, anything else for descending",
            examples=["asc", "desc"],
        ),
    ) -> None:
        self.author = author
        self.genre = genre
        self.year = year
        self.sort = sort
        self.order = order


BookFilters = Annotated[BookListParams, Depends()]


# =============================================================================
# Bearer Authentication
# =============================================================================
# The raw header value is handed to the identity service, which owns the
# "Bearer <token>" parsing. auto_error=False so that a missing header is
# reported through the same error path as a malformed one.

authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer <token>",
)


def get_current_user(
    db: DbSession,
    authorization: str | None = Depends(authorization_header),
) -> User:
    """
    Resolve the caller from the Authorization header.

    Raises:
        AuthError: Missing/malformed header, invalid or expired token, or
            unknown user (rendered as 401 by the app's exception handler)
    """
    return authenticate(db, authorization)


CurrentUser = Annotated[User, Depends(get_current_user)]
