"""
Search Router

GET /search?query=...&page=&limit=

Case-insensitive substring search over book titles and authors.
Results are newest first; there is no user-supplied sort.
"""

from fastapi import APIRouter, Query, Request

from app.config import get_settings
from app.dependencies import DbSession, Pagination
from app.schemas import BookSearchData, Envelope
from app.services.rate_limiter import limiter
from app.services.search import search_books

settings = get_settings()

router = APIRouter(
    prefix="/search",
    tags=["Search"],
)


@router.get(
    "",
    response_model=Envelope[BookSearchData],
    summary="Search books",
    description="Find books whose title or author contains the query (case-insensitive).",
)
@limiter.limit(settings.rate_limit_search)
def search(
    request: Request,
    db: DbSession,
    pagination: Pagination,
    query: str | None = Query(
        default=None,
        max_length=200,
        description="Text to look for in titles and authors",
        examples=["harry", "tolkien"],
    ),
) -> Envelope[BookSearchData]:
    """
    Search books by title or author.

    Examples:
        GET /api/search?query=harry
        GET /api/search?query=potter&page=2&limit=5
    """
    data = search_books(db, query, page=pagination.page, limit=pagination.limit)
    return Envelope(
        message=f'Found {data.pagination.total_results} books matching "{query}"',
        data=data,
    )
