"""
Search Service

Case-insensitive substring search over book titles and authors.

The query is matched literally (no tokenizing, no fuzzy matching) against
title OR author. Results are newest first, paginated, and carry the same
aggregate rating annotation as the book list.
"""

import logging

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.exceptions import ValidationError
from app.models import Book
from app.schemas.book import BookSearchData
from app.schemas.common import SearchPagination, page_offset, page_window
from app.services.ratings import annotate_books
from app.utils import contains_ci

logger = logging.getLogger(__name__)


def search_books(
    db: Session,
    query: str | None,
    page: int = 1,
    limit: int = 10,
) -> BookSearchData:
    """
    Search books whose title or author contains the query.

    Args:
        db: Database session
        query: Search text; surrounding whitespace is ignored
        page: Page number (1-indexed)
        limit: Results per page

    Returns:
        Matching books with ratings, the echoed query and pagination

    Raises:
        ValidationError: query is missing, empty or only whitespace
    """
    term = (query or "").strip()
    if not term:
        raise ValidationError.for_field("query", "Search query is required")

    filtered = select(Book).where(
        or_(contains_ci(Book.title, term), contains_ci(Book.author, term))
    )

    count_stmt = select(func.count()).select_from(filtered.subquery())
    total = db.execute(count_stmt).scalar() or 0

    stmt = (
        filtered
        .options(selectinload(Book.creator))
        .order_by(Book.created_at.desc(), Book.id)
        .offset(page_offset(page, limit))
        .limit(limit)
    )
    books = list(db.execute(stmt).scalars().all())

    logger.debug(f"Search '{term}' matched {total} books")

    return BookSearchData(
        books=annotate_books(db, books),
        search_query=query,
        pagination=SearchPagination(total_results=total, **page_window(page, limit, total)),
    )
