"""
Catalog Service

Creating, listing and reading books.

- create_book: a lookup rejects a known duplicate ISBN early; the unique
  constraint catches the rest, surfacing as IntegrityError on commit,
  and both become a ConflictError.
- list_books: optional filters, a whitelisted sort, pagination, and the
  current aggregate rating on every book.
- get_book_by_id: one book with its rating plus a page of its reviews.
"""

import logging

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Book
from app.models.review import Review
from app.schemas.book import (
    BookCreate,
    BookDetailData,
    BookListData,
    BookResponse,
    BookReviewPage,
)
from app.schemas.common import (
    BookPagination,
    ReviewPagination,
    page_offset,
    page_window,
)
from app.schemas.review import BookReviewItem
from app.services.ratings import annotate_books, get_book_ratings, summarize_ratings, with_rating
from app.utils import contains_ci, parse_identifier

logger = logging.getLogger(__name__)

# Client-facing sort keys (camelCase as in responses, snake_case accepted)
SORTABLE_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "genre": Book.genre,
    "publishedYear": Book.published_year,
    "published_year": Book.published_year,
    "createdAt": Book.created_at,
    "created_at": Book.created_at,
    "updatedAt": Book.updated_at,
    "updated_at": Book.updated_at,
}
DEFAULT_SORT = "createdAt"

DUPLICATE_ISBN_MESSAGE = "A book with this ISBN already exists"


# =============================================================================
# Create
# =============================================================================


def create_book(db: Session, data: BookCreate, owner_id: str) -> BookResponse:
    """
    Create a book owned by the given user.

    Args:
        db: Database session
        data: Validated book fields
        owner_id: Id of the authenticated user

    Returns:
        The stored book with its creator summary

    Raises:
        ConflictError: Another book already has this ISBN
    """
    if data.isbn is not None and _isbn_taken(db, data.isbn):
        raise ConflictError("isbn", DUPLICATE_ISBN_MESSAGE)

    book = Book(
        title=data.title,
        author=data.author,
        genre=data.genre.value,
        description=data.description,
        published_year=data.published_year,
        isbn=data.isbn,
        cover_image=data.cover_image,
        created_by=owner_id,
    )

    db.add(book)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if data.isbn is not None and _isbn_taken(db, data.isbn):
            logger.warning(f"Duplicate ISBN rejected by constraint: {data.isbn}")
            raise ConflictError("isbn", DUPLICATE_ISBN_MESSAGE)
        raise

    db.refresh(book)
    logger.info(f"Book created: {book.id} '{book.title}' by user {owner_id}")

    return BookResponse.model_validate(book)


def _isbn_taken(db: Session, isbn: str) -> bool:
    return db.scalar(select(Book.id).where(Book.isbn == isbn)) is not None


# =============================================================================
# List
# =============================================================================


def apply_book_filters(
    stmt: Select,
    author: str | None = None,
    genre: str | None = None,
    year: int | None = None,
) -> Select:
    """
    Apply the list filters to a book query.

    - author: case-insensitive substring match
    - genre: case-insensitive substring match
    - year: exact match on published_year

    Filters that are not given (or empty) are not applied at all.
    """
    if author:
        stmt = stmt.where(contains_ci(Book.author, author))
    if genre:
        stmt = stmt.where(contains_ci(Book.genre, genre))
    if year is not None:
        stmt = stmt.where(Book.published_year == year)
    return stmt


def resolve_sort(sort: str | None, order: str | None):
    """
    Map the sort/order query parameters to an ORDER BY clause.

    Order is ascending only when order == "asc"; anything else is
    descending, which is also the default (newest first).

    Raises:
        ValidationError: Unknown sort field
    """
    column = SORTABLE_COLUMNS.get(sort or DEFAULT_SORT)
    if column is None:
        allowed = ", ".join(key for key in SORTABLE_COLUMNS if "_" not in key)
        raise ValidationError.for_field("sort", f"Cannot sort by '{sort}'. Use one of: {allowed}")

    return column.asc() if order == "asc" else column.desc()


def list_books(
    db: Session,
    *,
    author: str | None = None,
    genre: str | None = None,
    year: int | None = None,
    sort: str | None = None,
    order: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> BookListData:
    """
    List books with filtering, sorting and pagination.

    Never fails on an empty result: a page past the end is simply empty.

    Returns:
        The page of books, each with averageRating and reviewCount, and
        the pagination block
    """
    order_by = resolve_sort(sort, order)
    filtered = apply_book_filters(select(Book), author=author, genre=genre, year=year)

    count_stmt = select(func.count()).select_from(filtered.subquery())
    total = db.execute(count_stmt).scalar() or 0

    stmt = (
        filtered
        .options(selectinload(Book.creator))
        .order_by(order_by, Book.id)
        .offset(page_offset(page, limit))
        .limit(limit)
    )
    books = list(db.execute(stmt).scalars().all())

    return BookListData(
        books=annotate_books(db, books),
        pagination=BookPagination(total_books=total, **page_window(page, limit, total)),
    )


# =============================================================================
# Detail
# =============================================================================


def get_book_by_id(
    db: Session,
    book_id: str,
    page: int = 1,
    limit: int = 10,
) -> BookDetailData:
    """
    Get one book with its aggregate rating and a page of its reviews.

    The book's ratings are read once and reduced in memory for both the
    average and the total review count; the review page is a second query.

    Raises:
        ValidationError: book_id is not a well-formed id
        NotFoundError: No such book
    """
    book_id = parse_identifier(book_id, "book")

    stmt = select(Book).options(selectinload(Book.creator)).where(Book.id == book_id)
    book = db.execute(stmt).scalar_one_or_none()
    if book is None:
        raise NotFoundError("Book not found")

    stats = summarize_ratings(get_book_ratings(db, [book_id])[book_id])

    reviews_stmt = (
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.book_id == book_id)
        .order_by(Review.created_at.desc(), Review.id)
        .offset(page_offset(page, limit))
        .limit(limit)
    )
    reviews = db.execute(reviews_stmt).scalars().all()

    return BookDetailData(
        book=with_rating(book, stats),
        reviews=BookReviewPage(
            data=[BookReviewItem.model_validate(review) for review in reviews],
            pagination=ReviewPagination(
                total_reviews=stats.count,
                **page_window(page, limit, stats.count),
            ),
        ),
    )
