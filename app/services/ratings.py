"""
Ratings Service

Read-side rating aggregation for books.

Nothing here is persisted: the average rating and review count of a book
are recomputed from its reviews every time a book is read, so they can
never go stale after a review is added, edited or deleted. The cost is one
scan of the reviews of the books on the current page, which is bounded by
the number of reviews per book rather than the size of the catalog.

Used by the catalog (list and detail) and by search.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models import Book
from app.models.review import Review
from app.schemas.book import BookWithRating

ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class RatingStats:
    average: float = 0.0
    count: int = 0


def summarize_ratings(ratings: Iterable[int]) -> RatingStats:
    """
    Reduce a book's ratings to (average, count).

    The mean is rounded half-up to one decimal place using Decimal
    arithmetic, so 4.25 becomes 4.3 regardless of float representation.
    A book without reviews averages 0.

    Example:
        >>> summarize_ratings([5, 4, 4, 4])
        RatingStats(average=4.3, count=4)
    """
    values = list(ratings)
    if not values:
        return RatingStats()

    mean = Decimal(sum(values)) / Decimal(len(values))
    average = mean.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return RatingStats(average=float(average), count=len(values))


def get_book_ratings(db: Session, book_ids: Iterable[str]) -> dict[str, list[int]]:
    """
    Fetch the ratings of every review of the given books in one query.

    Books without reviews are absent from the result.
    """
    ids = list(book_ids)
    ratings: dict[str, list[int]] = defaultdict(list)
    if not ids:
        return ratings

    stmt = select(Review.book_id, Review.rating).where(Review.book_id.in_(ids))
    for book_id, rating in db.execute(stmt).all():
        ratings[book_id].append(rating)

    return ratings


def get_rating_stats(db: Session, book_ids: Iterable[str]) -> dict[str, RatingStats]:
    """Aggregate rating statistics for each of the given books."""
    ratings = get_book_ratings(db, book_ids)
    return {book_id: summarize_ratings(values) for book_id, values in ratings.items()}


def with_rating(book: Book, stats: RatingStats) -> BookWithRating:
    """Serialize a book together with its aggregate rating."""
    return BookWithRating.model_validate(book).model_copy(
        update={"average_rating": stats.average, "review_count": stats.count}
    )


def annotate_books(db: Session, books: list[Book]) -> list[BookWithRating]:
    """Attach the current aggregate rating to each book, preserving order."""
    stats = get_rating_stats(db, [book.id for book in books])
    return [with_rating(book, stats.get(book.id, RatingStats())) for book in books]
