"""
Reviews Service

Adding, updating and deleting reviews.

Business Rules:
- One review per user per book. A read-before-write check gives a fast,
  friendly error; the unique constraint on (user_id, book_id) is what
  actually prevents two concurrent requests from both inserting.
- Ownership is the only authorization rule: the author of a review is the
  only user who may update or delete it. There is no admin override.
- Ratings are never cached, so nothing has to be recalculated after a
  write; the next read of the book reflects the change.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from app.models import Book
from app.models.review import Review
from app.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from app.utils import parse_identifier

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW_MESSAGE = "You have already reviewed this book. Use PUT to update your review."


# =============================================================================
# Helper Functions
# =============================================================================


def find_existing_review(db: Session, user_id: str, book_id: str) -> Review | None:
    """Return the user's review of a book, if any."""
    stmt = select(Review).where(Review.user_id == user_id, Review.book_id == book_id)
    return db.execute(stmt).scalar_one_or_none()


def get_review_or_404(db: Session, review_id: str) -> Review:
    """
    Get a review by id with its user and book loaded.

    Raises:
        ValidationError: review_id is not a well-formed id
        NotFoundError: No such review
    """
    review_id = parse_identifier(review_id, "review")

    stmt = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.book))
        .where(Review.id == review_id)
    )
    review = db.execute(stmt).scalar_one_or_none()

    if review is None:
        raise NotFoundError("Review not found")
    return review


def get_owned_review(db: Session, review_id: str, user_id: str, action: str) -> Review:
    """
    Get a review the caller is allowed to modify.

    Raises:
        ValidationError, NotFoundError: See get_review_or_404
        ForbiddenError: The review belongs to someone else
    """
    review = get_review_or_404(db, review_id)

    if review.user_id != user_id:
        logger.warning(f"User {user_id} tried to {action} review {review.id} owned by {review.user_id}")
        raise ForbiddenError(f"You can only {action} your own reviews")

    return review


def _load_review(db: Session, review_id: str) -> ReviewResponse:
    stmt = (
        select(Review)
        .options(selectinload(Review.user), selectinload(Review.book))
        .where(Review.id == review_id)
        .execution_options(populate_existing=True)
    )
    return ReviewResponse.model_validate(db.execute(stmt).scalar_one())


# =============================================================================
# Operations
# =============================================================================


def add_review(
    db: Session,
    book_id: str,
    user_id: str,
    data: ReviewCreate,
) -> ReviewResponse:
    """
    Create the user's review of a book.

    Args:
        db: Database session
        book_id: Raw book id from the URL
        user_id: Id of the authenticated user
        data: Validated rating and comment

    Returns:
        The review with reviewer username and book title/author

    Raises:
        ValidationError: book_id is not a well-formed id
        NotFoundError: No such book
        ConflictError: The user already reviewed this book
    """
    book_id = parse_identifier(book_id, "book")

    if db.get(Book, book_id) is None:
        raise NotFoundError("Book not found")

    if find_existing_review(db, user_id, book_id) is not None:
        raise ConflictError("duplicate_review", DUPLICATE_REVIEW_MESSAGE)

    review = Review(
        rating=data.rating,
        comment=data.comment,
        user_id=user_id,
        book_id=book_id,
    )
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        # Lost the race against a concurrent insert for the same pair
        db.rollback()
        if find_existing_review(db, user_id, book_id) is not None:
            logger.warning(f"Duplicate review rejected by constraint: user {user_id}, book {book_id}")
            raise ConflictError("duplicate_review", DUPLICATE_REVIEW_MESSAGE)
        raise

    logger.info(f"Review {review.id} added to book {book_id} by user {user_id}")

    return _load_review(db, review.id)


def update_review(
    db: Session,
    review_id: str,
    user_id: str,
    patch: ReviewUpdate,
) -> ReviewResponse:
    """
    Change the rating and/or comment of the caller's own review.

    Only supplied fields are written; they were validated by ReviewUpdate.

    Raises:
        ValidationError: Empty patch or malformed review_id
        NotFoundError: No such review
        ForbiddenError: The review belongs to someone else
    """
    changes = patch.changes()
    if not changes:
        raise ValidationError.for_field(
            "empty_patch", "Please provide rating or comment to update"
        )

    review = get_owned_review(db, review_id, user_id, "update")

    for field, value in changes.items():
        setattr(review, field, value)

    db.commit()
    logger.info(f"Review {review.id} updated: {sorted(changes)}")

    return _load_review(db, review.id)


def delete_review(db: Session, review_id: str, user_id: str) -> None:
    """
    Permanently delete the caller's own review.

    Raises:
        ValidationError: Malformed review_id
        NotFoundError: No such review
        ForbiddenError: The review belongs to someone else
    """
    review = get_owned_review(db, review_id, user_id, "delete")
    deleted_id, book_id = review.id, review.book_id

    db.delete(review)
    db.commit()

    logger.info(f"Review {deleted_id} deleted from book {book_id}")
