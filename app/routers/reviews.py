"""
Reviews Router

Endpoints:
- POST /books/{book_id}/reviews - Review a book (authenticated)
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner only)

Business Rules:
- One review per user per book (enforced by database constraint)
- Only the review author can update or delete their review
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import CurrentUser, DbSession
from app.schemas import Envelope, ReviewCreate, ReviewResponse, ReviewUpdate
from app.services import reviews
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    tags=["Reviews"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Review or book not found"},
    },
)


@router.post(
    "/books/{book_id}/reviews",
    response_model=Envelope[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a book",
    description="Add a review to a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: str,
    review_data: ReviewCreate,
    db: DbSession,
    current_user: CurrentUser,
) -> Envelope[ReviewResponse]:
    """
    Create the caller's review of a book.

    Raises:
        ValidationError: 400 for bad rating/comment or malformed book id
        NotFoundError: 404 if the book does not exist
        ConflictError: 400 if the caller already reviewed this book
    """
    review = reviews.add_review(db, book_id, current_user.id, review_data)
    return Envelope(message="Review added successfully", data=review)


@router.put(
    "/reviews/{review_id}",
    response_model=Envelope[ReviewResponse],
    summary="Update a review",
    description="Update the rating and/or comment of your own review.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: str,
    review_data: ReviewUpdate,
    db: DbSession,
    current_user: CurrentUser,
) -> Envelope[ReviewResponse]:
    """
    Update an existing review.

    Raises:
        ValidationError: 400 for an empty patch, bad values or malformed id
        NotFoundError: 404 if review not found
        ForbiddenError: 403 if the caller is not the review author
    """
    review = reviews.update_review(db, review_id, current_user.id, review_data)
    return Envelope(message="Review updated successfully", data=review)


@router.delete(
    "/reviews/{review_id}",
    response_model=Envelope[None],
    summary="Delete a review",
    description="Delete your own review. The book's rating reflects the removal on the next read.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: str,
    db: DbSession,
    current_user: CurrentUser,
) -> Envelope[None]:
    """
    Delete a review.

    Raises:
        NotFoundError: 404 if review not found
        ForbiddenError: 403 if the caller is not the review author
    """
    reviews.delete_review(db, review_id, current_user.id)
    return Envelope(message="Review deleted successfully")
