"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review (rating and comment both required)
- ReviewUpdate: Change rating and/or comment
- ReviewResponse: Review with reviewer and book summaries
- BookReviewItem: Review as listed under a book

Business Rules:
- Rating must be a whole number from 1 to 5 (3.5 is rejected)
- Comment must be 10-1000 characters after trimming
- One review per user per book (enforced at database level)
"""

from datetime import datetime

from pydantic import ConfigDict, Field

from app.schemas.common import CamelModel


class ReviewerSummary(CamelModel):
    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")


class ReviewedBookSummary(CamelModel):
    """Minimal book info for embedding in review responses."""

    id: str = Field(..., description="Book ID")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")


class ReviewCreate(CamelModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "rating": 5,
        "comment": "One of the best books I've ever read."
    }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        examples=[4, 5],
    )

    comment: str = Field(
        ...,
        min_length=10,
        max_length=1000,
        description="Review text",
        examples=["This book changed my perspective on..."],
    )


class ReviewUpdate(CamelModel):
    """
    Schema for updating an existing review.

    Both fields are optional, but at least one must be supplied; the
    service rejects an empty patch.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
    )

    comment: str | None = Field(
        default=None,
        min_length=10,
        max_length=1000,
        description="Review text",
    )

    def changes(self) -> dict:
        """Fields the client actually supplied with a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class ReviewResponse(CamelModel):
    """
    Schema for review responses.

    Example:
        {
            "id": "8c1f...",
            "rating": 5,
            "comment": "A must-read classic!",
            "user": {"id": "2b7e...", "username": "booklover"},
            "book": {"id": "91aa...", "title": "1984", "author": "George Orwell"},
            "createdAt": "2024-01-15T10:30:00Z",
            "updatedAt": "2024-01-15T10:30:00Z"
        }
    """

    id: str = Field(..., description="Unique review identifier")
    rating: int
    comment: str
    user: ReviewerSummary = Field(..., description="User who wrote the review")
    book: ReviewedBookSummary = Field(..., description="Book being reviewed")
    created_at: datetime
    updated_at: datetime


class BookReviewItem(CamelModel):
    """A review listed on its book's detail page."""

    id: str
    rating: int
    comment: str
    book_id: str
    user: ReviewerSummary
    created_at: datetime
    updated_at: datetime
