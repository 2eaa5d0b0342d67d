"""
Review Model

Represents a user's review of a book: a 1-5 star rating and a comment.

Business Rules:
- One review per user per book (unique constraint, the authoritative guard)
- Rating must be 1-5
- Only the author of a review can edit or delete it
"""

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.book import Book
    from app.models.user import User


class Review(Base):
    """
    Review model for book reviews.

    Attributes:
        id: Primary key (UUID string)
        book_id: Foreign key to books table
        user_id: Foreign key to users table
        rating: 1-5 star rating
        comment: Review text (10-1000 characters)
        created_at: When the review was created
        updated_at: When the review was last updated
    """

    __tablename__ = "reviews"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    # Foreign keys
    book_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Review content
    rating: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Rating from 1-5 stars",
    )
    comment: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Review text content",
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="reviews")
    user: Mapped["User"] = relationship("User", back_populates="reviews")

    __table_args__ = (
        # One review per user per book
        UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
        # Newest-first review pages for a book, and a user's own reviews
        Index("ix_reviews_book_created", "book_id", "created_at"),
        Index("ix_reviews_user_created", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, book_id={self.book_id}, user_id={self.user_id}, rating={self.rating})>"
