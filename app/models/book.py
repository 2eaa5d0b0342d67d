"""
Book Model

The central model of the Book Review API.

Books are created by an authenticated user and are never updated or
deleted through the API. Their average rating and review count are not
stored here: they are derived from the reviews table on every read
(see app.services.ratings).
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.review import Review
    from app.models.user import User


class BookGenre(str, Enum):
    """The fixed set of genres a book can be filed under."""

    FICTION = "Fiction"
    NON_FICTION = "Non-fiction"
    SCIENCE_FICTION = "Science Fiction"
    FANTASY = "Fantasy"
    MYSTERY = "Mystery"
    THRILLER = "Thriller"
    ROMANCE = "Romance"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SELF_HELP = "Self-help"
    CLASSIC_LITERATURE = "Classic Literature"
    OTHER = "Other"


class Book(Base):
    """
    Book model representing books in the catalog.

    Table: books

    Fields:
    - title: Book title (required, max 200)
    - author: Author name as free text (required, max 100)
    - genre: One of BookGenre (stored as its display value)
    - description: Summary (required, max 1000)
    - published_year: Optional year of publication
    - isbn: Optional ISBN-10/13, unique among books that have one
    - cover_image: Optional image URL
    - created_by: The user who added the book

    Indexes:
    - isbn: Unique. NULLs never collide, so books without an ISBN coexist.
    - title, author, genre, created_at: Filtering, search and sorting
    """

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )

    title: Mapped[str] = mapped_column(
        String(200),
        index=True,
        nullable=False,
        comment="Book title"
    )

    author: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
        comment="Author name"
    )

    genre: Mapped[str] = mapped_column(
        String(50),
        index=True,
        nullable=False,
        comment="Genre display value"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Book description or summary"
    )

    published_year: Mapped[int | None] = mapped_column(
        Integer,
        index=True,
        nullable=True,
        comment="Year of publication"
    )

    isbn: Mapped[str | None] = mapped_column(
        String(13),
        unique=True,
        nullable=True,
        comment="ISBN-10 or ISBN-13 without separators"
    )

    cover_image: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cover image URL"
    )

    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        index=True,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    creator: Mapped["User"] = relationship("User", back_populates="books")

    reviews: Mapped[list["Review"]] = relationship(
        "Review",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title='{self.title}', isbn='{self.isbn}')"
