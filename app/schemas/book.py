"""
Book Pydantic Schemas

Handles:
- Field constraints for new books (lengths, genre, year, ISBN format)
- Creator summary embedded in book responses
- Rating-annotated books for list, detail and search responses
"""

import re
from datetime import date, datetime

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from app.models.book import BookGenre
from app.schemas.common import (
    BookPagination,
    CamelModel,
    ReviewPagination,
    SearchPagination,
)
from app.schemas.review import BookReviewItem

ISBN_PATTERN = re.compile(r"^(?:\d{9}[\dX]|\d{13})$")


class CreatorSummary(CamelModel):
    """The user who added a book."""

    id: str = Field(..., description="User ID")
    username: str = Field(..., description="Username")


class BookCreate(CamelModel):
    """
    Schema for creating a new book.

    Example request body:
    {
        "title": "The Odyssey",
        "author": "Homer",
        "genre": "Classic Literature",
        "description": "An epic poem...",
        "publishedYear": 1614,
        "isbn": "9780142437230"
    }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Book title",
        examples=["The Odyssey"],
    )

    author: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Author name",
        examples=["Homer"],
    )

    genre: BookGenre = Field(
        ...,
        description="One of the supported genres",
        examples=["Classic Literature"],
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Book description or summary",
    )

    published_year: int | None = Field(
        default=None,
        ge=1000,
        description="Year of publication (not in the future)",
        examples=[1614],
    )

    isbn: str | None = Field(
        default=None,
        max_length=20,
        description="ISBN-10 or ISBN-13",
        examples=["9780142437230", "0-14-243723-X"],
    )

    cover_image: str | None = Field(
        default=None,
        description="Cover image URL",
    )

    @field_validator("published_year")
    @classmethod
    def year_not_in_future(cls, v: int | None) -> int | None:
        if v is not None and v > date.today().year:
            raise ValueError("Published year cannot be in the future")
        return v

    @field_validator("isbn")
    @classmethod
    def validate_isbn(cls, v: str | None) -> str | None:
        """
        Validate ISBN format.

        Accepts:
        - ISBN-10: 9 digits followed by a digit or X
        - ISBN-13: 13 digits

        Hyphens and spaces are stripped for storage, and a blank value
        means "no ISBN" so it never collides with other books.
        """
        if v is None:
            return v

        cleaned = re.sub(r"[-\s]", "", v)
        if not cleaned:
            return None

        if not ISBN_PATTERN.match(cleaned):
            raise ValueError("Please provide a valid ISBN")

        return cleaned

    @field_validator("cover_image")
    @classmethod
    def blank_cover_is_none(cls, v: str | None) -> str | None:
        return v or None


class BookResponse(CamelModel):
    """Schema for a single book as stored."""

    id: str = Field(..., description="Unique identifier")
    title: str
    author: str
    genre: str
    description: str
    published_year: int | None = None
    isbn: str | None = None
    cover_image: str | None = None
    creator: CreatorSummary = Field(
        ...,
        validation_alias=AliasChoices("creator", "createdBy"),
        serialization_alias="createdBy",
        description="User who added the book",
    )
    created_at: datetime
    updated_at: datetime


class BookWithRating(BookResponse):
    """A book annotated with its aggregate rating, computed at read time."""

    average_rating: float = Field(
        default=0,
        ge=0,
        le=5,
        description="Mean review rating rounded to one decimal, 0 if no reviews",
    )
    review_count: int = Field(default=0, ge=0, description="Number of reviews")


class BookListData(CamelModel):
    """Payload of GET /api/books."""

    books: list[BookWithRating]
    pagination: BookPagination


class BookReviewPage(CamelModel):
    data: list[BookReviewItem]
    pagination: ReviewPagination


class BookDetailData(CamelModel):
    """Payload of GET /api/books/{id}: the book plus one page of its reviews."""

    book: BookWithRating
    reviews: BookReviewPage


class BookSearchData(CamelModel):
    """Payload of GET /api/search."""

    books: list[BookWithRating]
    search_query: str = Field(..., description="The query as received")
    pagination: SearchPagination
