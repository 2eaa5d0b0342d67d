"""
SQLAlchemy Models Package

Model Relationships:
- User -> Book: One-to-Many (the user who added the book)
- User -> Review: One-to-Many (a user writes at most one review per book)
- Book -> Review: One-to-Many

Import all models here so that:
1. They are available as: from app.models import Book, Review, User
2. Alembic discovers them for migrations
"""

from app.models.user import User
from app.models.book import Book, BookGenre
from app.models.review import Review

__all__ = [
    "User",
    "Book",
    "BookGenre",
    "Review",
]
