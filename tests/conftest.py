"""
pytest Fixtures for Book Review API Tests

This file contains shared fixtures used across all test files.

FIXTURE SCOPES:
- session scope for the engine (expensive to create)
- function scope for sessions and sample data (isolation between tests)

Isolation:
Services commit (and roll back after IntegrityError) on their own, so
tests cannot be wrapped in an outer transaction. Instead every table is
emptied after each test.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting, sets a test secret key and keeps the
# application engine off PostgreSQL
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "development"

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Book, BookGenre
from app.models.review import Review
from app.models.user import User
from app.services.security import create_access_token, hash_password

BASE_TIME = datetime(2024, 1, 1, tzinfo=UTC)

# =============================================================================
# DATABASE FIXTURES
# =============================================================================
# SQLite in-memory keeps the suite self-contained. Both unique constraints
# (ISBN, one review per user per book) are enforced by SQLite as well.


@pytest.fixture(scope="session")
def engine():
    """
    Create a SQLite in-memory database engine.

    StaticPool keeps a single connection alive for the entire session.
    Without it, the in-memory database would disappear between connections.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    All rows are deleted afterwards, children first.
    """
    TestSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
    session = TestSessionLocal()

    yield session

    session.close()
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with the test database.

    We override the get_db dependency to use our test session.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# HELPERS
# =============================================================================


def make_user(db: Session, username: str, password: str = "SecurePass123") -> User:
    """Insert a user directly, bypassing the signup endpoint."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        hashed_password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_book(
    db: Session,
    owner: User,
    title: str = "1984",
    author: str = "George Orwell",
    genre: BookGenre = BookGenre.FICTION,
    published_year: int | None = 1949,
    isbn: str | None = None,
    minutes: int = 0,
) -> Book:
    """Insert a book; minutes offsets created_at so ordering is deterministic."""
    book = Book(
        title=title,
        author=author,
        genre=genre.value,
        description=f"Description of {title}",
        published_year=published_year,
        isbn=isbn,
        created_by=owner.id,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(book)
    db.commit()
    db.refresh(book)
    return book


def make_review(
    db: Session,
    book: Book,
    user: User,
    rating: int = 4,
    comment: str = "A thoughtful and gripping read.",
    minutes: int = 0,
) -> Review:
    review = Review(
        book_id=book.id,
        user_id=user.id,
        rating=rating,
        comment=comment,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )
    db.add(review)
    db.commit()
    db.refresh(review)
    return review


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user for testing."""
    return make_user(db_session, "testuser")


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for testing ownership scenarios."""
    return make_user(db_session, "seconduser", password="SecurePass456")


@pytest.fixture
def sample_book(db_session: Session, sample_user: User) -> Book:
    """Create a sample book added by sample_user."""
    return make_book(db_session, sample_user, isbn="9780451524935")


@pytest.fixture
def multiple_books(db_session: Session, sample_user: User) -> list[Book]:
    """Create 15 books (more than the default page size), oldest first."""
    genres = [BookGenre.FICTION, BookGenre.FANTASY, BookGenre.SCIENCE_FICTION]
    return [
        make_book(
            db_session,
            sample_user,
            title=f"Test Book {i + 1:02d}",
            author="Jane Austen" if i % 2 == 0 else "Leo Tolstoy",
            genre=genres[i % 3],
            published_year=1900 + i,
            minutes=i,
        )
        for i in range(15)
    ]


@pytest.fixture
def sample_review(db_session: Session, sample_book: Book, sample_user: User) -> Review:
    """Create a sample review of sample_book written by sample_user."""
    return make_review(db_session, sample_book, sample_user)


# =============================================================================
# FACTORY FIXTURES
# =============================================================================
# Tests that need more data than the samples above build it through these.


@pytest.fixture
def user_factory(db_session: Session):
    def factory(username: str, password: str = "SecurePass123") -> User:
        return make_user(db_session, username, password)

    return factory


@pytest.fixture
def book_factory(db_session: Session):
    def factory(owner: User, **fields) -> Book:
        return make_book(db_session, owner, **fields)

    return factory


@pytest.fixture
def review_factory(db_session: Session):
    def factory(book: Book, user: User, **fields) -> Review:
        return make_review(db_session, book, user, **fields)

    return factory


@pytest.fixture
def auth_header():
    """Build an Authorization header for a user."""

    def factory(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return factory
