#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample data for development.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py

    # Drop and recreate every table first
    python scripts/seed_data.py --reset

This script:
1. Connects to the database using app settings
2. Creates the tables if they don't exist (optionally dropping them first)
3. Creates sample users, books and reviews

Every sample user's password is "password123".
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables, drop_tables
from app.models import Book, BookGenre, Review, User
from app.services.ratings import get_rating_stats
from app.services.security import hash_password

SAMPLE_PASSWORD = "password123"


def create_users(db: Session) -> dict[str, User]:
    """Create sample users."""
    print("Creating users...")
    users = {
        username: User(
            username=username,
            email=f"{username}@example.com",
            hashed_password=hash_password(SAMPLE_PASSWORD),
        )
        for username in ("booklover", "pageturner", "nightreader")
    }
    db.add_all(users.values())
    db.commit()
    print(f"Created {len(users)} users.")
    return users


def create_books(db: Session, owner: User) -> dict[str, Book]:
    """Create sample books, all added by the same user."""
    print("Creating books...")
    books_data = [
        {
            "title": "1984",
            "author": "George Orwell",
            "genre": BookGenre.FICTION,
            "description": "A dystopian novel set in a totalitarian society under constant surveillance.",
            "published_year": 1949,
            "isbn": "9780451524935",
        },
        {
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "genre": BookGenre.CLASSIC_LITERATURE,
            "description": "Elizabeth Bennet navigates manners, morality and marriage in Regency England.",
            "published_year": 1813,
            "isbn": "9780141439518",
        },
        {
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "genre": BookGenre.FANTASY,
            "description": "Bilbo Baggins is swept into a quest to reclaim a dwarven kingdom from a dragon.",
            "published_year": 1937,
            "isbn": "9780547928227",
        },
        {
            "title": "Foundation",
            "author": "Isaac Asimov",
            "genre": BookGenre.SCIENCE_FICTION,
            "description": "A mathematician foresees the fall of the Galactic Empire and plans for what follows.",
            "published_year": 1951,
            "isbn": "9780553293357",
        },
        {
            "title": "Murder on the Orient Express",
            "author": "Agatha Christie",
            "genre": BookGenre.MYSTERY,
            "description": "Hercule Poirot investigates a murder aboard a snowbound train.",
            "published_year": 1934,
            "isbn": None,
        },
    ]

    books = {}
    for data in books_data:
        book = Book(**{**data, "genre": data["genre"].value}, created_by=owner.id)
        books[book.title] = book
    db.add_all(books.values())
    db.commit()
    print(f"Created {len(books)} books.")
    return books


def create_reviews(
    db: Session,
    users: dict[str, User],
    books: dict[str, Book],
) -> list[Review]:
    """Create sample reviews, at most one per user per book."""
    print("Creating reviews...")
    reviews_data = [
        ("booklover", "1984", 5, "Chilling and more relevant every year."),
        ("pageturner", "1984", 4, "Bleak, but impossible to put down."),
        ("nightreader", "1984", 4, "The ending stayed with me for weeks."),
        ("booklover", "The Hobbit", 5, "A perfect adventure for any age."),
        ("pageturner", "Foundation", 3, "Big ideas, thin characters."),
        ("nightreader", "Pride and Prejudice", 5, "Witty dialogue that still sparkles."),
    ]

    reviews = [
        Review(
            user_id=users[username].id,
            book_id=books[title].id,
            rating=rating,
            comment=comment,
        )
        for username, title, rating, comment in reviews_data
    ]
    db.add_all(reviews)
    db.commit()
    print(f"Created {len(reviews)} reviews.")
    return reviews


def seed_database(reset: bool = False) -> None:
    """
    Main function to seed the database.

    Args:
        reset: If True, drops and recreates every table before seeding.
    """
    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    if reset:
        print("Dropping existing tables...")
        drop_tables()

    create_tables()

    db = SessionLocal()

    try:
        if db.scalar(select(User.id).limit(1)) is not None:
            print("Database already contains users. Run with --reset to start over.")
            return

        users = create_users(db)
        books = create_books(db, users["booklover"])
        reviews = create_reviews(db, users, books)

        stats = get_rating_stats(db, [book.id for book in books.values()])

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SAMPLE_PASSWORD})")
        print(f"  - Books: {len(books)}")
        print(f"  - Reviews: {len(reviews)}")
        for title, book in books.items():
            rating = stats.get(book.id)
            if rating:
                print(f"    {title}: {rating.average} ({rating.count} reviews)")
        print("\nAPI documentation at http://localhost:5000/docs")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the Book Review API database.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding",
    )
    args = parser.parse_args()
    seed_database(reset=args.reset)
