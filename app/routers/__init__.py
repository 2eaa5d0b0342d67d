"""
API Routers Package

Router Structure:
- auth.py: /api/signup, /api/login
- books.py: /api/books/* endpoints
- reviews.py: /api/books/{id}/reviews and /api/reviews/* endpoints
- search.py: /api/search

Each router is imported and registered in main.py.
"""

from app.routers.auth import router as auth_router
from app.routers.books import router as books_router
from app.routers.reviews import router as reviews_router
from app.routers.search import router as search_router

__all__ = [
    "auth_router",
    "books_router",
    "reviews_router",
    "search_router",
]
