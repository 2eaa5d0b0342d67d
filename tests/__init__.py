"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data, factories)
- test_auth.py: Signup, login and the identity guard on protected routes
- test_books.py: /api/books endpoints
- test_reviews.py: /api/books/{id}/reviews and /api/reviews endpoints
- test_search.py: /api/search
- test_core.py: Ratings, pagination and input helpers below the HTTP layer

Running Tests:
    pytest
    pytest tests/test_reviews.py -v
"""
