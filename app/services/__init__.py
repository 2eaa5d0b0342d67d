"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across different parts of the application
- Easier to test in isolation

Current services:
- accounts.py: Signup and login
- catalog.py: Adding, listing and reading books
- identity.py: Resolving a bearer token to a user
- rate_limiter.py: Rate limiting with slowapi
- ratings.py: Book rating aggregation calculations
- reviews.py: Review creation, update and deletion with ownership checks
- search.py: Case-insensitive title/author search
- security.py: Password hashing and JWT utilities
"""
