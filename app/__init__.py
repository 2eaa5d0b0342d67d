"""
Book Review API Application Package

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Domain errors and the HTTP status each maps to
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (catalog, reviews, search, ratings, identity)
- utils/: Helper functions
"""

__version__ = "1.0.0"
