"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() function returns configured app
   - Tests build the app the same way production does

2. Lifespan Events
   - startup/shutdown logging around the served application

3. Middleware Stack
   - Rate limiting (slowapi)
   - CORS: Allow cross-origin requests

4. Exception Handlers
   - Every failure is rendered as {"success": false, "message", "errors"?}
   - Domain errors carry their own status code
   - Request validation failures become 400 with one entry per field
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import get_settings
from app.exceptions import BookReviewError
from app.routers import auth_router, books_router, reviews_router, search_router
from app.services.rate_limiter import limiter, rate_limit_exceeded_handler

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


# =============================================================================
# Lifespan Events
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Code before yield: Runs on startup
    Code after yield: Runs on shutdown
    """
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"API version: {settings.version}")

    yield

    logger.info(f"Shutting down {settings.app_name}...")


# =============================================================================
# Error Envelope
# =============================================================================
def error_response(
    status_code: int,
    message: str,
    errors: list[dict[str, str]] | None = None,
    **extra: str,
) -> JSONResponse:
    """Build the failure envelope shared by every exception handler."""
    content: dict = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """
    Flatten pydantic errors to {field, message} pairs.

    The field is the last part of the error location, so body fields,
    query parameters and path parameters all report their own name.
    """
    errors = []
    for error in exc.errors():
        location = error.get("loc") or ("request",)
        message = error.get("msg", "Invalid value")
        if message.startswith(VALUE_ERROR_PREFIX):
            message = message[len(VALUE_ERROR_PREFIX):]
        errors.append({"field": str(location[-1]), "message": message})
    return errors


# =============================================================================
# Application Factory
# =============================================================================
def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title=settings.app_name,
        description="""
## Book Review API

Browse a catalog of books, search it, and share reviews.

### Features
- **Books**: Add books; list them with filters, sorting and pagination
- **Reviews**: One review per user per book; authors can edit or delete theirs
- **Search**: Case-insensitive search by title or author
- **Ratings**: Average rating and review count computed on every read

### Authentication
Sign up or log in to receive a token, then send
`Authorization: Bearer <token>` on write requests.
        """,
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # -------------------------------------------------------------------------
    # Rate Limiting
    # -------------------------------------------------------------------------
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------------------------------
    # Exception Handlers
    # -------------------------------------------------------------------------
    @app.exception_handler(BookReviewError)
    async def domain_exception_handler(
        request: Request,
        exc: BookReviewError,
    ) -> JSONResponse:
        """Render domain errors with the status code they carry."""
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"Domain error on {request.url.path}: {exc.message}")
        else:
            logger.info(f"{exc.status_code} on {request.url.path}: {exc.message}")
        return error_response(
            exc.status_code,
            exc.message,
            [error.to_dict() for error in exc.errors],
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Malformed bodies and query parameters are client errors (400)."""
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation error",
            validation_errors(exc),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Unknown routes and disallowed methods still use the envelope."""
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == status.HTTP_404_NOT_FOUND and message == "Not Found":
            message = "Route not found"
        response = error_response(exc.status_code, message)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error while hiding details from clients
        outside development.
        """
        logger.error(f"Database error: {exc}")
        if settings.is_development:
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error", error=str(exc)
            )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """
        Catch-all exception handler.

        In development the error text is included under "error".
        """
        logger.error(f"Unhandled error: {exc}", exc_info=True)
        if settings.is_development:
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error", error=str(exc)
            )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    api_prefix = "/api"

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(books_router, prefix=api_prefix)
    app.include_router(reviews_router, prefix=api_prefix)
    app.include_router(search_router, prefix=api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoint
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
        description="Check if the API is running and healthy.",
    )
    async def health_check() -> dict:
        """
        Health check endpoint.

        Used by load balancers and container orchestrators.
        """
        return {
            "success": True,
            "message": "Book Review API is running",
            "data": {
                "status": "healthy",
                "app": settings.app_name,
                "version": settings.version,
                "environment": settings.environment,
                "rate_limiting": {
                    "enabled": settings.rate_limit_enabled,
                    "default_limit": settings.rate_limit_default,
                },
            },
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
        description="Welcome message and API information.",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "success": True,
            "message": f"Welcome to {settings.app_name}",
            "data": {
                "version": settings.version,
                "docs": "/docs",
                "health": "/health",
            },
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app()


# =============================================================================
# Development Server
# =============================================================================
# python -m app.main

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
