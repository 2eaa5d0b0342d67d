"""
Domain Exceptions

Services raise these instead of HTTPException so that they stay usable
outside a request. Each class carries the HTTP status it maps to; the
handlers registered in app.main turn them into the response envelope:

    {"success": false, "message": "...", "errors": [{"field": ..., "message": ...}]}

Taxonomy:
- ValidationError (400): one FieldError per violated constraint
- ConflictError (400): a uniqueness rule was violated
- NotFoundError (404)
- ForbiddenError (403): caller does not own the resource
- AuthError (401) and its subclasses for each credential failure
"""

from dataclasses import dataclass

from fastapi import status


@dataclass(frozen=True)
class FieldError:
    """A single violated constraint."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class BookReviewError(Exception):
    """Base exception for all domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(
        self,
        message: str | None = None,
        errors: list[FieldError] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(BookReviewError):
    """Raised when input violates a field constraint."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build an error for a single field, using its message as the summary."""
        return cls(message, [FieldError(field, message)])


class ConflictError(BookReviewError):
    """Raised when a write would break a uniqueness rule."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        message = message or self.default_message
        super().__init__(message, [FieldError(field, message)])


class NotFoundError(BookReviewError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ForbiddenError(BookReviewError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


# =============================================================================
# Authentication Errors
# =============================================================================


class AuthError(BookReviewError):
    """Base for every credential failure (HTTP 401)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication failed."


class MissingOrMalformedCredential(AuthError):
    default_message = "Access denied. No token provided or invalid format."


class InvalidCredential(AuthError):
    default_message = "Invalid token."


class ExpiredCredential(AuthError):
    default_message = "Token expired."


class UnknownUser(AuthError):
    """The token is valid but its subject no longer exists."""

    default_message = "Invalid token. User not found."


__all__ = [
    "FieldError",
    "BookReviewError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "ForbiddenError",
    "AuthError",
    "MissingOrMalformedCredential",
    "InvalidCredential",
    "ExpiredCredential",
    "UnknownUser",
]
