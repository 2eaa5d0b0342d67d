"""
Authentication Router

Handles user authentication endpoints:
- POST /signup - Register (username, email, password) and receive a token
- POST /login - Exchange email and password for a token

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or stored
- The returned JWT goes in "Authorization: Bearer <token>"
"""

from fastapi import APIRouter, Request, status

from app.config import get_settings
from app.dependencies import DbSession
from app.schemas import AuthData, Envelope, LoginRequest, SignupRequest
from app.services import accounts
from app.services.rate_limiter import limiter

settings = get_settings()

router = APIRouter(
    tags=["Authentication"],
    responses={
        400: {"description": "Validation error or email/username already exists"},
        401: {"description": "Invalid email or password"},
    },
)


@router.post(
    "/signup",
    response_model=Envelope[AuthData],
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account and receive an access token.

    **Username:** 3-30 characters, letters, numbers and underscores.
    **Password:** at least 6 characters.
    """,
)
@limiter.limit(settings.rate_limit_auth)  # Strict limit to prevent spam registrations
def signup(
    request: Request,
    user_data: SignupRequest,
    db: DbSession,
) -> Envelope[AuthData]:
    data = accounts.signup(db, user_data)
    return Envelope(message="User registered successfully", data=data)


@router.post(
    "/login",
    response_model=Envelope[AuthData],
    summary="Login with email and password",
    description="""
    Authenticate and receive an access token.

    **Usage:**
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@limiter.limit(settings.rate_limit_auth)
def login(
    request: Request,
    credentials: LoginRequest,
    db: DbSession,
) -> Envelope[AuthData]:
    data = accounts.login(db, credentials)
    return Envelope(message="Login successful", data=data)
