"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. JWT access tokens signed with HS256 (python-jose)
3. Expired and invalid tokens are reported as different errors

Usage:
    from app.services.security import hash_password, verify_password

    hashed = hash_password("secret123")
    is_valid = verify_password("secret123", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.exceptions import ExpiredCredential, InvalidCredential

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# deprecated="auto" means old hashes are automatically upgraded
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("secret123")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token for a user id.

    Args:
        subject: The user id stored in the "sub" claim
        expires_delta: Optional custom lifetime (may be negative in tests)

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": subject,
        "type": ACCESS_TOKEN_TYPE,
        "exp": datetime.now(UTC) + expires_delta,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    """
    Verify an access token and return its subject.

    Args:
        token: The JWT token string

    Returns:
        The user id from the "sub" claim

    Raises:
        ExpiredCredential: The signature is valid but the token has expired
        InvalidCredential: Bad signature, malformed token, wrong token type,
            or no subject
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise ExpiredCredential()
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise InvalidCredential()

    if payload.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Token type mismatch: expected {ACCESS_TOKEN_TYPE}")
        raise InvalidCredential()

    subject = payload.get("sub")
    if not subject:
        raise InvalidCredential()

    return subject
