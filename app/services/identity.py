"""
Identity Service

Turns the raw Authorization header of a request into a persisted user.

The resolved User is returned to the caller, which passes its id
explicitly to the catalog and review services. Nothing is attached to the
request object.
"""

import logging

from sqlalchemy.orm import Session

from app.exceptions import MissingOrMalformedCredential, UnknownUser
from app.models.user import User
from app.services.security import decode_access_token

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an "Authorization: Bearer <token>" header value.

    Raises:
        MissingOrMalformedCredential: Header absent, wrong scheme, or empty token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise MissingOrMalformedCredential()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise MissingOrMalformedCredential()

    return token


def authenticate(db: Session, authorization: str | None) -> User:
    """
    Validate a bearer credential and resolve it to a user.

    Args:
        db: Database session
        authorization: Raw Authorization header value, or None

    Returns:
        The User the token was issued to

    Raises:
        MissingOrMalformedCredential: No "Bearer <token>" header
        InvalidCredential: Bad signature or malformed token
        ExpiredCredential: Token past its expiry
        UnknownUser: The token's subject no longer exists
    """
    token = extract_bearer_token(authorization)
    user_id = decode_access_token(token)

    user = db.get(User, user_id)
    if user is None:
        logger.warning(f"Token subject not found: {user_id}")
        raise UnknownUser()

    return user
