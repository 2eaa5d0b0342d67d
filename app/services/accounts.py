"""
Accounts Service

Registration and login. Both return the user together with a new access
token, so a client can start making authenticated calls right away.

Security:
- Passwords are hashed with bcrypt before storage and never logged
- Login failures do not reveal whether the email exists
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, InvalidCredential
from app.models.user import User
from app.schemas.user import AuthData, LoginRequest, SignupRequest, UserSummary
from app.services.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


def _taken_field(db: Session, email: str, username: str) -> str | None:
    if db.scalar(select(User.id).where(User.email == email)) is not None:
        return "email"
    if db.scalar(select(User.id).where(User.username == username)) is not None:
        return "username"
    return None


def _conflict(field: str) -> ConflictError:
    messages = {
        "email": "Email already registered",
        "username": "Username already taken",
    }
    return ConflictError(field, messages[field])


def _auth_data(user: User) -> AuthData:
    return AuthData(
        user=UserSummary.model_validate(user),
        token=create_access_token(user.id),
    )


def signup(db: Session, data: SignupRequest) -> AuthData:
    """
    Register a new user.

    Raises:
        ConflictError: Email or username already in use
    """
    taken = _taken_field(db, data.email, data.username)
    if taken:
        raise _conflict(taken)

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=hash_password(data.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        taken = _taken_field(db, data.email, data.username)
        if taken:
            raise _conflict(taken)
        raise

    db.refresh(user)
    logger.info(f"New user registered: {user.email}")

    return _auth_data(user)


def login(db: Session, data: LoginRequest) -> AuthData:
    """
    Authenticate with email and password.

    Raises:
        InvalidCredential: Unknown email or wrong password
    """
    user = db.execute(select(User).where(User.email == data.email)).scalar_one_or_none()

    if user is None or not verify_password(data.password, user.hashed_password):
        logger.warning(f"Login failed for {data.email}")
        raise InvalidCredential("Invalid email or password")

    logger.info(f"User logged in: {user.email}")

    return _auth_data(user)
