"""
User Pydantic Schemas

Schemas:
- SignupRequest: Registration data (username, email, password)
- LoginRequest: Email and password
- UserSummary: Public user data (never exposes the password hash)
- AuthData: User plus a freshly issued access token
"""

import re

from pydantic import ConfigDict, EmailStr, Field, field_validator

from app.schemas.common import CamelModel


class SignupRequest(CamelModel):
    """
    Schema for user registration.

    Usernames and emails are normalised to lowercase so that uniqueness
    is case-insensitive.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        description="Unique username (letters, numbers and underscores)",
        examples=["booklover"],
    )

    email: EmailStr = Field(
        ...,
        description="User's email address",
        examples=["reader@example.com"],
    )

    password: str = Field(
        ...,
        min_length=6,
        max_length=128,
        description="Password (at least 6 characters)",
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        if not re.match(r"^[a-zA-Z0-9_]+$", v):
            raise ValueError(
                "Username can only contain letters, numbers, and underscores"
            )
        return v.lower()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserSummary(CamelModel):
    """Public user data. SECURITY: never includes the password hash."""

    id: str
    username: str
    email: str


class AuthData(CamelModel):
    """Payload of signup and login responses."""

    user: UserSummary
    token: str = Field(..., description="Bearer access token")
