"""
User Pydantic Schemas

These schemas define the shape of data for registration and login.

Schemas:
- SignupRequest: Registration data (username, email, password)
- LoginRequest: Username-or-email plus password
- UserResponse: Public user data (never exposes the password hash)
- AuthResponse: User plus bearer token, returned by signup and login

Username and email are normalized to lowercase here, before any lookup or
insert, which is what makes their uniqueness case-insensitive.
"""

import re
from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel

USERNAME_PATTERN = re.compile(r"[a-zA-Z0-9_]+")
EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


class SignupRequest(CamelModel):
    """
    Schema for user registration.

    Requires username, email, and a password with strength validation.
    """

    username: str = Field(
        ...,
        min_length=3,
        max_length=20,
        description="Unique username (3-20 characters, letters, numbers and underscores)",
        examples=["alice1", "jane_doe"],
    )

    email: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's email address",
        examples=["a@x.com"],
    )

    password: str = Field(
        ...,
        min_length=8,
        description="Password (min 8 chars, must include lowercase, uppercase and a number)",
        examples=["Secret12"],
    )

    @field_validator("username")
    @classmethod
    def username_must_be_valid(cls, v: str) -> str:
        """Only letters, numbers, and underscores; stored lowercase."""
        if not USERNAME_PATTERN.fullmatch(v):
            raise ValueError(
                "Username can only contain letters, numbers, and underscores"
            )
        return v.lower()

    @field_validator("email")
    @classmethod
    def email_must_be_valid(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("Invalid email address")
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        """
        Validate password strength.

        Requirements:
        - At least 8 characters (enforced by min_length)
        - At least 1 lowercase letter
        - At least 1 uppercase letter
        - At least 1 number
        """
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one number")
        return v


class LoginRequest(CamelModel):
    """Schema for login; username may also be an email address."""

    username: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Username or email address",
        examples=["alice1", "a@x.com"],
    )

    password: str = Field(
        ...,
        min_length=1,
        description="Account password",
    )

    @field_validator("username")
    @classmethod
    def normalize_identifier(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(CamelModel):
    """
    Schema for user responses.

    SECURITY: Never includes the password or its hash.
    """

    id: int = Field(..., description="Unique user identifier", examples=[1])
    username: str = Field(..., description="Unique username")
    email: str = Field(..., description="User's email address")
    created_at: datetime = Field(..., description="When the user registered")
    updated_at: datetime = Field(..., description="When the user was last updated")


class AuthResponse(CamelModel):
    """Returned by signup and login."""

    user: UserResponse
    token: str = Field(..., description="Bearer token valid for 7 days")
