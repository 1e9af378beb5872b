"""
Authentication Service

Registration and login for username/password accounts.

Security Features:
=================
1. Passwords are hashed with bcrypt before storage
2. Login failures never reveal whether the account exists: unknown users
   and wrong passwords get the same error (and a bcrypt round either way)
3. Every successful signup/login issues a fresh stateless bearer token
"""

import logging
from dataclasses import dataclass

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, UnauthorizedError
from app.models import User
from app.schemas.user import SignupRequest
from app.services.security import (
    create_access_token,
    dummy_verify_password,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    """A user together with the token just issued for them."""

    user: User
    token: str


def get_user_by_id(db: Session, user_id: int) -> User | None:
    """Look up a user by primary key."""
    return db.get(User, user_id)


def get_user_by_identifier(db: Session, identifier: str) -> User | None:
    """
    Look up a user by username or email.

    Both columns hold lowercase values, so the identifier is lowercased too.
    """
    identifier = identifier.strip().lower()
    stmt = select(User).where(
        or_(User.username == identifier, User.email == identifier)
    )
    return db.execute(stmt).scalars().first()


def _conflicting_fields(db: Session, username: str, email: str) -> list[dict[str, str]]:
    errors = []

    stmt = select(User.id).where(User.username == username)
    if db.execute(stmt).first() is not None:
        errors.append({"field": "username", "message": "Username already exists"})

    stmt = select(User.id).where(User.email == email)
    if db.execute(stmt).first() is not None:
        errors.append({"field": "email", "message": "Email already exists"})

    return errors


def register_user(db: Session, data: SignupRequest) -> AuthResult:
    """
    Create a user account and issue its first token.

    Args:
        db: Database session
        data: Validated signup body (username/email already lowercased)

    Returns:
        AuthResult with the persisted user and a bearer token

    Raises:
        ConflictError: Username or email already registered
    """
    errors = _conflicting_fields(db, data.username, data.email)
    if errors:
        logger.info(f"Registration rejected, duplicate {errors[0]['field']}")
        raise ConflictError("User already exists", errors=errors)

    user = User(
        username=data.username,
        email=data.email,
        hashed_password=hash_password(data.password),
    )
    db.add(user)

    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent signup for the same username/email
        db.rollback()
        errors = _conflicting_fields(db, data.username, data.email)
        raise ConflictError(
            "User already exists",
            errors=errors or [{"field": "username", "message": "Username already exists"}],
        )

    db.refresh(user)

    logger.info(f"New user registered: {user.username} (id={user.id})")

    return AuthResult(user=user, token=create_access_token(user.id))


def authenticate_user(db: Session, identifier: str, password: str) -> AuthResult:
    """
    Verify credentials and issue a fresh token.

    Args:
        db: Database session
        identifier: Username or email
        password: Plain text password

    Raises:
        UnauthorizedError: Unknown user or wrong password (same error)
    """
    user = get_user_by_identifier(db, identifier)

    if user is None:
        dummy_verify_password()
        logger.warning("Login failed: no matching user")
        raise _invalid_credentials()

    if not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed: incorrect password for user id={user.id}")
        raise _invalid_credentials()

    logger.info(f"User logged in: {user.username} (id={user.id})")

    return AuthResult(user=user, token=create_access_token(user.id))


def _invalid_credentials() -> UnauthorizedError:
    return UnauthorizedError(
        "Invalid credentials",
        field="username",
        detail="Username or password is incorrect",
    )
