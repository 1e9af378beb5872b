"""
Authentication Router

Handles user authentication endpoints:
- Registration (username/email/password -> user + token)
- Login (username or email + password -> user + token)
- Get current user (from bearer token)

Security:
=========
- Passwords are hashed with bcrypt before storage
- Plain text passwords are never logged or returned
- Tokens are stateless JWTs valid for 7 days; there is no logout/revocation
"""

import logging

from fastapi import APIRouter, status

from app.dependencies import CurrentUser, DbSession
from app.schemas.base import ErrorResponse
from app.schemas.user import AuthResponse, LoginRequest, SignupRequest, UserResponse
from app.services.auth import authenticate_user, register_user

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation failed or user already exists"},
        401: {"model": ErrorResponse, "description": "Invalid credentials or token"},
    },
)


def _auth_response(result) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


# -------------------------------------------------------------------------
# Registration Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="""
    Create a new account and receive a bearer token.

    **Username:** 3-20 characters, letters, numbers and underscores.

    **Password:** at least 8 characters with a lowercase letter,
    an uppercase letter and a number.
    """,
)
@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    include_in_schema=False,
)
def signup(user_data: SignupRequest, db: DbSession) -> AuthResponse:
    """
    Register a new user.

    1. Body validated by SignupRequest (400 with field errors otherwise)
    2. Duplicate username/email -> 400 naming the field
    3. Password hashed, user stored, token issued
    """
    result = register_user(db, user_data)
    return _auth_response(result)


# -------------------------------------------------------------------------
# Login Endpoint
# -------------------------------------------------------------------------
@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login with username or email",
    description="""
    Authenticate and receive a fresh bearer token.

    The `username` field accepts either the username or the email address.

    **Usage:**
    ```
    Authorization: Bearer <token>
    ```
    """,
)
@router.post(
    "/signin",
    response_model=AuthResponse,
    include_in_schema=False,
)
def login(credentials: LoginRequest, db: DbSession) -> AuthResponse:
    """Verify credentials; unknown user and wrong password both give 401."""
    result = authenticate_user(db, credentials.username, credentials.password)
    return _auth_response(result)


# -------------------------------------------------------------------------
# Current User Endpoint
# -------------------------------------------------------------------------
@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
def get_me(current_user: CurrentUser) -> UserResponse:
    """Return the profile of the user the bearer token belongs to."""
    return UserResponse.model_validate(current_user)
