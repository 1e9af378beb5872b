"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

- DbSession: per-request SQLAlchemy session
- CurrentUser: the user behind a verified bearer token
- Catalog: the external catalog client
"""

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.database import get_db
from app.exceptions import InvalidTokenError, UnauthorizedError
from app.models import User
from app.services.auth import get_user_by_id
from app.services.catalog import CatalogClient, get_catalog
from app.services.security import decode_access_token

logger = logging.getLogger(__name__)

DbSession = Annotated[Session, Depends(get_db)]
Catalog = Annotated[CatalogClient, Depends(get_catalog)]


# =============================================================================
# Bearer Token Authentication
# =============================================================================
# auto_error=False: a missing header reaches get_current_user as None, so the
# 401 goes out in the same {message, errors} shape as every other error.
bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> User:
    """
    Resolve the authenticated user from "Authorization: Bearer <token>".

    1. Require a bearer credential
    2. Verify the token signature and expiry
    3. Load the user named by the "sub" claim

    Raises:
        UnauthorizedError: Header missing, token invalid or expired, or the
            user no longer exists
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError(
            "Access denied. No token provided.",
            field="authorization",
            detail="Bearer token is required",
        )

    payload = decode_access_token(credentials.credentials)

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise InvalidTokenError(field="token", detail="Token is invalid or expired")

    user = get_user_by_id(db, user_id)
    if user is None:
        logger.warning(f"Token for missing user id={user_id}")
        raise UnauthorizedError(
            "Invalid token. User not found.",
            field="token",
            detail="User associated with this token no longer exists",
        )

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
