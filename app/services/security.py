"""
Security Service

Handles password hashing and JWT token operations.

Security Features:
==================
1. Password hashing with bcrypt (passlib)
2. Stateless, 7-day JWT bearer tokens carrying the user id
3. Expired and invalid tokens are told apart for logging, but both end up
   as a 401 for the caller

Usage:
    from app.services.security import hash_password, verify_password

    hashed = hash_password("Secret12")
    is_valid = verify_password("Secret12", hashed)
"""

import logging
from datetime import UTC, datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)
settings = get_settings()

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# bcrypt generates a fresh salt per hash; "auto" upgrades deprecated schemes
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password using bcrypt.

    Example:
        >>> hashed = hash_password("Secret12")
        >>> hashed.startswith("$2b$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Example:
        >>> hashed = hash_password("Secret12")
        >>> verify_password("Secret12", hashed)
        True
        >>> verify_password("Wrong123", hashed)
        False
    """
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify_password() -> None:
    """Spend the time of a real verification when there is no hash to check."""
    pwd_context.dummy_verify()


# -------------------------------------------------------------------------
# JWT Token Configuration
# -------------------------------------------------------------------------
ALGORITHM = settings.jwt_algorithm
ACCESS_TOKEN_EXPIRE_DAYS = settings.access_token_expire_days


def create_access_token(
    user_id: int | str,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a signed bearer token for a user.

    Args:
        user_id: Identifier stored in the "sub" claim
        expires_delta: Custom lifetime (defaults to ACCESS_TOKEN_EXPIRE_DAYS)

    Returns:
        Encoded JWT token string (header.payload.signature)
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS))

    to_encode = {"sub": str(user_id), "iat": now, "exp": expire}

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a bearer token.

    Returns:
        The decoded payload; "sub" is guaranteed to be present

    Raises:
        TokenExpiredError: Signature is valid but the token is past "exp"
        InvalidTokenError: Bad signature, malformed token or missing "sub"
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise TokenExpiredError(field="token", detail="Token has expired")
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise InvalidTokenError(field="token", detail="Token is invalid or expired")

    if not payload.get("sub"):
        logger.warning("Token without subject claim")
        raise InvalidTokenError(field="token", detail="Token is invalid or expired")

    return payload
