"""
Pydantic Schemas Package

Request/response models for the Book Finder API.

Schema Naming Convention:
- XxxRequest / XxxCreate: Bodies accepted by the API
- XxxResponse: Bodies returned by the API
"""

from app.schemas.base import CamelModel, ErrorDetail, ErrorResponse
from app.schemas.book import (
    BookSearchResponse,
    BookShowcaseResponse,
    CatalogBook,
    FavoriteBookResponse,
    FavoriteCheckResponse,
    FavoriteCreate,
    FavoriteCreatedResponse,
    FavoriteListResponse,
    FavoriteRemovedResponse,
    FavoriteSummary,
)
from app.schemas.user import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    UserResponse,
)

__all__ = [
    "CamelModel",
    "ErrorDetail",
    "ErrorResponse",
    # Catalog schemas
    "CatalogBook",
    "BookSearchResponse",
    "BookShowcaseResponse",
    # Favorite schemas
    "FavoriteCreate",
    "FavoriteBookResponse",
    "FavoriteSummary",
    "FavoriteListResponse",
    "FavoriteCreatedResponse",
    "FavoriteRemovedResponse",
    "FavoriteCheckResponse",
    # User/auth schemas
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "AuthResponse",
]
