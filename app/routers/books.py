"""
Books Router

Catalog and favorites endpoints.

Endpoints:
- GET    /books/show                      - Landing-page showcase (public)
- GET    /books/search?q=                 - Catalog search (auth)
- GET    /books/favorites                 - List my favorites (auth)
- POST   /books/favorites                 - Add a favorite (auth)
- DELETE /books/favorites/{book_id}       - Remove a favorite (auth)
- GET    /books/favorites/check/{book_id} - Is this book a favorite? (auth)

Catalog ids contain slashes ("/works/OL1168083W"), so book_id path
parameters use the :path converter.
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.config import get_settings
from app.dependencies import Catalog, CurrentUser, DbSession, get_current_user
from app.exceptions import ValidationError
from app.schemas.base import ErrorResponse
from app.schemas.book import (
    BookSearchResponse,
    BookShowcaseResponse,
    FavoriteBookResponse,
    FavoriteCheckResponse,
    FavoriteCreate,
    FavoriteCreatedResponse,
    FavoriteListResponse,
    FavoriteRemovedResponse,
    FavoriteSummary,
)
from app.services import favorites as favorites_service

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
        500: {"model": ErrorResponse, "description": "Internal or upstream failure"},
    },
)


# =============================================================================
# Catalog
# =============================================================================
@router.get(
    "/show",
    response_model=BookShowcaseResponse,
    summary="Random books for the landing page",
    description="Best-effort: books whose lookup failed come back as placeholders.",
)
async def show_books(catalog: Catalog) -> BookShowcaseResponse:
    """Sample popular titles from the catalog. No authentication needed."""
    books = await catalog.sample(settings.catalog_sample_size)
    return BookShowcaseResponse(books=books)


@router.get(
    "/search",
    response_model=BookSearchResponse,
    dependencies=[Depends(get_current_user)],
    summary="Search the catalog",
    responses={400: {"model": ErrorResponse, "description": "Missing query"}},
)
async def search_books(
    catalog: Catalog,
    q: str | None = Query(
        default=None,
        max_length=200,
        description="Free-text search query",
        examples=["orwell", "the hobbit"],
    ),
    limit: int | None = Query(
        default=None,
        ge=1,
        le=100,
        description="Maximum number of results",
    ),
) -> BookSearchResponse:
    """Forward the query to the catalog and normalize the results."""
    if q is None or not q.strip():
        raise ValidationError(
            "Query parameter is required",
            field="q",
            detail="Please provide a search query",
        )

    query = q.strip()
    result = await catalog.search(query, limit=limit or settings.catalog_search_limit)

    return BookSearchResponse(
        books=result.books,
        total=result.total,
        query=query,
        message=f'Found {len(result.books)} books for "{query}"',
    )


# =============================================================================
# Favorites
# =============================================================================
@router.get(
    "/favorites",
    response_model=FavoriteListResponse,
    summary="List my favorite books",
)
def list_favorites(current_user: CurrentUser, db: DbSession) -> FavoriteListResponse:
    """All favorites of the authenticated user, newest first."""
    books = favorites_service.list_favorites(db, current_user.id)

    return FavoriteListResponse(
        books=[FavoriteBookResponse.model_validate(book) for book in books],
        message=f"Found {len(books)} favorite books",
    )


@router.post(
    "/favorites",
    response_model=FavoriteCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a book to my favorites",
    responses={400: {"model": ErrorResponse, "description": "Already a favorite or invalid body"}},
)
def add_favorite(
    book_data: FavoriteCreate,
    current_user: CurrentUser,
    db: DbSession,
) -> FavoriteCreatedResponse:
    """Save a catalog book; the same book_id twice gives 400."""
    favorite = favorites_service.add_favorite(db, current_user.id, book_data)
    return FavoriteCreatedResponse(book=FavoriteBookResponse.model_validate(favorite))


@router.get(
    "/favorites/check/{book_id:path}",
    response_model=FavoriteCheckResponse,
    summary="Check whether a book is one of my favorites",
)
def check_favorite(
    book_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> FavoriteCheckResponse:
    favorite = favorites_service.get_favorite(db, current_user.id, book_id)

    return FavoriteCheckResponse(
        is_favorited=favorite is not None,
        book=FavoriteSummary.model_validate(favorite) if favorite else None,
    )


@router.delete(
    "/favorites/{book_id:path}",
    response_model=FavoriteRemovedResponse,
    summary="Remove a book from my favorites",
    responses={404: {"model": ErrorResponse, "description": "Not in favorites"}},
)
def remove_favorite(
    book_id: str,
    current_user: CurrentUser,
    db: DbSession,
) -> FavoriteRemovedResponse:
    removed = favorites_service.remove_favorite(db, current_user.id, book_id)
    return FavoriteRemovedResponse(removed_book=removed)
