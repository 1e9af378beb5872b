"""
Book Pydantic Schemas

Two families of book shapes:
- Catalog books: normalized results from the external catalog
  (search and the landing-page showcase)
- Favorites: books a user saved, with ownership and timestamps

All of them serialize in camelCase (bookId, isFavorited, removedBook).
"""

from datetime import datetime

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


# =============================================================================
# Catalog Books
# =============================================================================
class CatalogBook(CamelModel):
    """A catalog entry in the API's normalized shape."""

    id: str = Field(..., description="External catalog id", examples=["/works/OL1168083W"])
    title: str = Field(..., examples=["1984"])
    author: str = Field(..., description="Comma-joined author names", examples=["George Orwell"])
    year: int = Field(..., description="First publication year", examples=[1949])
    cover: str | None = Field(
        default=None,
        description="Cover image URL",
        examples=["https://covers.openlibrary.org/b/id/12345-M.jpg"],
    )


class BookShowcaseResponse(CamelModel):
    """Landing-page sample of popular books."""

    books: list[CatalogBook]
    message: str = "Random books for landing page"


class BookSearchResponse(CamelModel):
    """Catalog search results."""

    books: list[CatalogBook]
    total: int = Field(..., description="Total hits reported by the catalog")
    query: str
    message: str


# =============================================================================
# Favorites
# =============================================================================
class FavoriteCreate(CamelModel):
    """
    Schema for adding a favorite.

    The body carries a snapshot of the catalog entry; it is stored as-is.
    """

    book_id: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="External catalog id",
        examples=["ol-1", "/works/OL1168083W"],
    )
    title: str = Field(..., min_length=1, max_length=500, examples=["1984"])
    author: str = Field(..., min_length=1, max_length=500, examples=["George Orwell"])
    year: int = Field(..., ge=-3000, le=9999, examples=[1949])
    cover: str | None = Field(default=None, max_length=2048)

    @field_validator("book_id", "title", "author")
    @classmethod
    def strip_and_require(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("cover")
    @classmethod
    def empty_cover_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class FavoriteBookResponse(CamelModel):
    """A stored favorite."""

    id: int
    user_id: int
    book_id: str
    title: str
    author: str
    year: int
    cover: str | None = None
    created_at: datetime
    updated_at: datetime


class FavoriteSummary(CamelModel):
    """Short form used by remove and check."""

    id: int
    book_id: str
    title: str
    author: str


class FavoriteListResponse(CamelModel):
    books: list[FavoriteBookResponse]
    message: str


class FavoriteCreatedResponse(CamelModel):
    book: FavoriteBookResponse
    message: str = "Book added to favorites successfully"


class FavoriteRemovedResponse(CamelModel):
    message: str = "Book removed from favorites successfully"
    removed_book: FavoriteSummary


class FavoriteCheckResponse(CamelModel):
    is_favorited: bool
    book: FavoriteSummary | None = None
