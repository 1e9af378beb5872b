"""
Favorites Service

Add, remove, list and check a user's favorite books.

Every query is filtered by the caller's user id, which comes from the
verified bearer token; there is no way to read or change someone else's
favorites through these functions.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.exceptions import ConflictError, NotFoundError
from app.models import FavoriteBook
from app.schemas.book import FavoriteCreate, FavoriteSummary

logger = logging.getLogger(__name__)


def _already_favorited() -> ConflictError:
    return ConflictError(
        "Book is already in your favorites",
        field="bookId",
        detail="This book is already in your favorites",
    )


def list_favorites(db: Session, user_id: int) -> list[FavoriteBook]:
    """Return all of the user's favorites, newest first."""
    stmt = (
        select(FavoriteBook)
        .where(FavoriteBook.user_id == user_id)
        .order_by(FavoriteBook.created_at.desc(), FavoriteBook.id.desc())
    )
    return list(db.execute(stmt).scalars().all())


def get_favorite(db: Session, user_id: int, book_id: str) -> FavoriteBook | None:
    """Return the user's favorite for a catalog book, or None."""
    stmt = select(FavoriteBook).where(
        FavoriteBook.user_id == user_id,
        FavoriteBook.book_id == book_id,
    )
    return db.execute(stmt).scalar_one_or_none()


def add_favorite(db: Session, user_id: int, data: FavoriteCreate) -> FavoriteBook:
    """
    Save a catalog book as a favorite.

    Raises:
        ConflictError: The user already has this book_id. Checked up front
            and, for concurrent requests, by the unique constraint on commit.
    """
    if get_favorite(db, user_id, data.book_id) is not None:
        raise _already_favorited()

    favorite = FavoriteBook(
        user_id=user_id,
        book_id=data.book_id,
        title=data.title,
        author=data.author,
        year=data.year,
        cover=data.cover,
    )
    db.add(favorite)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info(f"Duplicate favorite rejected by constraint: user={user_id} book={data.book_id}")
        raise _already_favorited()

    db.refresh(favorite)

    logger.info(f"Favorite added: user={user_id} book={data.book_id}")

    return favorite


def remove_favorite(db: Session, user_id: int, book_id: str) -> FavoriteSummary:
    """
    Delete one of the user's favorites.

    Returns:
        Summary of the deleted record, taken before the delete

    Raises:
        NotFoundError: The user has no favorite with this book_id
    """
    favorite = get_favorite(db, user_id, book_id)

    if favorite is None:
        raise NotFoundError(
            "Book not found in favorites",
            field="bookId",
            detail="This book is not in your favorites",
        )

    summary = FavoriteSummary.model_validate(favorite)

    db.delete(favorite)
    db.commit()

    logger.info(f"Favorite removed: user={user_id} book={book_id}")

    return summary
