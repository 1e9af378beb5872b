"""
FavoriteBook Model

A user's saved pointer to a book in the external catalog, with a snapshot
of the title, author, year and cover taken when it was added.

The (user_id, book_id) unique constraint is what keeps a user from saving
the same catalog book twice, including when two requests race: the second
INSERT fails with an IntegrityError which the favorites service turns into
a conflict.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.user import User


class FavoriteBook(Base):
    """
    Favorite book owned by exactly one user.

    Table: favorite_books

    Fields:
    - book_id: Open Library key, e.g. "/works/OL27448W"
    - title, author, year, cover: Snapshot of the catalog entry

    Indexes:
    - user_id: Listing a user's favorites
    - (user_id, book_id): Unique, one favorite per user per catalog book
    """

    __tablename__ = "favorite_books"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_favorite_books_user_book"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
        comment="Owner of the favorite"
    )

    book_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="External catalog identifier"
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Book title at the time it was favorited"
    )

    author: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Comma-joined author names"
    )

    year: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="First publication year"
    )

    cover: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Cover image URL"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship(
        "User",
        back_populates="favorites",
    )

    def __repr__(self) -> str:
        return f"FavoriteBook(id={self.id}, user_id={self.user_id}, book_id='{self.book_id}')"
