"""
User Model

Represents a registered user of the Book Finder API.

SQLAlchemy 2.0 Features Used:
- mapped_column(): Define columns with full type support
- Mapped[]: Type hint wrapper for SQLAlchemy columns
- relationship(): Define relationships between models
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.favorite import FavoriteBook


class User(Base):
    """
    User model representing registered users in the system.

    Table: users

    Username and email are stored lowercased, so the unique indexes below
    make both of them case-insensitively unique.

    Relationships:
    - favorites: One-to-Many relationship with FavoriteBook

    Example:
        user = User(
            username="alice1",
            email="a@x.com",
            hashed_password=hash_password("Secret12"),
        )
    """

    __tablename__ = "users"

    # -------------------------------------------------------------------------
    # Primary Key
    # -------------------------------------------------------------------------
    id: Mapped[int] = mapped_column(primary_key=True)

    # -------------------------------------------------------------------------
    # Authentication Fields
    # -------------------------------------------------------------------------
    username: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique lowercase username"
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
        comment="Unique lowercase email address"
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Bcrypt hashed password"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        comment="When the user registered"
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="When the user record was last updated"
    )

    # -------------------------------------------------------------------------
    # Relationships
    # -------------------------------------------------------------------------
    # Favorites go away with their owner (ON DELETE CASCADE on the FK too)
    favorites: Mapped[list["FavoriteBook"]] = relationship(
        "FavoriteBook",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """Developer-friendly string representation."""
        return f"User(id={self.id}, username='{self.username}', email='{self.email}')"
