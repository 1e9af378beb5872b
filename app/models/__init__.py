"""
SQLAlchemy Models Package

Database models for the Book Finder API.

Model Relationships:
- User -> FavoriteBook: One-to-Many (a user owns many favorites,
                        each favorite belongs to exactly one user)

Import all models here to:
1. Make them available as: from app.models import User, FavoriteBook
2. Ensure Alembic discovers them for migrations
"""

from app.models.user import User
from app.models.favorite import FavoriteBook

__all__ = [
    "User",
    "FavoriteBook",
]
