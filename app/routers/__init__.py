"""
API Routers Package

Router Structure:
- auth.py: /api/auth/* endpoints (signup, login, current user)
- books.py: /api/books/* endpoints (catalog search, showcase, favorites)

Each router is imported and registered in main.py.
"""

from app.routers.auth import router as auth_router
from app.routers.books import router as books_router

__all__ = [
    "auth_router",
    "books_router",
]
