"""
Book Finder API Application Package

Search an external book catalog and keep a personal favorites list.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy storage handle and per-request sessions
- exceptions.py: Error taxonomy rendered as {message, errors}
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection (sessions, current user, catalog)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (auth, favorites, catalog, security)
"""

__version__ = "1.0.0"
