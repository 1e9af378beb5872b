"""
Database Configuration Module

SQLAlchemy 2.0 storage handle for the Book Finder API.

Unlike a module-level engine created at import time, the engine lives inside
a Database object that the application factory constructs and initializes
explicitly during startup. Tests build their own Database against SQLite.

Session Management Pattern
==========================
"Session per request":
1. Request arrives -> get_db() opens a session from app.state.database
2. Routes and services use that session for all their work
3. Services commit on success, roll back on integrity failures
4. The session is closed when the request ends
"""

import logging
from collections.abc import Generator
from typing import Any

from fastapi import Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic reads Base.metadata to discover tables for migrations.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Owns the engine and session factory for one process.

    Usage:
        database = Database(settings.database_url, pool_size=5)
        database.create_tables()

        with database.session() as session:
            ...

        database.dispose()
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs: Any) -> None:
        """
        Build the engine without connecting.

        Args:
            url: SQLAlchemy connection URL
            echo: Log all SQL statements
            **engine_kwargs: Passed to create_engine (pool sizes, poolclass,
                connect_args, ...)
        """
        if url.startswith("sqlite"):
            # Pool sizing does not apply to SQLite's pools
            engine_kwargs.pop("pool_size", None)
            engine_kwargs.pop("max_overflow", None)
        else:
            engine_kwargs.setdefault("pool_pre_ping", True)

        self.engine: Engine = create_engine(url, echo=echo, **engine_kwargs)

        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)

        self.session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )

    def create_tables(self) -> None:
        """
        Create all tables that do not exist yet.

        Use Alembic migrations for schema changes in production; this covers
        local development and tests.
        """
        # Import models so they register with Base.metadata
        import app.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables ready")

    def drop_tables(self) -> None:
        """Drop all tables. Only for tests and local resets."""
        import app.models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Session:
        """Open a new session bound to this database."""
        return self.session_factory()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Database connections closed")


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Opens a session on the Database attached to the running application and
    closes it when the request ends, even if the handler raised.

    Usage in Routes:
        @router.get("/books/favorites")
        def list_favorites(db: DbSession):
            ...
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()
