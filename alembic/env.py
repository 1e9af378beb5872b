"""
Alembic Environment Configuration

Migrations for the users and favorite_books tables.

The database URL comes from application settings (DATABASE_URL), never
from alembic.ini, so migrations always target the same database the API
uses.

COMMANDS:
- alembic upgrade head                           # Apply all migrations
- alembic revision --autogenerate -m "message"  # Create migration
- alembic downgrade -1                           # Rollback one migration
"""

from logging.config import fileConfig

from sqlalchemy import pool

from alembic import context
from app.config import get_settings
from app.database import Base, Database
from app.models import FavoriteBook, User  # noqa: F401 - registers tables on Base.metadata

settings = get_settings()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """
    Emit SQL without connecting.

    Usage:
        alembic upgrade head --sql > migration.sql
    """
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a short-lived, unpooled connection."""
    database = Database(settings.database_url, poolclass=pool.NullPool)

    try:
        with database.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                # SQLite cannot ALTER constraints in place
                render_as_batch=connection.dialect.name == "sqlite",
            )

            with context.begin_transaction():
                context.run_migrations()
    finally:
        database.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
