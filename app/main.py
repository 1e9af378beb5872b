"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.

Key Concepts:
=============

1. Application Factory Pattern
   - create_app() returns a configured app
   - Tests build their own app around a SQLite Database and a mocked
     catalog client

2. Explicit Storage Handle
   - The Database (engine + session factory) is constructed here, not at
     import time, and attached to app.state
   - When the factory builds it, the lifespan initializes it (creates
     tables) on startup and disposes it on shutdown
   - A Database passed in by the caller stays owned by the caller

3. Exception Handlers
   - BookFinderError subclasses render as {message, errors}
   - Request validation failures become 400 with one entry per field
   - Database and unexpected errors are logged and collapsed to a generic 500
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import __version__
from app.config import Settings, get_settings
from app.database import Database
from app.exceptions import BookFinderError, InternalError
from app.routers import auth_router, books_router
from app.services.catalog import CatalogClient

# =============================================================================
# Logging Configuration
# =============================================================================
settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _validation_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into [{field, message}] entries."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        # Drop the "body"/"query"/"path" segment unless it is all there is
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        message = str(error.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


def _internal_error(exc: Exception, debug: bool) -> InternalError:
    """Generic 500; the underlying error text only in debug mode."""
    if debug:
        return InternalError(field="server", detail=str(exc))
    return InternalError()


def register_exception_handlers(app: FastAPI, debug: bool) -> None:
    """Attach the error handlers that give every failure the same shape."""

    @app.exception_handler(BookFinderError)
    async def book_finder_exception_handler(
        request: Request,
        exc: BookFinderError,
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": _validation_errors(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request,
        exc: SQLAlchemyError,
    ) -> JSONResponse:
        """
        Handle SQLAlchemy database errors.

        Logs the actual error while hiding driver details from users.
        """
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_internal_error(exc, debug).to_dict(),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all; details only in debug mode."""
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_internal_error(exc, debug).to_dict(),
        )


# =============================================================================
# Application Factory
# =============================================================================
def create_app(
    app_settings: Settings | None = None,
    database: Database | None = None,
    catalog: CatalogClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use (defaults to get_settings())
        database: Storage handle; built from settings when omitted, in which
            case the app initializes and disposes it
        catalog: External catalog client; built from settings when omitted

    Returns:
        Configured FastAPI application instance
    """
    app_settings = app_settings or get_settings()
    owns_database = database is None

    if database is None:
        database = Database(
            app_settings.database_url,
            echo=app_settings.debug,
            pool_size=app_settings.db_pool_size,
            max_overflow=app_settings.db_max_overflow,
        )

    if catalog is None:
        catalog = CatalogClient.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ----- STARTUP -----
        logger.info(f"Starting {app_settings.app_name}...")
        logger.info(f"Debug mode: {app_settings.debug}")

        if owns_database:
            database.create_tables()

        yield

        # ----- SHUTDOWN -----
        logger.info(f"Shutting down {app_settings.app_name}...")

        if owns_database:
            database.dispose()

    app = FastAPI(
        title=app_settings.app_name,
        description="""
## Book Finder API

Search the Open Library catalog and keep a personal list of favorite books.

### Authentication
Sign up or log in under `/auth` to receive a bearer token, then send it as
`Authorization: Bearer <token>`. Tokens are valid for 7 days.
Every `/books` endpoint except `/books/show` requires a token.
        """,
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.database = database
    app.state.catalog = catalog

    # -------------------------------------------------------------------------
    # CORS Middleware
    # -------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app, app_settings.debug)

    # -------------------------------------------------------------------------
    # Register Routers
    # -------------------------------------------------------------------------
    app.include_router(auth_router, prefix=app_settings.api_prefix)
    app.include_router(books_router, prefix=app_settings.api_prefix)

    # -------------------------------------------------------------------------
    # Health Check Endpoints
    # -------------------------------------------------------------------------
    @app.get(
        "/health",
        tags=["Health"],
        summary="Health check",
    )
    def health_check() -> dict:
        """Report API status and whether the database answers."""
        db_status = "healthy"
        try:
            with database.engine.connect() as connection:
                connection.exec_driver_sql("SELECT 1")
        except SQLAlchemyError as e:
            logger.error(f"Health check database error: {e}")
            db_status = "unhealthy"

        return {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "app": app_settings.app_name,
            "version": __version__,
            "database": db_status,
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API root",
    )
    async def root() -> dict:
        """Root endpoint with API information."""
        return {
            "message": f"{app_settings.app_name} is running",
            "version": __version__,
            "docs": "/docs",
            "health": "/health",
        }

    return app


# =============================================================================
# Application Instance
# =============================================================================
# This is what uvicorn imports: uvicorn app.main:app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
