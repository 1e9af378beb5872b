"""
pytest Fixtures for Book Finder API Tests

FIXTURE LAYOUT:
- database (session scope): SQLite in-memory Database, tables created once
- db_session (function scope): session inside a transaction that is rolled
  back after each test
- fake_catalog / catalog: Open Library stand-in served through
  httpx.MockTransport, so no test touches the network
- client: TestClient around an app built with the test database and
  catalog, with get_db overridden to hand out db_session
- sample_user / second_user / auth_headers: ready-made accounts and tokens
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# Set environment variables BEFORE importing the app
import os

os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import Generator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app.database import Database, get_db
from app.main import create_app
from app.models import FavoriteBook, User
from app.services.catalog import CatalogClient
from app.services.security import create_access_token, hash_password

TEST_COVERS_URL = "https://covers.test"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================
@pytest.fixture(scope="session")
def database() -> Generator[Database, None, None]:
    """
    SQLite in-memory Database shared by the whole test session.

    StaticPool keeps the single connection alive; without it the in-memory
    database would disappear between connections.
    """
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_tables()

    yield database

    database.drop_tables()
    database.dispose()


@pytest.fixture(scope="function")
def db_session(database: Database) -> Generator[Session, None, None]:
    """
    Fresh session per test, wrapped in a transaction that is rolled back.

    Service commits do not end the outer transaction, so nothing a test
    writes survives into the next test.
    """
    connection = database.engine.connect()
    transaction = connection.begin()
    session = Session(bind=connection, autoflush=False)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


# =============================================================================
# CATALOG FIXTURES
# =============================================================================
class FakeOpenLibrary:
    """
    Minimal stand-in for Open Library's /search.json.

    - docs: search docs, matched by case-insensitive substring of the title
    - failing: queries that answer with HTTP 503
    - down: every request fails at the transport level
    """

    def __init__(self) -> None:
        self.docs: list[dict] = [
            {
                "key": "/works/OL1168083W",
                "title": "1984",
                "author_name": ["George Orwell"],
                "first_publish_year": 1949,
                "cover_i": 12345,
            },
            {
                "key": "/works/OL1168007W",
                "title": "Animal Farm",
                "author_name": ["George Orwell"],
                "first_publish_year": 1945,
            },
            {
                "key": "/works/OL262758W",
                "title": "The Hobbit",
                "author_name": ["J.R.R. Tolkien"],
                "first_publish_year": 1937,
                "cover_i": 6979861,
            },
            {
                "key": "/works/OL27448W",
                "title": "Good Omens",
                "author_name": ["Terry Pratchett", "Neil Gaiman"],
            },
        ]
        self.failing: set[str] = set()
        self.down = False
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.down:
            raise httpx.ConnectError("catalog unreachable", request=request)

        query = request.url.params.get("q", "")
        limit = int(request.url.params.get("limit", "100"))

        if query in self.failing:
            return httpx.Response(503, json={"error": "unavailable"})

        matches = [doc for doc in self.docs if query.lower() in doc["title"].lower()]

        return httpx.Response(
            200,
            json={"numFound": len(matches), "start": 0, "docs": matches[:limit]},
        )


@pytest.fixture
def fake_catalog() -> FakeOpenLibrary:
    return FakeOpenLibrary()


@pytest.fixture
def catalog(fake_catalog: FakeOpenLibrary) -> CatalogClient:
    """CatalogClient wired to the fake catalog."""
    return CatalogClient(
        base_url="https://catalog.test",
        covers_url=TEST_COVERS_URL,
        transport=httpx.MockTransport(fake_catalog),
    )


# =============================================================================
# APPLICATION FIXTURES
# =============================================================================
@pytest.fixture(scope="function")
def client(
    database: Database,
    db_session: Session,
    catalog: CatalogClient,
) -> Generator[TestClient, None, None]:
    """
    Test client with the test database and the fake catalog.

    The Database is passed in, so the app neither creates tables nor
    disposes the engine; get_db is overridden to reuse db_session.
    """
    app = create_app(database=database, catalog=catalog)

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================
@pytest.fixture
def sample_user(db_session: Session) -> User:
    """Create a sample user (password: Secret12)."""
    user = User(
        username="alice1",
        email="a@x.com",
        hashed_password=hash_password("Secret12"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def second_user(db_session: Session) -> User:
    """Create a second user for ownership scenarios (password: Secret34)."""
    user = User(
        username="bob_2",
        email="b@y.org",
        hashed_password=hash_password("Secret34"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def bearer(user: User) -> dict[str, str]:
    """Authorization header for a user."""
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(sample_user: User) -> dict[str, str]:
    return bearer(sample_user)


@pytest.fixture
def second_auth_headers(second_user: User) -> dict[str, str]:
    return bearer(second_user)


@pytest.fixture
def make_auth_headers():
    """Build Authorization headers for any user."""
    return bearer


@pytest.fixture
def sample_favorite(db_session: Session, sample_user: User) -> FavoriteBook:
    """A favorite owned by sample_user."""
    favorite = FavoriteBook(
        user_id=sample_user.id,
        book_id="/works/OL1168083W",
        title="1984",
        author="George Orwell",
        year=1949,
        cover=f"{TEST_COVERS_URL}/b/id/12345-M.jpg",
    )
    db_session.add(favorite)
    db_session.commit()
    db_session.refresh(favorite)
    return favorite
