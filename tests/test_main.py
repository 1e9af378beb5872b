"""
Tests for application wiring: root and health endpoints, error shapes.
"""

from collections.abc import Generator

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from app import __version__
from app.config import get_settings
from app.database import Database
from app.exceptions import InternalError, NotFoundError
from app.main import create_app


@pytest.fixture
def debug(request) -> bool:
    return getattr(request, "param", False)


@pytest.fixture
def standalone_client(catalog, debug: bool) -> Generator[TestClient, None, None]:
    """App over a database of its own, for endpoints that open connections directly."""
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.create_tables()
    app_settings = get_settings().model_copy(update={"debug": debug})
    app = create_app(app_settings=app_settings, database=database, catalog=catalog)

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    @app.get("/db-boom")
    def db_boom():
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    @app.get("/missing")
    def missing():
        raise NotFoundError(field="thing", detail="No such thing")

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    database.dispose()


def test_root(client: TestClient):
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["version"] == __version__
    assert response.json()["message"] == f"{get_settings().app_name} is running"


def test_health(standalone_client: TestClient):
    response = standalone_client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "healthy"
    assert response.json()["database"] == "healthy"


def test_unknown_route_is_404(client: TestClient):
    response = client.get("/api/nothing-here")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_domain_error_shape(standalone_client: TestClient):
    response = standalone_client.get("/missing")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {
        "message": "Not found",
        "errors": [{"field": "thing", "message": "No such thing"}],
    }


def test_unexpected_error_is_generic_500(standalone_client: TestClient):
    response = standalone_client.get("/boom")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Internal server error"
    assert "kaboom" not in response.text


def test_database_error_is_generic_500(standalone_client: TestClient):
    response = standalone_client.get("/db-boom")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["message"] == "Internal server error"
    assert "disk I/O" not in response.text


def test_internal_error_renders_like_other_errors():
    error = InternalError()

    assert error.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert error.to_dict() == {"message": "Internal server error", "errors": []}


def test_unexpected_error_body(standalone_client: TestClient):
    response = standalone_client.get("/boom")

    assert response.json() == InternalError().to_dict()


@pytest.mark.parametrize("debug", [True], indirect=True)
def test_unexpected_error_detail_in_debug_mode(standalone_client: TestClient):
    response = standalone_client.get("/boom")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {
        "message": "Internal server error",
        "errors": [{"field": "server", "message": "kaboom"}],
    }
