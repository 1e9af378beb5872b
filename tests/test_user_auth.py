"""
Tests for User Authentication

Tests the authentication endpoints:
- Signup (POST /api/auth/signup, alias /api/auth/register)
- Login (POST /api/auth/login, alias /api/auth/signin)
- Current user (GET /api/auth/me)

Coverage includes:
- Successful flows and the token they return
- Field-level validation errors
- Duplicate username/email conflicts
- Generic login failures that do not reveal whether an account exists
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.security import decode_access_token, verify_password

SIGNUP_URL = "/api/auth/signup"
LOGIN_URL = "/api/auth/login"


def signup(client: TestClient, **overrides):
    body = {"username": "alice1", "email": "a@x.com", "password": "Secret12"}
    body.update(overrides)
    return client.post(SIGNUP_URL, json=body)


def error_fields(response) -> set[str]:
    return {error["field"] for error in response.json()["errors"]}


class TestSignup:
    """Tests for POST /api/auth/signup"""

    def test_signup_success(self, client: TestClient):
        response = signup(client)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()

        assert data["user"]["username"] == "alice1"
        assert data["user"]["email"] == "a@x.com"
        assert "id" in data["user"]
        assert "createdAt" in data["user"]
        assert "updatedAt" in data["user"]
        assert data["token"]

    def test_signup_token_identifies_new_user(self, client: TestClient):
        data = signup(client).json()

        payload = decode_access_token(data["token"])
        assert payload["sub"] == str(data["user"]["id"])

    def test_password_never_returned(self, client: TestClient):
        response = signup(client)

        body = response.text
        assert "Secret12" not in body
        assert "password" not in response.json()["user"]
        assert "hashedPassword" not in response.json()["user"]

    def test_password_stored_hashed(self, client: TestClient, db_session: Session):
        signup(client)

        user = db_session.execute(select(User).where(User.username == "alice1")).scalar_one()
        assert user.hashed_password != "Secret12"
        assert verify_password("Secret12", user.hashed_password)

    def test_register_alias(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"username": "carol", "email": "carol@example.com", "password": "Secret12"},
        )
        assert response.status_code == status.HTTP_201_CREATED

    def test_username_and_email_normalized(self, client: TestClient):
        response = signup(client, username="Alice_One", email="Alice@Example.COM")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["username"] == "alice_one"
        assert response.json()["user"]["email"] == "alice@example.com"


class TestSignupConflicts:
    """Duplicate usernames and emails."""

    def test_duplicate_username(self, client: TestClient, db_session: Session):
        signup(client)
        response = signup(client, email="other@x.com")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "User already exists"
        assert error_fields(response) == {"username"}

        count = db_session.scalar(select(func.count()).select_from(User))
        assert count == 1

    def test_duplicate_username_case_insensitive(self, client: TestClient):
        signup(client)
        response = signup(client, username="ALICE1", email="other@x.com")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert error_fields(response) == {"username"}

    def test_duplicate_email(self, client: TestClient):
        signup(client)
        response = signup(client, username="someone_else")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert error_fields(response) == {"email"}

    def test_duplicate_email_case_insensitive(self, client: TestClient):
        signup(client)
        response = signup(client, username="someone_else", email="A@X.COM")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert error_fields(response) == {"email"}

    def test_duplicate_both(self, client: TestClient):
        signup(client)
        response = signup(client)

        assert error_fields(response) == {"username", "email"}


class TestSignupValidation:
    """Field validation on signup bodies."""

    @pytest.mark.parametrize(
        "username",
        ["ab", "a" * 21, "has space", "dash-name", "émile", "alice\n", "alice1\n"],
    )
    def test_invalid_username(self, client: TestClient, username: str):
        response = signup(client, username=username)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Validation failed"
        assert "username" in error_fields(response)

    @pytest.mark.parametrize(
        "email",
        ["", "plainaddress", "a@b", "a b@x.com", "@x.com", "a@x.com\nb"],
    )
    def test_invalid_email(self, client: TestClient, email: str):
        response = signup(client, email=email)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "email" in error_fields(response)

    @pytest.mark.parametrize(
        ("password", "reason"),
        [
            ("Sh0rt", "at least 8"),
            ("alllowercase1", "uppercase"),
            ("ALLUPPERCASE1", "lowercase"),
            ("NoDigitsHere", "number"),
        ],
    )
    def test_weak_password(self, client: TestClient, password: str, reason: str):
        response = signup(client, password=password)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        errors = response.json()["errors"]
        assert [e["field"] for e in errors] == ["password"]
        assert reason in errors[0]["message"]

    def test_missing_fields(self, client: TestClient):
        response = client.post(SIGNUP_URL, json={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert error_fields(response) == {"username", "email", "password"}

    def test_long_password_accepted(self, client: TestClient):
        """No upper bound on length; the full password logs in afterwards."""
        password = "Secret12" * 10

        response = signup(client, password=password)
        assert response.status_code == status.HTTP_201_CREATED

        login = client.post(LOGIN_URL, json={"username": "alice1", "password": password})
        assert login.status_code == status.HTTP_200_OK

    def test_stored_username_has_no_trailing_newline(self, client: TestClient, db_session: Session):
        signup(client, username="alice\n")

        count = db_session.scalar(select(func.count()).select_from(User))
        assert count == 0


class TestLogin:
    """Tests for POST /api/auth/login"""

    def test_login_with_username(self, client: TestClient, sample_user: User):
        response = client.post(LOGIN_URL, json={"username": "alice1", "password": "Secret12"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["user"]["id"] == sample_user.id
        assert decode_access_token(data["token"])["sub"] == str(sample_user.id)

    def test_login_with_email_any_case(self, client: TestClient, sample_user: User):
        response = client.post(LOGIN_URL, json={"username": "A@X.com", "password": "Secret12"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["username"] == "alice1"

    def test_signin_alias(self, client: TestClient, sample_user: User):
        response = client.post("/api/auth/signin", json={"username": "alice1", "password": "Secret12"})
        assert response.status_code == status.HTTP_200_OK

    def test_signup_then_login(self, client: TestClient):
        """Registering and logging in with the same credentials yields the same user id."""
        created = signup(client, username="dave_99", email="dave@example.com").json()

        response = client.post(LOGIN_URL, json={"username": "dave_99", "password": "Secret12"})

        assert response.status_code == status.HTTP_200_OK
        token = response.json()["token"]
        assert decode_access_token(token)["sub"] == str(created["user"]["id"])

    def test_wrong_password_and_unknown_user_look_the_same(
        self,
        client: TestClient,
        sample_user: User,
    ):
        wrong_password = client.post(LOGIN_URL, json={"username": "alice1", "password": "Wrong123"})
        unknown_user = client.post(LOGIN_URL, json={"username": "nobody", "password": "Secret12"})

        assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
        assert unknown_user.status_code == status.HTTP_401_UNAUTHORIZED
        assert wrong_password.json() == unknown_user.json()
        assert wrong_password.json()["message"] == "Invalid credentials"

    def test_login_missing_password(self, client: TestClient):
        response = client.post(LOGIN_URL, json={"username": "alice1"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert error_fields(response) == {"password"}


class TestCurrentUser:
    """Tests for GET /api/auth/me"""

    def test_me(self, client: TestClient, sample_user: User, auth_headers: dict):
        response = client.get("/api/auth/me", headers=auth_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["username"] == "alice1"
        assert "hashedPassword" not in response.json()

    def test_me_without_token(self, client: TestClient):
        response = client.get("/api/auth/me")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["www-authenticate"] == "Bearer"
        assert error_fields(response) == {"authorization"}
