"""Integration tests for sign-up, sign-in and the session cookie."""
from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

from pixelnimbus.config import get_settings
from pixelnimbus.database import Base, SessionLocal, engine
from pixelnimbus.main import app
from pixelnimbus.models import User, Video


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    with SessionLocal() as session:
        session.execute(delete(Video))
        session.execute(delete(User))
        session.commit()
    yield


def _sign_up(client: TestClient, email: str, password: str = "password123", name: str | None = "Ada") -> dict:
    response = client.post("/api/auth/sign-up", json={"email": email, "password": password, "name": name})
    assert response.status_code == 201, response.text
    return response.json()


def test_sign_up_sets_session_cookie_and_returns_token() -> None:
    with TestClient(app, follow_redirects=False) as client:
        body = _sign_up(client, "ada@example.com")

        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert client.cookies.get(get_settings().auth_cookie_name)

        me = client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "ada@example.com"
        assert me.json()["name"] == "Ada"


def test_duplicate_email_is_rejected_case_insensitively() -> None:
    with TestClient(app) as client:
        _sign_up(client, "grace@example.com")
        client.cookies.clear()

        response = client.post(
            "/api/auth/sign-up",
            json={"email": "Grace@Example.com", "password": "password123"},
        )

    assert response.status_code == 409
    assert response.json() == {"error": "Email already registered"}


def test_sign_in_with_bad_password_is_rejected() -> None:
    with TestClient(app) as client:
        _sign_up(client, "linus@example.com")
        client.cookies.clear()

        response = client.post("/api/auth/sign-in", json={"email": "linus@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid credentials"}


def test_sign_in_then_bearer_token_reaches_protected_api() -> None:
    with TestClient(app) as client:
        _sign_up(client, "barbara@example.com")
        client.cookies.clear()

        signed_in = client.post(
            "/api/auth/sign-in", json={"email": "barbara@example.com", "password": "password123"}
        )
        assert signed_in.status_code == 200
        token = signed_in.json()["access_token"]
        client.cookies.clear()

        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == 200
    assert me.json()["email"] == "barbara@example.com"


def test_signed_in_user_is_sent_away_from_auth_pages() -> None:
    with TestClient(app, follow_redirects=False) as client:
        _sign_up(client, "ken@example.com")

        sign_in_page = client.get("/sign-in")
        sign_up_page = client.get("/sign-up")
        root = client.get("/")

    for response in (sign_in_page, sign_up_page, root):
        assert response.status_code == 307
        assert response.headers["location"] == "/home"


def test_sign_out_clears_the_session() -> None:
    with TestClient(app, follow_redirects=False) as client:
        _sign_up(client, "margaret@example.com")

        response = client.post("/api/auth/sign-out")
        assert response.status_code == 200
        assert response.json() == {"success": True}

        dashboard = client.get("/home")

    assert dashboard.status_code == 307
    assert dashboard.headers["location"] == "/sign-in"


def test_invalid_sign_up_payload_uses_error_shape() -> None:
    with TestClient(app) as client:
        response = client.post("/api/auth/sign-up", json={"email": "not-an-email", "password": "short"})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Invalid request"
    assert body["details"]


def test_sign_in_page_renders_for_visitors() -> None:
    with TestClient(app, follow_redirects=False) as client:
        response = client.get("/sign-in")

    assert response.status_code == 200
    assert "sign-in-form" in response.text
