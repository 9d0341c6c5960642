"""Tests for media host notifications."""
from __future__ import annotations

import json
from typing import Any, Iterator
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

from pixelnimbus.config import get_settings
from pixelnimbus.database import Base, SessionLocal, engine
from pixelnimbus.main import app
from pixelnimbus.models import User, Video
from pixelnimbus.services.webhook_service import SIGNATURE_HEADER, sign_webhook_body, verify_webhook_signature


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database() -> Iterator[None]:
    yield
    with SessionLocal() as session:
        session.execute(delete(Video))
        session.execute(delete(User))
        session.commit()


@pytest.fixture
def stored_video() -> Video:
    with SessionLocal() as session:
        user = User(email=f"hook-{uuid4().hex[:8]}@example.com", name="Hook", hashed_password="not-a-real-hash")
        session.add(user)
        session.flush()
        video = Video(
            user_id=user.id,
            title="Processed",
            description="",
            public_id=f"videos/{user.id}/{uuid4().hex}.mp4",
            original_size=100,
            compressed_size=80,
            processing_metadata={"compressionApplied": True},
        )
        session.add(video)
        session.commit()
        session.refresh(video)
        return video


def _signed_headers(body: bytes) -> dict[str, str]:
    secret = get_settings().media_host_webhook_secret
    return {"Content-Type": "application/json", SIGNATURE_HEADER: sign_webhook_body(body, secret)}


def _post_signed(client: TestClient, payload: Any = None, *, content: bytes | None = None):
    body = content if content is not None else json.dumps(payload).encode("utf-8")
    return client.post("/api/webhook", content=body, headers=_signed_headers(body))


def test_signature_check_accepts_only_the_matching_digest() -> None:
    body = b'{"notification_type": "eager"}'
    signature = sign_webhook_body(body, "secret")

    assert verify_webhook_signature(body, signature, "secret")
    assert verify_webhook_signature(body, signature.upper(), "secret")
    assert not verify_webhook_signature(body, signature, "other-secret")
    assert not verify_webhook_signature(body + b" ", signature, "secret")
    assert not verify_webhook_signature(body, None, "secret")
    assert not verify_webhook_signature(body, "", "secret")


def test_eager_notification_is_recorded_on_the_video(stored_video: Video) -> None:
    payload = {"notification_type": "eager", "public_id": stored_video.public_id, "eager": [{"format": "mp4"}]}

    with TestClient(app) as client:
        response = _post_signed(client, payload)

    assert response.status_code == 200
    assert response.json() == {"success": True}
    with SessionLocal() as session:
        video = session.get(Video, stored_video.id)
        assert video.processing_metadata["compressionApplied"] is True
        assert video.processing_metadata["eager"] == {
            "public_id": stored_video.public_id,
            "eager": [{"format": "mp4"}],
        }


def test_moderation_notification_is_recorded(stored_video: Video) -> None:
    payload = {
        "notification_type": "moderation",
        "public_id": stored_video.public_id,
        "moderation_status": "approved",
    }

    with TestClient(app) as client:
        response = _post_signed(client, payload)

    assert response.status_code == 200
    with SessionLocal() as session:
        video = session.get(Video, stored_video.id)
        assert video.processing_metadata["moderation"]["moderation_status"] == "approved"


@pytest.mark.parametrize(
    "signature",
    [None, "0" * 64, "not-hex"],
    ids=["unsigned", "forged", "garbage"],
)
def test_unverified_notifications_are_rejected_and_not_recorded(stored_video: Video, signature: str | None) -> None:
    body = json.dumps(
        {
            "notification_type": "moderation",
            "public_id": stored_video.public_id,
            "moderation_status": "rejected",
            "forged": True,
        }
    ).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers[SIGNATURE_HEADER] = signature

    with TestClient(app) as client:
        response = client.post("/api/webhook", content=body, headers=headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Invalid webhook signature"}
    with SessionLocal() as session:
        video = session.get(Video, stored_video.id)
        assert video.processing_metadata == {"compressionApplied": True}


def test_signature_for_another_body_is_rejected(stored_video: Video) -> None:
    signed = json.dumps({"notification_type": "eager", "public_id": "videos/other.mp4"}).encode("utf-8")
    sent = json.dumps({"notification_type": "eager", "public_id": stored_video.public_id}).encode("utf-8")

    with TestClient(app) as client:
        response = client.post("/api/webhook", content=sent, headers=_signed_headers(signed))

    assert response.status_code == 403
    with SessionLocal() as session:
        assert "eager" not in session.get(Video, stored_video.id).processing_metadata


def test_webhook_without_configured_secret_refuses_notifications(monkeypatch) -> None:
    monkeypatch.setattr(get_settings(), "media_host_webhook_secret", None)

    with TestClient(app) as client:
        response = client.post("/api/webhook", json={"notification_type": "eager"})

    assert response.status_code == 500
    assert response.json() == {"error": "Webhook signing disabled"}


def test_unknown_notification_is_acknowledged() -> None:
    with TestClient(app) as client:
        response = _post_signed(client, {"notification_type": "upload", "public_id": "nothing"})

    assert response.status_code == 200
    assert response.json() == {"success": True}


def test_notification_for_unknown_video_is_acknowledged() -> None:
    with TestClient(app) as client:
        response = _post_signed(client, {"notification_type": "eager", "public_id": "videos/missing.mp4"})

    assert response.status_code == 200


@pytest.mark.parametrize(
    ("content", "message"),
    [
        (b"{not json", "Invalid payload"),
        (b"[1, 2, 3]", "Invalid payload"),
        (b'{"public_id": "x"}', "Missing or invalid notification type"),
    ],
)
def test_malformed_payloads_are_rejected(content: bytes, message: str) -> None:
    with TestClient(app) as client:
        response = _post_signed(client, content=content)

    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_signed_webhook_needs_no_session() -> None:
    with TestClient(app, follow_redirects=False) as client:
        response = _post_signed(client, {"notification_type": "eager"})

    assert response.status_code == 200
