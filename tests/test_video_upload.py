"""Integration tests for video upload, listing and deletion."""
from __future__ import annotations

from io import BytesIO
from typing import Iterator
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

from pixelnimbus.constants import MEGABYTE
from pixelnimbus.database import Base, SessionLocal, engine
from pixelnimbus.main import app
from pixelnimbus.models import User, Video
from pixelnimbus.services import create_access_token, storage_service, video_service
from pixelnimbus.services.storage_service import MediaHostUploadError, MediaHostUploadResult

_MEDIA_HOST_ENV = {
    "MEDIA_HOST_KEY": "key",
    "MEDIA_HOST_SECRET": "secret",
    "MEDIA_HOST_REGION": "nyc3",
    "MEDIA_HOST_BUCKET": "bucket",
    "MEDIA_HOST_ENDPOINT": "https://nyc3.media.test",
}


@pytest.fixture(scope="module", autouse=True)
def _create_schema() -> Iterator[None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def _clean_database(monkeypatch) -> Iterator[None]:
    """Remove persisted rows and reset cached media host configuration between tests."""

    with SessionLocal() as session:
        session.execute(delete(Video))
        session.execute(delete(User))
        session.commit()

    for name, value in _MEDIA_HOST_ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.delenv("MEDIA_HOST_PUBLIC_URL", raising=False)
    storage_service.load_media_host_config.cache_clear()
    storage_service.get_media_host_client.cache_clear()
    yield
    storage_service.load_media_host_config.cache_clear()
    storage_service.get_media_host_client.cache_clear()


def _make_user(label: str) -> User:
    with SessionLocal() as session:
        user = User(email=f"{label}-{uuid4().hex[:8]}@example.com", name=label, hashed_password="not-a-real-hash")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def _auth(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def fake_media_host(monkeypatch) -> list[dict]:
    """Record uploads instead of talking to the media host."""

    calls: list[dict] = []

    async def _fake_upload(fileobj, *, key, content_type, size, metadata=None, client=None):
        calls.append({"key": key, "content_type": content_type, "size": size, "metadata": dict(metadata or {})})
        return MediaHostUploadResult(
            key=key,
            url=f"https://cdn.media.test/{key}",
            bucket="bucket",
            content_type=content_type,
            size=size,
        )

    monkeypatch.setattr(video_service, "upload_to_media_host", _fake_upload)
    return calls


def _video_form(**overrides) -> dict[str, str]:
    form = {
        "title": "Holiday",
        "description": "Beach day",
        "originalSize": "2048",
        "quality": "high",
        "enableEnhancement": "true",
        "generateThumbnail": "false",
        "analyzeContent": "true",
    }
    form.update(overrides)
    return form


def test_upload_stores_video_and_reports_processing(fake_media_host) -> None:
    user = _make_user("uploader")
    payload = b"\x00" * 1024

    with TestClient(app) as client:
        response = client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(duration="12.5"),
            files={"file": ("clip.mp4", BytesIO(payload), "video/mp4")},
        )

    assert response.status_code == 200, response.text
    body = response.json()
    data = body["data"]
    assert data["title"] == "Holiday"
    assert data["description"] == "Beach day"
    assert data["originalSize"] == 2048
    assert data["compressedSize"] == len(payload)
    assert data["duration"] == 12.5
    assert data["userId"] == str(user.id)
    assert data["publicId"].startswith(f"videos/{user.id}/")
    assert data["publicId"].endswith(".mp4")
    assert data["metadata"]["processingOptions"]["quality"] == "high"

    assert body["processing"] == {
        "aiEnhanced": True,
        "quality": "high",
        "thumbnailGenerated": False,
        "contentAnalyzed": True,
        "compressionApplied": False,
        "sizeReduction": "50.0",
    }

    assert len(fake_media_host) == 1
    upload = fake_media_host[0]
    assert upload["content_type"] == "video/mp4"
    assert upload["metadata"]["title"] == "Holiday"
    assert upload["metadata"]["user-id"] == user.id

    with SessionLocal() as session:
        stored = session.get(Video, UUID(data["id"]))
        assert stored is not None
        assert stored.user_id == user.id


def test_upload_without_reported_size_uses_actual_size(fake_media_host) -> None:
    user = _make_user("sizeless")

    with TestClient(app) as client:
        response = client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(originalSize="not-a-number"),
            files={"file": ("clip.mov", BytesIO(b"\x01" * 512), "video/quicktime")},
        )

    assert response.status_code == 200, response.text
    assert response.json()["data"]["originalSize"] == 512
    assert response.json()["processing"]["sizeReduction"] == "0.0"


@pytest.mark.parametrize(
    ("form", "files", "message"),
    [
        (_video_form(), None, "File not found"),
        (_video_form(), {"file": ("notes.txt", BytesIO(b"hello"), "text/plain")}, "File must be a video"),
        (_video_form(title="  "), {"file": ("clip.mp4", BytesIO(b"\x00"), "video/mp4")}, "Title is required"),
        (
            _video_form(quality="ultra"),
            {"file": ("clip.mp4", BytesIO(b"\x00"), "video/mp4")},
            "Quality must be one of: auto, high, medium, low",
        ),
    ],
)
def test_upload_validation_errors(fake_media_host, form, files, message) -> None:
    user = _make_user("invalid")

    with TestClient(app) as client:
        response = client.post("/api/video-upload", headers=_auth(user), data=form, files=files)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    assert fake_media_host == []


def test_upload_rejects_videos_over_the_size_limit(fake_media_host, monkeypatch) -> None:
    monkeypatch.setattr(video_service, "MAX_VIDEO_UPLOAD_BYTES", 1024 * 1024)
    user = _make_user("oversized")

    with TestClient(app) as client:
        response = client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * (1024 * 1024 + 1)), "video/mp4")},
        )

    assert response.status_code == 400
    assert response.json() == {"error": "File size exceeds 1MB limit"}
    assert fake_media_host == []


def test_upload_reports_media_host_failure(monkeypatch) -> None:
    user = _make_user("unlucky")

    async def _failing_upload(*args, **kwargs):
        raise MediaHostUploadError("Upload to media host failed")

    monkeypatch.setattr(video_service, "upload_to_media_host", _failing_upload)

    with TestClient(app) as client:
        response = client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * 16), "video/mp4")},
        )

    assert response.status_code == 502
    assert response.json() == {"error": "Upload failed: Upload to media host failed"}
    with SessionLocal() as session:
        assert session.query(Video).count() == 0


def test_upload_requires_media_host_configuration(monkeypatch) -> None:
    user = _make_user("unconfigured")
    monkeypatch.delenv("MEDIA_HOST_BUCKET", raising=False)
    storage_service.load_media_host_config.cache_clear()

    with TestClient(app) as client:
        response = client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * 16), "video/mp4")},
        )

    assert response.status_code == 500
    assert "MEDIA_HOST_BUCKET" in response.json()["error"]


def test_listing_returns_only_own_videos(fake_media_host) -> None:
    owner = _make_user("owner")
    other = _make_user("other")

    with TestClient(app) as client:
        for title in ("First", "Second"):
            client.post(
                "/api/video-upload",
                headers=_auth(owner),
                data=_video_form(title=title),
                files={"file": ("clip.mp4", BytesIO(b"\x00" * 8), "video/mp4")},
            )
        client.post(
            "/api/video-upload",
            headers=_auth(other),
            data=_video_form(title="Foreign"),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * 8), "video/mp4")},
        )

        response = client.get("/api/videos", headers=_auth(owner))

    assert response.status_code == 200
    assert sorted(video["title"] for video in response.json()) == ["First", "Second"]


def test_listing_without_credentials_passes_gate_but_is_rejected() -> None:
    with TestClient(app, follow_redirects=False) as client:
        response = client.get("/api/videos")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


def test_delete_is_limited_to_the_owner(fake_media_host, monkeypatch) -> None:
    owner = _make_user("keeper")
    intruder = _make_user("intruder")
    deleted_keys: list[str] = []
    monkeypatch.setattr(video_service, "delete_from_media_host", deleted_keys.append)

    with TestClient(app) as client:
        created = client.post(
            "/api/video-upload",
            headers=_auth(owner),
            data=_video_form(),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * 8), "video/mp4")},
        ).json()["data"]

        foreign = client.delete(f"/api/deletevideos/{created['id']}", headers=_auth(intruder))
        assert foreign.status_code == 404
        assert foreign.json() == {"error": "Video not found"}

        own = client.delete(f"/api/deletevideos/{created['id']}", headers=_auth(owner))
        assert own.status_code == 200
        assert own.json() == {"success": True}

        again = client.delete(f"/api/deletevideos/{created['id']}", headers=_auth(owner))
        assert again.status_code == 404

    assert deleted_keys == [created["publicId"]]


def test_dashboard_lists_uploaded_videos(fake_media_host) -> None:
    user = _make_user("viewer")

    with TestClient(app, follow_redirects=False) as client:
        client.post(
            "/api/video-upload",
            headers=_auth(user),
            data=_video_form(title="Sunset <timelapse>"),
            files={"file": ("clip.mp4", BytesIO(b"\x00" * 8), "video/mp4")},
        )
        page = client.get("/home", headers=_auth(user))

    assert page.status_code == 200
    assert "Sunset &lt;timelapse&gt;" in page.text
    assert "https://nyc3.media.test/bucket/videos/" in page.text


@pytest.mark.parametrize(
    ("size", "compressed", "eager"),
    [
        (MEGABYTE, False, None),
        (5 * MEGABYTE, True, [{"format": "mp4", "quality": "auto:good"}]),
        (50 * MEGABYTE, True, 2),
    ],
)
def test_compression_profile_tiers(size, compressed, eager) -> None:
    profile = video_service.compression_profile(size)

    if eager is None:
        assert profile.transformation == [{"fetch_format": "auto"}]
        assert profile.eager is None
        assert not profile.eager_async
    elif isinstance(eager, int):
        assert profile.transformation[0] == {"quality": "auto:low"}
        assert len(profile.eager) == eager
        assert profile.eager[0]["bit_rate"] == "1000k"
    else:
        assert profile.eager == eager
        assert profile.eager_async
    assert (size >= 2 * MEGABYTE) is compressed


def test_size_reduction_formatting() -> None:
    assert video_service.size_reduction(1000, 250) == "75.0"
    assert video_service.size_reduction(1000, 1200) == "-20.0"
    assert video_service.size_reduction(0, 10) == "0.0"
