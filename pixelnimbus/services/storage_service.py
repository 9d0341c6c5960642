"""S3-compatible media host integration helpers."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import IO, Mapping
from urllib.parse import urlparse

from boto3.s3.transfer import TransferConfig
from boto3.session import Session
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from ..constants import VIDEO_UPLOAD_CHUNK_BYTES
from ..security.secrets import MissingSecretError, is_placeholder, missing_variables, require_secret

logger = logging.getLogger(__name__)

_REQUIRED_VARIABLES = (
    "MEDIA_HOST_KEY",
    "MEDIA_HOST_SECRET",
    "MEDIA_HOST_REGION",
    "MEDIA_HOST_BUCKET",
    "MEDIA_HOST_ENDPOINT",
)


@dataclass(frozen=True)
class MediaHostConfig:
    """Runtime configuration extracted from environment variables."""

    key: str
    secret: str
    region: str
    bucket: str
    api_endpoint: str
    public_endpoint: str


@dataclass(frozen=True)
class MediaHostUploadResult:
    """Metadata returned after uploading an object to the media host."""

    key: str
    url: str
    bucket: str
    content_type: str
    size: int


@dataclass(frozen=True)
class MediaObjectDetails:
    key: str
    url: str
    content_type: str
    size: int
    last_modified: datetime | None
    metadata: dict[str, str] = field(default_factory=dict)


class MediaHostConfigurationError(RuntimeError):
    """Raised when required media host settings are missing or invalid."""


class MediaHostUploadError(RuntimeError):
    """Raised when an upload to the media host fails."""


class MediaHostLookupError(RuntimeError):
    """Raised when an object cannot be found or read on the media host."""


class MediaHostDeletionError(RuntimeError):
    """Raised when deleting an object from the media host fails."""


def _with_scheme(endpoint: str) -> str:
    endpoint = endpoint.strip().rstrip("/")
    if not urlparse(endpoint).scheme:
        endpoint = f"https://{endpoint.lstrip(':/')}"
    return endpoint


@lru_cache(maxsize=1)
def load_media_host_config() -> MediaHostConfig:
    """Read and validate media host configuration from the environment."""

    missing = missing_variables(_REQUIRED_VARIABLES)
    if missing:
        raise MediaHostConfigurationError("Missing required media host configuration: " + ", ".join(missing))

    try:
        key = require_secret("MEDIA_HOST_KEY")
        secret = require_secret("MEDIA_HOST_SECRET")
    except MissingSecretError as exc:
        raise MediaHostConfigurationError(str(exc)) from exc

    region = os.environ["MEDIA_HOST_REGION"].strip()
    bucket = os.environ["MEDIA_HOST_BUCKET"].strip()
    api_endpoint = _with_scheme(os.environ["MEDIA_HOST_ENDPOINT"])
    if not urlparse(api_endpoint).netloc:
        raise MediaHostConfigurationError("MEDIA_HOST_ENDPOINT must include a hostname.")

    public_raw = os.getenv("MEDIA_HOST_PUBLIC_URL")
    if is_placeholder(public_raw):
        public_endpoint = f"{api_endpoint}/{bucket}"
    else:
        public_endpoint = _with_scheme(public_raw)

    return MediaHostConfig(
        key=key,
        secret=secret,
        region=region,
        bucket=bucket,
        api_endpoint=api_endpoint,
        public_endpoint=public_endpoint,
    )


@lru_cache(maxsize=1)
def get_media_host_client() -> BaseClient:
    """Create a singleton boto3 client for media host interactions."""

    config = load_media_host_config()
    session = Session()
    return session.client(
        "s3",
        region_name=config.region,
        endpoint_url=config.api_endpoint,
        aws_access_key_id=config.key,
        aws_secret_access_key=config.secret,
    )


def build_public_url(key: str) -> str:
    """Build the public URL for an object stored on the media host."""

    config = load_media_host_config()
    normalized_key = key.lstrip("/")
    endpoint = config.public_endpoint.rstrip("/")
    return f"{endpoint}/{normalized_key}" if normalized_key else endpoint


def _ascii_metadata(metadata: Mapping[str, object] | None) -> dict[str, str]:
    # S3 user metadata travels as HTTP headers and must be ASCII.
    cleaned: dict[str, str] = {}
    for name, value in (metadata or {}).items():
        if value is None:
            continue
        text = str(value).encode("ascii", "ignore").decode("ascii")
        cleaned[name.lower()] = text
    return cleaned


async def upload_to_media_host(
    fileobj: IO[bytes],
    *,
    key: str,
    content_type: str,
    size: int,
    metadata: Mapping[str, object] | None = None,
    client: BaseClient | None = None,
) -> MediaHostUploadResult:
    """Stream ``fileobj`` to the media host under ``key``."""

    config = load_media_host_config()
    s3_client = client or get_media_host_client()
    extra_args = {
        "ACL": "public-read",
        "ContentType": content_type,
        "Metadata": _ascii_metadata(metadata),
    }
    transfer = TransferConfig(
        multipart_threshold=VIDEO_UPLOAD_CHUNK_BYTES,
        multipart_chunksize=VIDEO_UPLOAD_CHUNK_BYTES,
    )

    def _upload() -> None:
        try:
            fileobj.seek(0)
            s3_client.upload_fileobj(fileobj, config.bucket, key, ExtraArgs=extra_args, Config=transfer)
        except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network errors hard to reproduce
            logger.exception("Upload to media host failed: %s", exc)
            raise MediaHostUploadError("Upload to media host failed") from exc

    await run_in_threadpool(_upload)

    return MediaHostUploadResult(
        key=key,
        url=build_public_url(key),
        bucket=config.bucket,
        content_type=content_type,
        size=size,
    )


async def fetch_object_details(key: str, *, client: BaseClient | None = None) -> MediaObjectDetails:
    """Return stored metadata for ``key`` without downloading the body."""

    config = load_media_host_config()
    s3_client = client or get_media_host_client()
    normalized_key = key.lstrip("/")

    def _head() -> dict:
        try:
            return s3_client.head_object(Bucket=config.bucket, Key=normalized_key)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("Metadata fetch failed for %s: %s", normalized_key, exc)
            raise MediaHostLookupError("Failed to fetch object metadata") from exc

    head = await run_in_threadpool(_head)
    return MediaObjectDetails(
        key=normalized_key,
        url=build_public_url(normalized_key),
        content_type=head.get("ContentType") or "application/octet-stream",
        size=int(head.get("ContentLength") or 0),
        last_modified=head.get("LastModified"),
        metadata={name.lower(): value for name, value in (head.get("Metadata") or {}).items()},
    )


def delete_from_media_host(key: str, *, client: BaseClient | None = None) -> None:
    """Remove an object from the media host."""

    if not key:
        return

    config = load_media_host_config()
    normalized_key = key.lstrip("/")
    s3_client = client or get_media_host_client()

    try:
        s3_client.delete_object(Bucket=config.bucket, Key=normalized_key)
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - network bound
        logger.exception("Failed to delete media host object %s", normalized_key)
        raise MediaHostDeletionError("Unable to delete media from storage") from exc


__all__ = [
    "MediaHostConfig",
    "MediaHostUploadResult",
    "MediaObjectDetails",
    "MediaHostConfigurationError",
    "MediaHostUploadError",
    "MediaHostLookupError",
    "MediaHostDeletionError",
    "load_media_host_config",
    "get_media_host_client",
    "build_public_url",
    "upload_to_media_host",
    "fetch_object_details",
    "delete_from_media_host",
]
