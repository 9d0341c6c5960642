"""Video upload, listing and deletion."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any
from uuid import UUID, uuid4

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..constants import (
    BALANCED_COMPRESSION_LIMIT_BYTES,
    LIGHT_COMPRESSION_LIMIT_BYTES,
    MAX_VIDEO_UPLOAD_BYTES,
    VIDEO_FOLDER,
    VIDEO_QUALITY_CHOICES,
)
from ..models import Video
from .storage_service import MediaHostDeletionError, delete_from_media_host, upload_to_media_host
from .upload_validation import UploadValidationError, file_extension, format_megabytes, measure_upload

logger = logging.getLogger(__name__)


class VideoNotFoundError(LookupError):
    """Raised when a video does not exist or belongs to another user."""


class VideoPersistenceError(RuntimeError):
    """Raised when the video row cannot be written."""


@dataclass(frozen=True)
class VideoProcessingOptions:
    enable_enhancement: bool = False
    quality: str = "auto"
    generate_thumbnail: bool = False
    analyze_content: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "enableEnhancement": self.enable_enhancement,
            "quality": self.quality,
            "generateThumbnail": self.generate_thumbnail,
            "analyzeContent": self.analyze_content,
        }


@dataclass(frozen=True)
class CompressionProfile:
    """Transformation parameters requested from the media host."""

    transformation: list[dict[str, str]]
    eager: list[dict[str, str]] | None = None
    eager_async: bool = False

    def as_object_metadata(self) -> dict[str, str]:
        metadata = {
            "transformation": json.dumps(self.transformation, separators=(",", ":")),
            "eager-async": "true" if self.eager_async else "false",
        }
        if self.eager:
            metadata["eager"] = json.dumps(self.eager, separators=(",", ":"))
        return metadata


@dataclass
class VideoUploadOutcome:
    video: Video
    options: VideoProcessingOptions
    compression_applied: bool
    size_reduction: str


def parse_quality(raw: str | None) -> str:
    quality = (raw or "").strip().lower() or "auto"
    if quality not in VIDEO_QUALITY_CHOICES:
        raise UploadValidationError(f"Quality must be one of: {', '.join(VIDEO_QUALITY_CHOICES)}")
    return quality


def compression_profile(size_bytes: int) -> CompressionProfile:
    """Pick the compression request for a file of ``size_bytes``.

    Small files only get format negotiation because recompressing them tends to
    grow the output. Larger files trade quality for size more aggressively.
    """

    if size_bytes < LIGHT_COMPRESSION_LIMIT_BYTES:
        return CompressionProfile(transformation=[{"fetch_format": "auto"}])
    if size_bytes < BALANCED_COMPRESSION_LIMIT_BYTES:
        return CompressionProfile(
            transformation=[{"quality": "auto:good"}, {"fetch_format": "auto"}],
            eager=[{"format": "mp4", "quality": "auto:good"}],
            eager_async=True,
        )
    return CompressionProfile(
        transformation=[{"quality": "auto:low"}, {"fetch_format": "auto"}],
        eager=[
            {"format": "mp4", "quality": "auto:low", "bit_rate": "1000k"},
            {"format": "webm", "quality": "auto:low"},
        ],
        eager_async=True,
    )


def describe_processing(options: VideoProcessingOptions) -> dict[str, Any]:
    """Summarise the processing flags forwarded alongside the upload."""

    return {
        "quality": options.quality,
        "hasEnhancement": options.enable_enhancement,
        "hasThumbnail": options.generate_thumbnail,
        "hasContentAnalysis": options.analyze_content,
    }


def effective_original_size(raw: str | None, fallback: int) -> int:
    """Client reported size when it is numeric, otherwise ``fallback``."""

    try:
        value = int(float((raw or "").strip()))
    except (ValueError, OverflowError):
        return fallback
    return value if value >= 0 else fallback


def size_reduction(original: int, compressed: int) -> str:
    if original <= 0:
        return "0.0"
    return f"{(original - compressed) / original * 100:.1f}"


def validate_video_upload(file: UploadFile | None, title: str | None) -> int:
    """Validate the multipart fields and return the file size."""

    if file is None or not (file.filename or "").strip():
        raise UploadValidationError("File not found")
    if not (file.content_type or "").startswith("video/"):
        raise UploadValidationError("File must be a video")
    if not title or not title.strip():
        raise UploadValidationError("Title is required")
    size = measure_upload(file)
    if size > MAX_VIDEO_UPLOAD_BYTES:
        raise UploadValidationError(
            f"File size exceeds {MAX_VIDEO_UPLOAD_BYTES // (1024 * 1024)}MB limit"
        )
    return size


async def upload_video(
    db: Session,
    *,
    user_id: UUID,
    file: UploadFile,
    title: str | None,
    description: str | None,
    original_size: str | None,
    options: VideoProcessingOptions,
    duration: float | None = None,
) -> VideoUploadOutcome:
    """Forward the video to the media host and record it."""

    size = validate_video_upload(file, title)
    reported_size = effective_original_size(original_size, size)
    profile = compression_profile(size)
    compression_applied = size >= LIGHT_COMPRESSION_LIMIT_BYTES

    logger.info(
        "Uploading %s video (transformation=%d, eager=%s, eager_async=%s)",
        format_megabytes(size),
        len(profile.transformation),
        bool(profile.eager),
        profile.eager_async,
    )

    key = f"{VIDEO_FOLDER}/{user_id}/{uuid4().hex}.{file_extension(file.filename, 'mp4')}"
    started = time.monotonic()
    result = await upload_to_media_host(
        file.file,
        key=key,
        content_type=file.content_type or "video/mp4",
        size=size,
        metadata={"user-id": user_id, "title": title.strip(), **profile.as_object_metadata()},
    )

    reduction = size_reduction(reported_size, result.size)
    logger.info(
        "Video stored in %.0fms: %s -> %s (%s%% %s)",
        (time.monotonic() - started) * 1000,
        format_megabytes(reported_size),
        format_megabytes(result.size),
        reduction,
        "increase" if reduction.startswith("-") else "reduction",
    )

    video = Video(
        user_id=user_id,
        title=title.strip(),
        description=(description or "").strip(),
        public_id=result.key,
        original_size=reported_size,
        compressed_size=result.size,
        duration=duration or 0.0,
        processing_metadata={
            "processingOptions": options.as_dict(),
            "aiMetadata": describe_processing(options),
            "transformations": profile.transformation,
            "eager": profile.eager or [],
            "compressionApplied": compression_applied,
        },
    )

    try:
        db.add(video)
        db.commit()
        db.refresh(video)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Error saving video metadata")
        try:
            delete_from_media_host(result.key)
        except MediaHostDeletionError:
            logger.warning("Orphaned media host object %s", result.key)
        raise VideoPersistenceError(str(exc)) from exc

    return VideoUploadOutcome(
        video=video,
        options=options,
        compression_applied=compression_applied,
        size_reduction=reduction,
    )


def list_videos_for_user(db: Session, user_id: UUID) -> list[Video]:
    """Return videos uploaded by the specified user, newest first."""

    stmt = select(Video).where(Video.user_id == user_id).order_by(Video.created_at.desc())
    return list(db.scalars(stmt))


def delete_video_for_user(db: Session, user_id: UUID, video_id: UUID) -> None:
    """Delete the user's video row and, best effort, its stored object."""

    video = db.get(Video, video_id)
    if video is None or video.user_id != user_id:
        raise VideoNotFoundError("Video not found")

    public_id = video.public_id
    try:
        db.delete(video)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Delete failed for video %s", video_id)
        raise VideoPersistenceError("Failed to delete video") from exc

    try:
        delete_from_media_host(public_id)
    except Exception:
        logger.warning("Video %s deleted but storage object %s was not removed", video_id, public_id, exc_info=True)


__all__ = [
    "VideoNotFoundError",
    "VideoPersistenceError",
    "VideoProcessingOptions",
    "CompressionProfile",
    "VideoUploadOutcome",
    "parse_quality",
    "compression_profile",
    "describe_processing",
    "effective_original_size",
    "size_reduction",
    "validate_video_upload",
    "upload_video",
    "list_videos_for_user",
    "delete_video_for_user",
]
