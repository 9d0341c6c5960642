"""Video upload, listing and deletion endpoints."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import ProcessingSummary, SuccessResponse, VideoResponse, VideoUploadResponse
from ..services import (
    MediaHostConfigurationError,
    MediaHostUploadError,
    UploadValidationError,
    VideoNotFoundError,
    VideoPersistenceError,
    VideoProcessingOptions,
    delete_video_for_user,
    get_current_user,
    list_videos_for_user,
    parse_quality,
    upload_video,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["videos"])


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() == "true"


@router.get("/videos", response_model=list[VideoResponse])
async def list_videos_endpoint(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[VideoResponse]:
    return [VideoResponse.model_validate(video) for video in list_videos_for_user(db, current_user.id)]


@router.post("/video-upload", response_model=VideoUploadResponse)
async def upload_video_endpoint(
    file: UploadFile | None = File(default=None),
    title: str | None = Form(default=None),
    description: str | None = Form(default=None),
    original_size: str | None = Form(default=None, alias="originalSize"),
    enable_enhancement: str | None = Form(default=None, alias="enableEnhancement"),
    quality: str | None = Form(default=None),
    generate_thumbnail: str | None = Form(default=None, alias="generateThumbnail"),
    analyze_content: str | None = Form(default=None, alias="analyzeContent"),
    duration: float | None = Form(default=None, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> VideoUploadResponse:
    """Forward a video to the media host and persist its description.

    Validation problems answer 400, media host failures 502 and configuration
    or persistence failures 500.
    """

    try:
        options = VideoProcessingOptions(
            enable_enhancement=_flag(enable_enhancement),
            quality=parse_quality(quality),
            generate_thumbnail=_flag(generate_thumbnail),
            analyze_content=_flag(analyze_content),
        )
        outcome = await upload_video(
            db,
            user_id=current_user.id,
            file=file,
            title=title,
            description=description,
            original_size=original_size,
            options=options,
            duration=duration,
        )
    except UploadValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except MediaHostConfigurationError as exc:
        logger.error("Media host is not configured: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except MediaHostUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Upload failed: {exc}") from exc
    except VideoPersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Upload failed: {exc}") from exc

    return VideoUploadResponse(
        data=VideoResponse.model_validate(outcome.video),
        processing=ProcessingSummary(
            ai_enhanced=options.enable_enhancement,
            quality=options.quality,
            thumbnail_generated=options.generate_thumbnail,
            content_analyzed=options.analyze_content,
            compression_applied=outcome.compression_applied,
            size_reduction=outcome.size_reduction,
        ),
    )


@router.delete("/deletevideos/{video_id}", response_model=SuccessResponse)
async def delete_video_endpoint(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> SuccessResponse:
    try:
        delete_video_for_user(db, current_user.id, video_id)
    except VideoNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except VideoPersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return SuccessResponse()
