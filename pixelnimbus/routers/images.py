"""Image upload and metadata endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError

from ..models import User
from ..schemas import ImageDetailsResponse, ImageProcessingOptions, ImageUploadResponse
from ..services import (
    MediaHostConfigurationError,
    MediaHostLookupError,
    MediaHostUploadError,
    UploadValidationError,
    get_current_user,
    get_image_details,
    upload_image,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["images"])


@router.post("/image-upload", response_model=ImageUploadResponse)
async def upload_image_endpoint(
    file: UploadFile | None = File(default=None),
    options: str | None = Form(default=None),
    current_user: User = Depends(get_current_user),
) -> ImageUploadResponse:
    try:
        processing = ImageProcessingOptions.model_validate_json(options or "{}")
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid processing options") from exc

    try:
        return await upload_image(user_id=current_user.id, file=file, options=processing)
    except UploadValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except MediaHostConfigurationError as exc:
        logger.error("Media host is not configured: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except MediaHostUploadError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc


@router.get("/image-upload", response_model=ImageDetailsResponse)
async def image_details_endpoint(
    public_id: str | None = Query(default=None, alias="publicId"),
    current_user: User = Depends(get_current_user),
) -> ImageDetailsResponse:
    if not public_id or not public_id.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File ID required")

    try:
        return await get_image_details(public_id.strip(), user_id=current_user.id)
    except MediaHostLookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Failed to fetch image metadata") from exc
    except MediaHostConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
