"""Schemas for video uploads and listings."""
from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class VideoResponse(BaseModel):
    """A persisted video row as rendered by the API."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    title: str
    description: str
    public_id: str = Field(..., alias="publicId")
    original_size: int = Field(..., alias="originalSize")
    compressed_size: int = Field(..., alias="compressedSize")
    duration: float
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias=AliasChoices("processing_metadata", "metadata")
    )
    user_id: UUID = Field(..., alias="userId")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")


class ProcessingSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ai_enhanced: bool = Field(..., alias="aiEnhanced")
    quality: str
    thumbnail_generated: bool = Field(..., alias="thumbnailGenerated")
    content_analyzed: bool = Field(..., alias="contentAnalyzed")
    compression_applied: bool = Field(..., alias="compressionApplied")
    size_reduction: str = Field(..., alias="sizeReduction")


class VideoUploadResponse(BaseModel):
    data: VideoResponse
    processing: ProcessingSummary


__all__ = ["VideoResponse", "ProcessingSummary", "VideoUploadResponse"]
