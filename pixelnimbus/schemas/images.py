"""Schemas for image uploads and metadata lookups."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImageProcessingOptions(BaseModel):
    """Client supplied preprocessing knobs, sent as a JSON form field."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    quality: int = Field(default=85, ge=1, le=100)
    format: Literal["auto", "webp", "jpg", "png"] = "auto"
    max_width: int = Field(default=2048, ge=1, alias="maxWidth")
    max_height: int = Field(default=2048, ge=1, alias="maxHeight")
    enable_optimization: bool = Field(default=True, alias="enableOptimization")
    generate_thumbnail: bool = Field(default=True, alias="generateThumbnail")


class ImageMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    width: int
    height: int
    format: str
    size: int
    processed_size: int | None = Field(default=None, alias="processedSize")


class ImageUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_id: str = Field(..., alias="publicId")
    secure_url: str = Field(..., alias="secureUrl")
    optimized_url: str = Field(..., alias="optimizedUrl")
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    metadata: ImageMetadata
    transformations: list[str]


class ImageDetailsMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    width: int
    height: int
    format: str
    size: int
    uploaded_at: str | None = Field(default=None, alias="uploadedAt")


class ImageUrls(BaseModel):
    original: str
    thumbnail: str | None = None


class ImageContext(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")
    original_name: str | None = Field(default=None, alias="originalName")
    upload_date: str | None = Field(default=None, alias="uploadDate")


class ImageDetailsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    public_id: str = Field(..., alias="publicId")
    metadata: ImageDetailsMetadata
    urls: ImageUrls
    context: ImageContext


__all__ = [
    "ImageProcessingOptions",
    "ImageMetadata",
    "ImageUploadResponse",
    "ImageDetailsMetadata",
    "ImageUrls",
    "ImageContext",
    "ImageDetailsResponse",
]
