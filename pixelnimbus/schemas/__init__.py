"""Convenience exports for schema layer."""
from .auth import AuthResponse, SignInRequest, SignUpRequest, SuccessResponse, UserProfileResponse
from .images import (
    ImageContext,
    ImageDetailsMetadata,
    ImageDetailsResponse,
    ImageMetadata,
    ImageProcessingOptions,
    ImageUploadResponse,
    ImageUrls,
)
from .videos import ProcessingSummary, VideoResponse, VideoUploadResponse

__all__ = [
    "AuthResponse",
    "SignInRequest",
    "SignUpRequest",
    "SuccessResponse",
    "UserProfileResponse",
    "ImageContext",
    "ImageDetailsMetadata",
    "ImageDetailsResponse",
    "ImageMetadata",
    "ImageProcessingOptions",
    "ImageUploadResponse",
    "ImageUrls",
    "ProcessingSummary",
    "VideoResponse",
    "VideoUploadResponse",
]
