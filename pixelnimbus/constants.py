"""Project-wide constant values."""
from __future__ import annotations

MEGABYTE = 1024 * 1024

MAX_VIDEO_UPLOAD_BYTES = 500 * MEGABYTE
VIDEO_UPLOAD_CHUNK_BYTES = 6 * MEGABYTE
VIDEO_QUALITY_CHOICES = ("auto", "high", "medium", "low")

# Size thresholds selecting the compression profile requested from the media host.
LIGHT_COMPRESSION_LIMIT_BYTES = 2 * MEGABYTE
BALANCED_COMPRESSION_LIMIT_BYTES = 10 * MEGABYTE

MAX_IMAGE_UPLOAD_BYTES = 50 * MEGABYTE
MAX_IMAGE_DIMENSION = 8000
ALLOWED_IMAGE_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/webp",
        "image/gif",
        "image/svg+xml",
        "image/tiff",
    }
)
THUMBNAIL_SIZE = (300, 300)

VIDEO_FOLDER = "videos"
IMAGE_FOLDER = "images/users"
THUMBNAIL_FOLDER = "images/thumbnails"

SOCIAL_FORMATS: dict[str, dict[str, int | str]] = {
    "Instagram Square (1:1)": {"width": 1080, "height": 1080, "aspect_ratio": "1:1"},
    "Instagram Portrait (4:5)": {"width": 1080, "height": 1350, "aspect_ratio": "4:5"},
    "Twitter Post (16:9)": {"width": 1200, "height": 675, "aspect_ratio": "16:9"},
    "Twitter Header (3:1)": {"width": 1500, "height": 500, "aspect_ratio": "3:1"},
    "Facebook Cover (205:78)": {"width": 820, "height": 312, "aspect_ratio": "205:78"},
}

UNAUTHORIZED_DETAIL = "Unauthorized"

__all__ = [
    "MEGABYTE",
    "MAX_VIDEO_UPLOAD_BYTES",
    "VIDEO_UPLOAD_CHUNK_BYTES",
    "VIDEO_QUALITY_CHOICES",
    "LIGHT_COMPRESSION_LIMIT_BYTES",
    "BALANCED_COMPRESSION_LIMIT_BYTES",
    "MAX_IMAGE_UPLOAD_BYTES",
    "MAX_IMAGE_DIMENSION",
    "ALLOWED_IMAGE_TYPES",
    "THUMBNAIL_SIZE",
    "VIDEO_FOLDER",
    "IMAGE_FOLDER",
    "THUMBNAIL_FOLDER",
    "SOCIAL_FORMATS",
    "UNAUTHORIZED_DETAIL",
]
