"""Image validation, preprocessing and upload."""
from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from io import BytesIO
from uuid import UUID

from fastapi import UploadFile
from PIL import Image, ImageOps, UnidentifiedImageError

from ..constants import (
    ALLOWED_IMAGE_TYPES,
    IMAGE_FOLDER,
    MAX_IMAGE_DIMENSION,
    MAX_IMAGE_UPLOAD_BYTES,
    THUMBNAIL_FOLDER,
    THUMBNAIL_SIZE,
)
from ..schemas import (
    ImageContext,
    ImageDetailsMetadata,
    ImageDetailsResponse,
    ImageMetadata,
    ImageProcessingOptions,
    ImageUploadResponse,
    ImageUrls,
)
from .storage_service import (
    MediaHostDeletionError,
    MediaHostLookupError,
    MediaHostUploadError,
    build_public_url,
    delete_from_media_host,
    fetch_object_details,
    upload_to_media_host,
)
from .upload_validation import UploadValidationError, file_extension, measure_upload

logger = logging.getLogger(__name__)

SVG_TYPE = "image/svg+xml"

# Output encoders keyed by the requested format.
_ENCODERS: dict[str, tuple[str, str, str]] = {
    "auto": ("JPEG", "jpg", "image/jpeg"),
    "jpg": ("JPEG", "jpg", "image/jpeg"),
    "webp": ("WEBP", "webp", "image/webp"),
    "png": ("PNG", "png", "image/png"),
}


@dataclass(frozen=True)
class ProcessedImage:
    data: bytes
    width: int
    height: int
    format: str
    content_type: str


def validate_image_upload(file: UploadFile | None) -> int:
    """Check presence, size and MIME type; return the byte size."""

    if file is None or not (file.filename or "").strip():
        raise UploadValidationError("No file provided")
    size = measure_upload(file)
    if size > MAX_IMAGE_UPLOAD_BYTES:
        raise UploadValidationError(f"File size exceeds {MAX_IMAGE_UPLOAD_BYTES // (1024 * 1024)}MB limit")
    content_type = (file.content_type or "").strip().lower()
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadValidationError(f"Unsupported file type: {file.content_type}")
    return size


def _open_image(data: bytes) -> Image.Image:
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise UploadValidationError("Unable to read image data") from exc
    if image.width > MAX_IMAGE_DIMENSION or image.height > MAX_IMAGE_DIMENSION:
        raise UploadValidationError(
            f"Image dimensions exceed {MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    return image


def preprocess_image(data: bytes, content_type: str, options: ImageProcessingOptions) -> ProcessedImage:
    """Rotate, bound and re-encode ``data`` according to ``options``.

    SVG documents are vector data and pass through untouched. With optimization
    disabled the original bytes are kept and only the dimensions are read.
    """

    if content_type == SVG_TYPE:
        return ProcessedImage(data=data, width=0, height=0, format="svg", content_type=SVG_TYPE)

    image = _open_image(data)
    if not options.enable_optimization:
        source_format = (image.format or "").lower() or content_type.split("/")[-1]
        return ProcessedImage(
            data=data,
            width=image.width,
            height=image.height,
            format=source_format,
            content_type=content_type,
        )

    image = ImageOps.exif_transpose(image)
    # thumbnail() fits inside the box and never enlarges.
    image.thumbnail((options.max_width, options.max_height))

    encoder, extension, output_type = _ENCODERS[options.format]
    if encoder == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    buffer = BytesIO()
    save_kwargs: dict[str, object] = {"optimize": True}
    if encoder == "JPEG":
        save_kwargs.update(quality=options.quality, progressive=True)
    elif encoder == "WEBP":
        save_kwargs.update(quality=options.quality)
    image.save(buffer, format=encoder, **save_kwargs)

    return ProcessedImage(
        data=buffer.getvalue(),
        width=image.width,
        height=image.height,
        format=extension,
        content_type=output_type,
    )


def make_thumbnail(data: bytes) -> bytes:
    image = ImageOps.exif_transpose(_open_image(data))
    image.thumbnail(THUMBNAIL_SIZE)
    if image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    buffer = BytesIO()
    image.save(buffer, format="JPEG", quality=80, optimize=True)
    return buffer.getvalue()


def generate_unique_filename(user_id: UUID | str, extension: str) -> str:
    timestamp = int(time.time() * 1000)
    return f"{user_id}_{timestamp}_{secrets.token_hex(8)}.{extension}"


def transformations_applied(options: ImageProcessingOptions) -> list[str]:
    applied = ["Auto-quality optimization", "Progressive loading", "Format auto-detection", "Responsive sizing"]
    if options.enable_optimization:
        applied += ["Smart compression", "EXIF rotation"]
    return applied


async def upload_image(*, user_id: UUID, file: UploadFile, options: ImageProcessingOptions) -> ImageUploadResponse:
    """Validate, preprocess and forward an image to the media host."""

    started = time.monotonic()
    validate_image_upload(file)
    content_type = (file.content_type or "").strip().lower()
    original = await file.read()
    processed = preprocess_image(original, content_type, options)

    default_extension = file_extension(file.filename, "jpg")
    extension = processed.format if options.enable_optimization and processed.format != "svg" else default_extension
    filename = generate_unique_filename(user_id, extension)
    uploaded_on = datetime.now(timezone.utc).date().isoformat()

    thumbnail_url: str | None = None
    thumbnail_key: str | None = None
    if options.generate_thumbnail and processed.content_type != SVG_TYPE:
        thumbnail = make_thumbnail(processed.data)
        thumbnail_key = f"{THUMBNAIL_FOLDER}/{filename.rsplit('.', 1)[0]}.jpg"
        thumbnail_result = await upload_to_media_host(
            BytesIO(thumbnail),
            key=thumbnail_key,
            content_type="image/jpeg",
            size=len(thumbnail),
            metadata={"user-id": user_id},
        )
        thumbnail_url = thumbnail_result.url

    try:
        result = await upload_to_media_host(
            BytesIO(processed.data),
            key=f"{IMAGE_FOLDER}/{filename}",
            content_type=processed.content_type,
            size=len(processed.data),
            metadata={
                "user-id": user_id,
                "original-name": file.filename,
                "uploaded": uploaded_on,
                "width": processed.width,
                "height": processed.height,
                "format": processed.format,
                "thumbnail-key": thumbnail_key,
            },
        )
    except MediaHostUploadError:
        if thumbnail_key is not None:
            try:
                delete_from_media_host(thumbnail_key)
            except MediaHostDeletionError:
                logger.warning("Orphaned media host object %s", thumbnail_key)
        raise

    logger.info("Image processed in %.0fms", (time.monotonic() - started) * 1000)

    return ImageUploadResponse(
        public_id=result.key,
        secure_url=result.url,
        optimized_url=result.url,
        thumbnail_url=thumbnail_url,
        metadata=ImageMetadata(
            width=processed.width,
            height=processed.height,
            format=processed.format,
            size=len(original),
            processed_size=len(processed.data),
        ),
        transformations=transformations_applied(options),
    )


def _int_or_zero(value: str | None) -> int:
    try:
        return int(value or 0)
    except ValueError:
        return 0


async def get_image_details(public_id: str, *, user_id: UUID) -> ImageDetailsResponse:
    """Return stored metadata for an image owned by ``user_id``."""

    details = await fetch_object_details(public_id)
    owner = details.metadata.get("user-id")
    if owner != str(user_id):
        raise MediaHostLookupError("Image not found")

    thumbnail_key = details.metadata.get("thumbnail-key")
    return ImageDetailsResponse(
        public_id=details.key,
        metadata=ImageDetailsMetadata(
            width=_int_or_zero(details.metadata.get("width")),
            height=_int_or_zero(details.metadata.get("height")),
            format=details.metadata.get("format") or details.content_type.split("/")[-1],
            size=details.size,
            uploaded_at=details.last_modified.isoformat() if details.last_modified else None,
        ),
        urls=ImageUrls(
            original=details.url,
            thumbnail=build_public_url(thumbnail_key) if thumbnail_key else None,
        ),
        context=ImageContext(
            user_id=owner,
            original_name=details.metadata.get("original-name") or None,
            upload_date=details.metadata.get("uploaded"),
        ),
    )


__all__ = [
    "ProcessedImage",
    "validate_image_upload",
    "preprocess_image",
    "make_thumbnail",
    "generate_unique_filename",
    "transformations_applied",
    "upload_image",
    "get_image_details",
]
