"""Convenience exports for service layer."""
from .auth_service import (
    authenticate_user,
    clear_session_cookie,
    create_access_token,
    decode_access_token,
    get_current_user,
    register_user,
    resolve_request_identity,
    set_session_cookie,
)
from .image_service import get_image_details, upload_image
from .storage_service import (
    MediaHostConfigurationError,
    MediaHostDeletionError,
    MediaHostLookupError,
    MediaHostUploadError,
)
from .upload_validation import UploadValidationError
from .video_service import (
    VideoNotFoundError,
    VideoPersistenceError,
    VideoProcessingOptions,
    delete_video_for_user,
    list_videos_for_user,
    parse_quality,
    upload_video,
)
from .webhook_service import SIGNATURE_HEADER, InvalidWebhookPayload, handle_notification, verify_webhook_signature

__all__ = [
    "authenticate_user",
    "clear_session_cookie",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "register_user",
    "resolve_request_identity",
    "set_session_cookie",
    "get_image_details",
    "upload_image",
    "MediaHostConfigurationError",
    "MediaHostDeletionError",
    "MediaHostLookupError",
    "MediaHostUploadError",
    "UploadValidationError",
    "VideoNotFoundError",
    "VideoPersistenceError",
    "VideoProcessingOptions",
    "delete_video_for_user",
    "list_videos_for_user",
    "parse_quality",
    "upload_video",
    "InvalidWebhookPayload",
    "handle_notification",
    "SIGNATURE_HEADER",
    "verify_webhook_signature",
]
