"""Notifications pushed by the media host once asynchronous work finishes."""
from __future__ import annotations

import hashlib
import hmac
import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import Video

logger = logging.getLogger(__name__)

RECORDED_NOTIFICATIONS = {"eager", "moderation"}
SIGNATURE_HEADER = "X-PixelNimbus-Signature"


class InvalidWebhookPayload(ValueError):
    """Raised when the webhook body is not an object with a notification type."""


def sign_webhook_body(body: bytes, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), msg=body, digestmod=hashlib.sha256).hexdigest()


def verify_webhook_signature(body: bytes, signature: str | None, secret: str) -> bool:
    """Check the hex HMAC-SHA256 of the raw request body."""

    if not signature:
        return False
    expected = sign_webhook_body(body, secret).encode("ascii")
    return hmac.compare_digest(expected, signature.strip().lower().encode("utf-8"))


def _find_video(db: Session, payload: dict[str, Any]) -> Video | None:
    public_id = payload.get("public_id") or payload.get("key")
    if not isinstance(public_id, str) or not public_id:
        return None
    return db.scalar(select(Video).where(Video.public_id == public_id))


def handle_notification(db: Session, data: Any) -> str:
    """Log a media host notification and attach it to the matching video.

    Returns the notification type that was processed.
    """

    if not isinstance(data, dict):
        logger.warning("Invalid webhook payload received")
        raise InvalidWebhookPayload("Invalid payload")

    notification_type = data.get("notification_type")
    if not isinstance(notification_type, str):
        raise InvalidWebhookPayload("Missing or invalid notification type")

    rest = {name: value for name, value in data.items() if name != "notification_type"}

    if notification_type not in RECORDED_NOTIFICATIONS:
        logger.warning("Unknown webhook event received: %s", notification_type)
        return notification_type

    if notification_type == "eager":
        logger.info("Video processing completed: %s", rest.get("public_id"))
    else:
        logger.info("Moderation result for %s: %s", rest.get("public_id"), rest.get("moderation_status"))

    video = _find_video(db, rest)
    if video is not None:
        metadata = dict(video.processing_metadata or {})
        metadata[notification_type] = rest
        video.processing_metadata = metadata
        db.commit()

    return notification_type


__all__ = [
    "InvalidWebhookPayload",
    "SIGNATURE_HEADER",
    "handle_notification",
    "sign_webhook_body",
    "verify_webhook_signature",
]
