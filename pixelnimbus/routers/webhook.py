"""Inbound notifications from the media host."""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import get_session
from ..schemas import SuccessResponse
from ..services import SIGNATURE_HEADER, InvalidWebhookPayload, handle_notification, verify_webhook_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["webhook"])


@router.post("/webhook", response_model=SuccessResponse)
async def webhook_endpoint(request: Request, db: Session = Depends(get_session)) -> SuccessResponse:
    body = await request.body()

    signing_secret = get_settings().media_host_webhook_secret
    if not signing_secret:
        logger.error("MEDIA_HOST_WEBHOOK_SECRET is not configured")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook signing disabled")

    if not verify_webhook_signature(body, request.headers.get(SIGNATURE_HEADER), signing_secret):
        logger.warning("Rejected webhook with a missing or invalid signature")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid webhook signature")

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        logger.warning("Invalid webhook payload received")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid payload") from exc

    try:
        handle_notification(db, data)
    except InvalidWebhookPayload as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Webhook error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Webhook processing failed"
        ) from exc

    return SuccessResponse()
