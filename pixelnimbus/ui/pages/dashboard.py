"""Signed-in dashboard listing the user's videos."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from pixelnimbus.database import get_session
from pixelnimbus.services import list_videos_for_user
from pixelnimbus.services.storage_service import MediaHostConfigurationError, build_public_url

from ..template_helpers import render_template

logger = logging.getLogger(__name__)

router = APIRouter()


def _preview_url(public_id: str) -> str | None:
    try:
        return build_public_url(public_id)
    except MediaHostConfigurationError:
        return None


@router.get("/home", response_class=HTMLResponse)
async def home(request: Request, db: Session = Depends(get_session)) -> HTMLResponse:
    """Render the video library for the signed-in user."""

    user_id = getattr(request.state, "user_id", None)
    videos = list_videos_for_user(db, user_id) if user_id is not None else []
    entries = [(video, _preview_url(video.public_id)) for video in videos]
    logger.debug("Rendering %d videos on dashboard for %s", len(entries), user_id)

    return render_template(
        request,
        "home.html",
        {
            "page_title": "Your videos",
            "active_nav": "/home",
            "videos": entries,
        },
    )
