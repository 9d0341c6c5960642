"""Media tooling pages: video upload and social image sizing."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from pixelnimbus.constants import MAX_VIDEO_UPLOAD_BYTES, MEGABYTE, SOCIAL_FORMATS, VIDEO_QUALITY_CHOICES

from ..template_helpers import render_template

router = APIRouter()


@router.get("/video-upload", response_class=HTMLResponse)
async def video_upload(request: Request) -> HTMLResponse:
    return render_template(
        request,
        "video_upload.html",
        {
            "page_title": "Upload a video",
            "active_nav": "/video-upload",
            "max_upload_mb": MAX_VIDEO_UPLOAD_BYTES // MEGABYTE,
            "quality_choices": VIDEO_QUALITY_CHOICES,
        },
    )


@router.get("/social-share", response_class=HTMLResponse)
async def social_share(request: Request) -> HTMLResponse:
    """Render the social image formatter."""

    return render_template(
        request,
        "social_share.html",
        {
            "page_title": "Social share",
            "active_nav": "/social-share",
            "social_formats": SOCIAL_FORMATS,
        },
    )
