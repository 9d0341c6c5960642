"""Public landing page."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ..template_helpers import render_template

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def landing(request: Request) -> HTMLResponse:
    return render_template(
        request,
        "landing.html",
        {
            "page_title": "Welcome",
            "active_nav": None,
        },
    )
