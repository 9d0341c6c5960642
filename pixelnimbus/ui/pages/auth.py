"""Authentication related pages."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ..template_helpers import render_template

router = APIRouter()


@router.get("/sign-in", response_class=HTMLResponse)
async def sign_in(request: Request) -> HTMLResponse:
    return render_template(
        request,
        "sign_in.html",
        {
            "page_title": "Sign in",
            "active_nav": None,
        },
    )


@router.get("/sign-up", response_class=HTMLResponse)
async def sign_up(request: Request) -> HTMLResponse:
    return render_template(
        request,
        "sign_up.html",
        {
            "page_title": "Create account",
            "active_nav": None,
        },
    )
