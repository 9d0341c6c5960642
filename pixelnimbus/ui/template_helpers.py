"""Jinja2 rendering for the dashboard pages."""
from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from pixelnimbus.config import get_settings
from .components import cards, layout

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.globals["components"] = {"cards": cards, "layout": layout}


def page_context(request: Request, **values: Any) -> dict[str, Any]:
    """Defaults every page template relies on, overridden by ``values``.

    ``signed_in`` mirrors the access gate's identity result so the navbar
    matches what the gate decided for this request.
    """

    context: dict[str, Any] = {
        "app_name": get_settings().app_name,
        "page_title": "",
        "active_nav": None,
        "signed_in": getattr(request.state, "user_id", None) is not None,
    }
    context.update(values)
    return context


def render_template(request: Request, template_name: str, context: dict[str, Any] | None = None) -> Response:
    return templates.TemplateResponse(request, template_name, page_context(request, **(context or {})))


__all__ = ["page_context", "render_template", "templates"]
