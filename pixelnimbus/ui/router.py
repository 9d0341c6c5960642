"""Aggregate UI page routes into a single router."""
from __future__ import annotations

from fastapi import APIRouter

from .pages import auth, dashboard, landing, media

router = APIRouter(include_in_schema=False)

router.include_router(landing.router)
router.include_router(auth.router)
router.include_router(dashboard.router)
router.include_router(media.router)

__all__ = ["router"]
