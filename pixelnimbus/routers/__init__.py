"""Aggregate router exports."""
from .auth import router as auth_router
from .images import router as images_router
from .videos import router as videos_router
from .webhook import router as webhook_router

__all__ = ["auth_router", "images_router", "videos_router", "webhook_router"]
