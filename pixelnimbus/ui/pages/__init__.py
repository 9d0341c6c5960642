"""Export page routers for composition."""
from __future__ import annotations

from . import auth, dashboard, landing, media

__all__ = ["auth", "dashboard", "landing", "media"]
