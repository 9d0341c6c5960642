"""ASGI application: access gate, JSON APIs and dashboard pages."""
from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from .config import Settings, get_settings
from .database import init_db
from .errors import register_error_handlers
from .middleware import AccessGateMiddleware
from .routers import auth_router, images_router, videos_router, webhook_router
from .security import AccessPolicy
from .ui import router as ui_router

STATIC_DIR = Path(__file__).resolve().parent / "ui" / "static"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _install_middleware(application: FastAPI, settings: Settings, policy: AccessPolicy) -> None:
    # The last middleware added runs first: CORS answers preflights before the gate sees them.
    application.add_middleware(AccessGateMiddleware, policy=policy)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


settings = get_settings()
configure_logging(settings)

# Built once; every request is judged against this same immutable policy.
access_policy = AccessPolicy.from_settings(settings)

app = FastAPI(title=settings.app_name, version=settings.api_version)
_install_middleware(app, settings, access_policy)
register_error_handlers(app)

for router in (ui_router, auth_router, videos_router, images_router, webhook_router):
    app.include_router(router)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR), check_dir=False), name="static")


@app.on_event("startup")
async def _prepare_database() -> None:
    try:
        init_db()
    except Exception:  # pragma: no cover - surfaced again by the raise
        logger.exception("Could not create database schema")
        raise

    logger.info(
        "%s %s ready (landing=%s, sign_in=%s, root_redirect=%s)",
        settings.app_name,
        settings.api_version,
        access_policy.landing_path,
        access_policy.sign_in_path,
        access_policy.root_redirect.value,
    )


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
