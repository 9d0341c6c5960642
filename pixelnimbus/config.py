"""PixelNimbus settings.

Values come from the process environment first and from the project .env file
second. List-valued gate settings accept JSON arrays, e.g.
`GATE_PUBLIC_PAGES=["/", "/sign-in"]`.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILE = PROJECT_ROOT / ".env"

# Media host and JWT secrets are read with os.environ, so .env is loaded eagerly.
load_dotenv(dotenv_path=ENV_FILE, override=False)


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="PixelNimbus", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")

    auth_cookie_name: str = Field(default="pixelnimbus_session", alias="AUTH_COOKIE_NAME")
    auth_cookie_secure: bool = Field(default=False, alias="AUTH_COOKIE_SECURE")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=1440, ge=1, alias="JWT_EXPIRES_MINUTES")

    media_host_webhook_secret: str | None = Field(default=None, alias="MEDIA_HOST_WEBHOOK_SECRET")

    # Access gate routing. JSON lists when supplied through the environment.
    gate_public_pages: list[str] = Field(
        default_factory=lambda: ["/", "/sign-in", "/sign-up"],
        alias="GATE_PUBLIC_PAGES",
    )
    gate_public_api_paths: list[str] = Field(
        default_factory=lambda: [
            "/api/videos",
            "/api/webhook",
            "/api/auth/sign-in",
            "/api/auth/sign-up",
            "/api/auth/sign-out",
        ],
        alias="GATE_PUBLIC_API_PATHS",
    )
    gate_api_prefix: str = Field(default="/api", alias="GATE_API_PREFIX")
    gate_landing_path: str = Field(default="/home", alias="GATE_LANDING_PATH")
    gate_sign_in_path: str = Field(default="/sign-in", alias="GATE_SIGN_IN_PATH")
    gate_auth_pages: list[str] = Field(
        default_factory=lambda: ["/sign-in", "/sign-up"],
        alias="GATE_AUTH_PAGES",
    )
    gate_root_redirect: Literal["authenticated", "always"] = Field(
        default="authenticated", alias="GATE_ROOT_REDIRECT"
    )
    gate_exempt_prefixes: list[str] = Field(
        default_factory=lambda: ["/static", "/docs", "/redoc", "/health"],
        alias="GATE_EXEMPT_PREFIXES",
    )

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def cors_origin_list(self) -> list[str]:
        origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]
        return origins or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings; tests set the environment before first use."""

    return Settings()


__all__ = ["Settings", "get_settings"]
