"""Shared test configuration.

The database URL and JWT secret must be in place before any application module
is imported because settings and the engine are created at import time.
"""
from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///./test_pixelnimbus.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("MEDIA_HOST_WEBHOOK_SECRET", "test-webhook-secret")
