"""SQLAlchemy engine and session plumbing for PixelNimbus."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import get_settings


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections may be used from worker threads."""

    connect_args: dict[str, Any] = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)


engine: Engine = build_engine(get_settings().database_url)

# Rows are read after commit when building API responses.
SessionLocal = sessionmaker(bind=engine, autoflush=False, future=True, expire_on_commit=False)

Base = declarative_base()


def get_session() -> Iterator[Session]:
    """Request-scoped session dependency."""

    with SessionLocal() as session:
        yield session


@contextmanager
def session_scope() -> Iterator[Session]:
    """Short-lived session for code running outside a route, such as middleware."""

    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def init_db() -> None:
    """Create the users and videos tables when they do not exist yet."""

    from . import models  # noqa: F401  registers the mappers on Base.metadata

    Base.metadata.create_all(bind=engine)


__all__ = ["Base", "engine", "SessionLocal", "build_engine", "get_session", "session_scope", "init_db"]
