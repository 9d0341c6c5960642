"""Accounts, session tokens and request identity.

Sessions are stateless HS256 JWTs whose ``sub`` claim is the user id. The
token travels either as ``Authorization: Bearer`` or in the session cookie set
by the sign-in and sign-up routes.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from uuid import UUID

from fastapi import Depends, HTTPException, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..constants import UNAUTHORIZED_DETAIL
from ..database import get_session, session_scope
from ..models import User
from ..schemas import SignUpRequest
from ..security.secrets import MissingSecretError, require_secret

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)
_passwords = CryptContext(schemes=["bcrypt"], deprecated="auto")


class InvalidSessionToken(ValueError):
    """Raised when a session token is malformed, expired or unsigned."""


@lru_cache(maxsize=1)
def _signing_key() -> str:
    try:
        return require_secret("JWT_SECRET_KEY")
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    return _passwords.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return _passwords.verify(password, hashed_password)
    except ValueError:
        # Rows seeded without a real bcrypt hash can never sign in.
        return False


def create_access_token(user_id: UUID, *, lifetime: timedelta | None = None) -> str:
    """Issue a session token for ``user_id``."""

    settings = get_settings()
    issued = datetime.now(timezone.utc)
    expires = issued + (lifetime or timedelta(minutes=settings.jwt_expires_minutes))
    claims = {"sub": str(user_id), "iat": issued, "exp": expires}
    return jwt.encode(claims, _signing_key(), algorithm=settings.jwt_algorithm)


def read_token_subject(token: str) -> UUID:
    """Return the user id carried by ``token`` or raise :class:`InvalidSessionToken`."""

    try:
        claims = jwt.decode(token, _signing_key(), algorithms=[get_settings().jwt_algorithm])
        return UUID(str(claims["sub"]))
    except (JWTError, KeyError, ValueError) as exc:
        raise InvalidSessionToken("Invalid session token") from exc


def decode_access_token(token: str) -> UUID:
    """HTTP flavour of :func:`read_token_subject` used by route dependencies."""

    try:
        return read_token_subject(token)
    except InvalidSessionToken as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL) from exc


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        settings.auth_cookie_name,
        token,
        max_age=settings.jwt_expires_minutes * 60,
        path="/",
        httponly=True,
        secure=settings.auth_cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response) -> None:
    settings = get_settings()
    response.delete_cookie(settings.auth_cookie_name, path="/", secure=settings.auth_cookie_secure, httponly=True)


def extract_token(request: Request) -> str | None:
    """Bearer header first, then the session cookie."""

    scheme, _, value = (request.headers.get("Authorization") or "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(get_settings().auth_cookie_name) or None


def _find_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(func.lower(User.email) == email.lower()))


def register_user(db: Session, payload: SignUpRequest) -> tuple[User, str]:
    """Create an account and return it together with a fresh session token."""

    email = str(payload.email).lower()
    if _find_by_email(db, email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        email=email,
        name=(payload.name or "").strip() or "Anonymous",
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Could not create account for %s", email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Sign up failed") from exc
    db.refresh(user)

    logger.info("Registered user %s", user.id)
    return user, create_access_token(user.id)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = _find_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def _existing_user_id(token: str) -> UUID | None:
    try:
        user_id = read_token_subject(token)
    except InvalidSessionToken:
        return None
    with session_scope() as session:
        found = session.scalar(select(User.id).where(User.id == user_id))
    return user_id if found is not None else None


async def resolve_request_identity(request: Request) -> UUID | None:
    """Return the id of the signed-in user behind ``request``, if any.

    The token must verify and its user row must still exist. Lookup failures,
    including database errors, resolve to ``None``.
    """

    token = extract_token(request)
    if token is None:
        return None
    try:
        return await run_in_threadpool(_existing_user_id, token)
    except Exception:
        logger.warning("Identity lookup failed; continuing as anonymous", exc_info=True)
        return None


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_session),
) -> User:
    """Route dependency returning the signed-in user or answering 401."""

    token = credentials.credentials if credentials else extract_token(request)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL)

    user = db.get(User, decode_access_token(token))
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL)

    user.last_active_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning("Could not record activity for user %s", user.id)
    return user


__all__ = [
    "InvalidSessionToken",
    "authenticate_user",
    "clear_session_cookie",
    "create_access_token",
    "decode_access_token",
    "extract_token",
    "get_current_user",
    "hash_password",
    "read_token_subject",
    "register_user",
    "resolve_request_identity",
    "set_session_cookie",
    "verify_password",
]
