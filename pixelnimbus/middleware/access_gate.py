"""Middleware applying the access policy before any route handler runs."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from uuid import UUID

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.types import ASGIApp

from ..security.access_policy import AccessPolicy, GateDecision, GateOutcome, evaluate_access
from ..services.auth_service import resolve_request_identity

logger = logging.getLogger(__name__)

IdentityResolver = Callable[[Request], Awaitable[UUID | None]]


def decision_to_response(decision: GateDecision) -> Response | None:
    """Translate a non-allow decision into a response; ``None`` means continue."""

    if decision.outcome is GateOutcome.ALLOW:
        return None
    if decision.outcome is GateOutcome.UNAUTHORIZED:
        return JSONResponse(status_code=decision.status_code or status.HTTP_401_UNAUTHORIZED, content=decision.body)
    return RedirectResponse(url=decision.location or "/", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Redirect or reject requests the caller is not allowed to make.

    Notes:
    - Static and framework-internal assets skip the gate entirely.
    - The resolved user id is stored on ``request.state.user_id`` for handlers.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        policy: AccessPolicy,
        identity_resolver: IdentityResolver | None = None,
    ) -> None:
        super().__init__(app)
        self._policy = policy
        self._resolve_identity = identity_resolver or resolve_request_identity

    async def _identity(self, request: Request) -> UUID | None:
        try:
            return await self._resolve_identity(request)
        except Exception:
            logger.warning("Identity resolver raised; treating request as unauthenticated", exc_info=True)
            return None

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if not self._policy.applies_to(path):
            return await call_next(request)

        user_id = await self._identity(request)
        request.state.user_id = user_id

        context = self._policy.context_for(path, is_authenticated=user_id is not None)
        decision = evaluate_access(context, self._policy)
        logger.debug("Access gate %s %s -> %s", request.method, path, decision.outcome.value)

        response = decision_to_response(decision)
        if response is not None:
            return response
        return await call_next(request)


__all__: Iterable[str] = ["AccessGateMiddleware", "decision_to_response", "IdentityResolver"]
