"""Request-level access policy deciding whether a request may reach its handler.

The decision is a pure function of the request path, whether that path sits
under the API namespace, and whether the caller is authenticated. It returns a
:class:`GateDecision` instead of touching any response object so the whole
procedure can be exercised without a running application.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable

from ..constants import UNAUTHORIZED_DETAIL


class RootRedirect(str, Enum):
    """How requests for ``/`` are treated."""

    AUTHENTICATED = "authenticated"
    ALWAYS = "always"


class GateOutcome(str, Enum):
    ALLOW = "allow"
    REDIRECT_SIGN_IN = "redirect_sign_in"
    REDIRECT_LANDING = "redirect_landing"
    UNAUTHORIZED = "unauthorized"


@dataclass(frozen=True)
class RequestContext:
    """Per-request facts the policy needs; never persisted."""

    path: str
    is_api_path: bool
    is_authenticated: bool


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    location: str | None = None
    status_code: int | None = None
    body: dict[str, Any] | None = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls(GateOutcome.ALLOW)

    @classmethod
    def redirect_sign_in(cls, location: str) -> "GateDecision":
        return cls(GateOutcome.REDIRECT_SIGN_IN, location=location)

    @classmethod
    def redirect_landing(cls, location: str) -> "GateDecision":
        return cls(GateOutcome.REDIRECT_LANDING, location=location)

    @classmethod
    def unauthorized(cls) -> "GateDecision":
        return cls(GateOutcome.UNAUTHORIZED, status_code=401, body={"error": UNAUTHORIZED_DETAIL})

    @property
    def is_redirect(self) -> bool:
        return self.location is not None


def normalize_path(path: str) -> str:
    """Drop a single trailing slash so ``/sign-in/`` matches ``/sign-in``."""

    if not path:
        return "/"
    if len(path) > 1 and path.endswith("/"):
        return path[:-1]
    return path


def _normalized(paths: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_path(path.strip()) for path in paths if path and path.strip())


@dataclass(frozen=True)
class AccessPolicy:
    """Immutable routing configuration, built once at startup."""

    public_pages: frozenset[str]
    public_api_paths: frozenset[str]
    api_prefix: str = "/api"
    landing_path: str = "/home"
    sign_in_path: str = "/sign-in"
    auth_pages: frozenset[str] = frozenset({"/sign-in", "/sign-up"})
    root_redirect: RootRedirect = RootRedirect.AUTHENTICATED
    exempt_prefixes: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        *,
        public_pages: Iterable[str],
        public_api_paths: Iterable[str],
        api_prefix: str = "/api",
        landing_path: str = "/home",
        sign_in_path: str = "/sign-in",
        auth_pages: Iterable[str] = ("/sign-in", "/sign-up"),
        root_redirect: RootRedirect | str = RootRedirect.AUTHENTICATED,
        exempt_prefixes: Iterable[str] = (),
    ) -> "AccessPolicy":
        return cls(
            public_pages=_normalized(public_pages),
            public_api_paths=_normalized(public_api_paths),
            api_prefix=normalize_path(api_prefix),
            landing_path=normalize_path(landing_path),
            sign_in_path=normalize_path(sign_in_path),
            auth_pages=_normalized(auth_pages),
            root_redirect=RootRedirect(root_redirect),
            exempt_prefixes=tuple(prefix for prefix in exempt_prefixes if prefix),
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "AccessPolicy":
        return cls.build(
            public_pages=settings.gate_public_pages,
            public_api_paths=settings.gate_public_api_paths,
            api_prefix=settings.gate_api_prefix,
            landing_path=settings.gate_landing_path,
            sign_in_path=settings.gate_sign_in_path,
            auth_pages=settings.gate_auth_pages,
            root_redirect=settings.gate_root_redirect,
            exempt_prefixes=settings.gate_exempt_prefixes,
        )

    def is_api_path(self, path: str) -> bool:
        path = normalize_path(path)
        return path == self.api_prefix or path.startswith(self.api_prefix + "/")

    def applies_to(self, path: str) -> bool:
        """Return False for static and framework-internal assets."""

        if self.is_api_path(path):
            return True
        if any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in self.exempt_prefixes):
            return False
        last_segment = path.rsplit("/", 1)[-1]
        return "." not in last_segment

    def context_for(self, path: str, *, is_authenticated: bool) -> RequestContext:
        normalized = normalize_path(path)
        return RequestContext(
            path=normalized,
            is_api_path=self.is_api_path(normalized),
            is_authenticated=is_authenticated,
        )


def evaluate_access(context: RequestContext, policy: AccessPolicy) -> GateDecision:
    """Return the single outcome for ``context``; the first matching rule wins."""

    path = context.path

    if path == "/":
        if context.is_authenticated or policy.root_redirect is RootRedirect.ALWAYS:
            return GateDecision.redirect_landing(policy.landing_path)

    if context.is_authenticated:
        if path in policy.auth_pages and path != policy.landing_path:
            return GateDecision.redirect_landing(policy.landing_path)
        return GateDecision.allow()

    if context.is_api_path:
        if path not in policy.public_api_paths:
            return GateDecision.unauthorized()
        return GateDecision.allow()

    if path not in policy.public_pages and path not in policy.public_api_paths:
        return GateDecision.redirect_sign_in(policy.sign_in_path)

    return GateDecision.allow()


__all__ = [
    "AccessPolicy",
    "GateDecision",
    "GateOutcome",
    "RequestContext",
    "RootRedirect",
    "evaluate_access",
    "normalize_path",
]
