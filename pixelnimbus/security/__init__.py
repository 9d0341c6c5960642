"""Security primitives: secret loading and the request access policy."""
from .access_policy import (
    AccessPolicy,
    GateDecision,
    GateOutcome,
    RequestContext,
    RootRedirect,
    evaluate_access,
    normalize_path,
)
from .secrets import MissingSecretError, is_placeholder, missing_variables, require_secret

__all__ = [
    "AccessPolicy",
    "GateDecision",
    "GateOutcome",
    "RequestContext",
    "RootRedirect",
    "evaluate_access",
    "normalize_path",
    "MissingSecretError",
    "is_placeholder",
    "missing_variables",
    "require_secret",
]
