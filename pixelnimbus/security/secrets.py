"""Reading credentials from the environment without echoing them."""
from __future__ import annotations

import os
from typing import Final, Iterable

# Values shipped in sample .env files that must never reach a real deployment.
_SAMPLE_VALUES: Final[frozenset[str]] = frozenset(
    {
        "changeme",
        "change-me",
        "placeholder",
        "example",
        "sample",
        "todo",
        "xxx",
        "your-key-here",
        "your-secret-here",
        "your-bucket-here",
    }
)


class MissingSecretError(RuntimeError):
    """A required credential is unset or still holds a sample value."""


def is_placeholder(value: str | None) -> bool:
    """True for empty values and the sample values above, case-insensitively."""

    cleaned = (value or "").strip().lower()
    return cleaned == "" or cleaned in _SAMPLE_VALUES


def missing_variables(names: Iterable[str]) -> list[str]:
    return sorted({name for name in names if is_placeholder(os.environ.get(name))})


def require_secret(name: str) -> str:
    value = os.environ.get(name)
    if is_placeholder(value):
        # Only the variable name is reported, never its value.
        raise MissingSecretError(f"{name} must be set to a real value")
    return value.strip()


__all__ = ["MissingSecretError", "is_placeholder", "missing_variables", "require_secret"]
