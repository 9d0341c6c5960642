"""Middleware exports."""
from __future__ import annotations

from .access_gate import AccessGateMiddleware, decision_to_response

__all__ = ["AccessGateMiddleware", "decision_to_response"]
