# src/logging/context.py — v2
"""Contextual logging support — attach request_id, feature, provider to log records."""

from __future__ import annotations

import contextvars
import uuid
from dataclasses import dataclass
from typing import Any

# Set once per orchestrated request; the provider changes per attempt.
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_feature: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "feature", default=None
)
_provider: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "provider", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    feature: str | None = None
    provider: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        feature=_feature.get(),
        provider=_provider.get(),
    )


def new_request_id() -> str:
    """Short random request identifier."""
    return uuid.uuid4().hex[:12]


def set_request_context(feature: str, request_id: str | None = None) -> str:
    """Set request-level context (called once per orchestrated call).

    Returns:
        The request id in effect.
    """
    rid = request_id or new_request_id()
    _request_id.set(rid)
    _feature.set(feature)
    _provider.set(None)
    return rid


def set_provider_context(provider: str | None) -> None:
    """Set the provider currently being attempted."""
    _provider.set(provider)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _feature.set(None)
    _provider.set(None)
