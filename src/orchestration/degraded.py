# src/orchestration/degraded.py — v1
"""User-facing apologies returned when every provider failed."""

from __future__ import annotations

from typing import Any

from lexassist.core.models import DegradedResponse
from lexassist.llm.errors import ErrorType, classify_error

DEGRADED_MESSAGES: dict[ErrorType, str] = {
    "token_limit": (
        "I apologize, but your request is too long for me to process right now. "
        "Please shorten your question or split the document into smaller parts and try again."
    ),
    "rate_limit": (
        "I apologize, but our AI services are experiencing unusually high demand. "
        "Please try again in a few minutes."
    ),
    "auth_error": (
        "I apologize, but our AI services are temporarily unavailable due to a configuration issue. "
        "Our team has been notified. Please try again later or contact support."
    ),
    "general_error": (
        "I apologize, but I'm currently experiencing technical difficulties processing your request. "
        "Our team has been notified of this issue. Please try again in a few moments, "
        "or contact support if this problem persists."
    ),
}


def build_degraded_response(
    error: BaseException | None,
    structured: bool = False,
) -> str | dict[str, Any]:
    """Apology tailored to the classified error.

    Returns:
        The message string, or for structured requests the
        ``{error, errorType, fallback, message}`` object.
    """
    error_type = classify_error(error)
    message = DEGRADED_MESSAGES[error_type]
    if not structured:
        return message
    return DegradedResponse(error_type=error_type, message=message).to_wire()


def is_degraded(value: Any) -> bool:
    """Whether a structured value is a degraded placeholder."""
    return isinstance(value, dict) and value.get("error") is True and value.get("fallback") is True
