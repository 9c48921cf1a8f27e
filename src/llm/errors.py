# src/llm/errors.py — v1
"""Common provider error type and error classification.

Adapters raise ProviderError with a structured error_code. classify_error()
trusts that code first and only sniffs message substrings for errors that
arrive without one, so the classification stays best-effort.
"""

from __future__ import annotations

from typing import Literal

ErrorCode = Literal[
    "token_limit",
    "rate_limit",
    "auth_error",
    "transport",
    "empty_response",
    "general_error",
]

# Categories surfaced to end users in degraded responses.
ErrorType = Literal["token_limit", "rate_limit", "auth_error", "general_error"]

_USER_FACING: frozenset[str] = frozenset({"token_limit", "rate_limit", "auth_error"})


class ProviderError(Exception):
    """A provider call failed (transport, auth, capacity or empty answer)."""

    def __init__(
        self,
        provider: str,
        message: str,
        error_code: ErrorCode = "general_error",
        status_code: int | None = None,
    ) -> None:
        self.provider = provider
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class ProvidersExhaustedError(Exception):
    """Every provider in the fallback chain failed."""

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = errors
        last = errors[-1] if errors else None
        super().__init__(
            f"All {len(errors)} AI provider(s) failed; last error: {last}"
        )

    @property
    def last_error(self) -> Exception | None:
        return self.errors[-1] if self.errors else None


def error_code_for_status(status_code: int | None, message: str = "") -> ErrorCode:
    """Map an HTTP status from a vendor API onto an error code."""
    if status_code in (401, 403):
        return "auth_error"
    if status_code in (402, 429, 529):
        return "rate_limit"
    if status_code in (400, 413) and _sniff_message(message) == "token_limit":
        return "token_limit"
    if status_code is not None and status_code >= 500:
        return "transport"
    return "general_error"


def classify_error(error: BaseException | None) -> ErrorType:
    """Classify an exception into a user-facing error type."""
    if error is None:
        return "general_error"

    if isinstance(error, ProvidersExhaustedError):
        return classify_error(error.last_error)

    if isinstance(error, ProviderError) and error.error_code in _USER_FACING:
        return error.error_code  # type: ignore[return-value]

    return _sniff_message(str(error))


def _sniff_message(message: str) -> ErrorType:
    """Last-resort substring classification for unstructured errors."""
    msg = message.lower()

    if "token" in msg and any(w in msg for w in ("limit", "exceed", "maximum", "too long")):
        return "token_limit"
    if "context length" in msg or "context_length" in msg:
        return "token_limit"
    if any(w in msg for w in ("rate limit", "rate_limit", "429", "quota", "too many requests",
                              "insufficient", "balance")):
        return "rate_limit"
    if any(w in msg for w in ("401", "403", "unauthorized", "authentication",
                              "api key", "api_key", "permission")):
        return "auth_error"
    return "general_error"
