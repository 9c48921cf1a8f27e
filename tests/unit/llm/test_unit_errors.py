# tests/unit/llm/test_unit_errors.py — v1
"""Tests for llm/errors.py — status mapping and error classification."""

from __future__ import annotations

import pytest

from lexassist.llm.errors import (
    ProviderError,
    ProvidersExhaustedError,
    classify_error,
    error_code_for_status,
)


class TestErrorCodeForStatus:
    @pytest.mark.parametrize(
        ("status", "message", "expected"),
        [
            (401, "", "auth_error"),
            (403, "", "auth_error"),
            (429, "", "rate_limit"),
            (402, "", "rate_limit"),
            (529, "overloaded", "rate_limit"),
            (400, "maximum context length exceeded", "token_limit"),
            (400, "bad parameter", "general_error"),
            (503, "", "transport"),
            (None, "", "general_error"),
        ],
    )
    def test_mapping(self, status, message, expected):
        assert error_code_for_status(status, message) == expected


class TestClassifyError:
    def test_none(self):
        assert classify_error(None) == "general_error"

    def test_structured_code_wins(self):
        err = ProviderError("openai", "something odd", "rate_limit", 429)
        assert classify_error(err) == "rate_limit"

    def test_transport_code_is_general_for_users(self):
        err = ProviderError("openai", "connection reset", "transport")
        assert classify_error(err) == "general_error"

    def test_message_sniffing(self):
        assert classify_error(RuntimeError("Token limit exceeded")) == "token_limit"
        assert classify_error(RuntimeError("HTTP 429 Too Many Requests")) == "rate_limit"
        assert classify_error(RuntimeError("Invalid API key provided")) == "auth_error"
        assert classify_error(RuntimeError("socket closed")) == "general_error"

    def test_exhausted_uses_last_error(self):
        exhausted = ProvidersExhaustedError([
            ProviderError("openai", "x", "auth_error"),
            ProviderError("anthropic", "y", "rate_limit"),
        ])
        assert classify_error(exhausted) == "rate_limit"

    def test_exhausted_without_errors(self):
        assert classify_error(ProvidersExhaustedError([])) == "general_error"


class TestProviderError:
    def test_attributes(self):
        err = ProviderError("deepseek", "insufficient balance", "rate_limit", 402)
        assert err.provider == "deepseek"
        assert err.status_code == 402
        assert str(err) == "deepseek: insufficient balance"

    def test_exhausted_message(self):
        first = ProviderError("openai", "down", "transport")
        exhausted = ProvidersExhaustedError([first])
        assert exhausted.last_error is first
        assert "All 1 AI provider(s) failed" in str(exhausted)
