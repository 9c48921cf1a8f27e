# src/llm/adapters/deepseek_adapter.py — v1
"""DeepSeek adapter.

DeepSeek exposes an OpenAI-compatible Chat Completions API, so this reuses
OpenAIAdapter against a different base URL. HTTP 402 means the account
balance is exhausted and is reported as a capacity (rate_limit) failure.
"""

from __future__ import annotations

from typing import Any

import openai

from lexassist.llm.adapters.openai_adapter import OpenAIAdapter
from lexassist.llm.errors import ProviderError

DEFAULT_BASE_URL = "https://api.deepseek.com/v1"


class DeepSeekAdapter(OpenAIAdapter):
    """DeepSeek chat adapter."""

    def __init__(
        self,
        model: str = "deepseek-chat",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            model=model,
            api_key=api_key,
            base_url=base_url or DEFAULT_BASE_URL,
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "deepseek"

    def _status_error(self, error: openai.APIStatusError) -> ProviderError:
        if error.status_code == 402:
            return ProviderError(
                self.provider_name,
                f"insufficient balance: {error}",
                "rate_limit",
                402,
            )
        return super()._status_error(error)
