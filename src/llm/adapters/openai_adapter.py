# src/llm/adapters/openai_adapter.py — v3
"""OpenAI GPT adapter implementing BaseLLMClient.

Uses the official openai SDK. JSON mode maps to
``response_format={"type": "json_object"}``, which the API only accepts when
the messages mention JSON, so the JSON-only instruction is appended to the
system message. Vendor exceptions are translated into ProviderError so the
orchestrator can classify them.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import openai

from lexassist.llm import prompts
from lexassist.llm.base_client import BaseLLMClient
from lexassist.llm.errors import ProviderError, error_code_for_status
from lexassist.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)


class OpenAIAdapter(BaseLLMClient):
    """OpenAI GPT adapter."""

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str = "",
        base_url: str | None = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._model = model
        self._api_key = api_key
        self._base_url = base_url
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self.__client: openai.AsyncOpenAI | None = None  # Lazy initialization

    @property
    def _client(self) -> openai.AsyncOpenAI:
        """Lazy-init OpenAI client (only on first API call)."""
        if self.__client is None:
            if not self._api_key:
                raise ProviderError(self.provider_name, "API key not configured", "auth_error")
            self.__client = openai.AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout_s,
                max_retries=self._max_retries,
            )
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 800,
        temperature: float = 0.7,
        json_mode: bool = False,
        model: str | None = None,
    ) -> LLMResponse:
        """Text completion via the Chat Completions API."""
        if json_mode:
            system = f"{system}\n\n{prompts.JSON_ONLY_INSTRUCTION}" if system else prompts.JSON_ONLY_INSTRUCTION
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        model_name = model or self._model
        kwargs: dict[str, Any] = {
            "model": model_name,
            "messages": oai_messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        t0 = time.monotonic()
        try:
            resp = await self._client.chat.completions.create(**kwargs)
        except openai.APIConnectionError as e:
            # Also covers APITimeoutError.
            raise ProviderError(self.provider_name, str(e), "transport") from e
        except openai.APIStatusError as e:
            raise self._status_error(e) from e
        latency = int((time.monotonic() - t0) * 1000)

        if not resp.choices:
            raise ProviderError(self.provider_name, "response had no choices", "empty_response")

        choice = resp.choices[0]
        usage = resp.usage
        return LLMResponse(
            content=choice.message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=model_name,
            provider=self.provider_name,
            latency_ms=latency,
            finish_reason=choice.finish_reason,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return self._model

    def _status_error(self, error: openai.APIStatusError) -> ProviderError:
        message = str(error)
        return ProviderError(
            self.provider_name,
            message,
            error_code_for_status(error.status_code, message),
            error.status_code,
        )
