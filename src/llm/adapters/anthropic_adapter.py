# src/llm/adapters/anthropic_adapter.py — v3
"""Anthropic Claude adapter implementing BaseLLMClient.

Uses the official anthropic SDK. The system prompt is a top-level
parameter; JSON mode is requested by instruction since the Messages API
has no json_object switch. Claude answers research in its own
{summary, cases, statutes, analysis} shape, which research() converts to
the common ResearchResult.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import anthropic

from lexassist.core.models import (
    CaseReference,
    LawReference,
    LegalConcept,
    ResearchResult,
)
from lexassist.llm import prompts
from lexassist.llm.base_client import RESEARCH_MAX_TOKENS, BaseLLMClient
from lexassist.llm.errors import ProviderError, error_code_for_status
from lexassist.llm.json_parsing import extract_json_object
from lexassist.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_PROSE_SUMMARY_CHARS = 300


class AnthropicAdapter(BaseLLMClient):
    """Adapter for Anthropic Claude models."""

    def __init__(
        self,
        model: str = "claude-3-7-sonnet-20250219",
        api_key: str | None = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._model = model
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self.__client: anthropic.AsyncAnthropic | None = None  # Lazy initialization

    @property
    def _client(self) -> anthropic.AsyncAnthropic:
        """Lazy-init Anthropic client (only on first API call)."""
        if self.__client is None:
            if not self._api_key:
                raise ProviderError(self.provider_name, "API key not configured", "auth_error")
            self.__client = anthropic.AsyncAnthropic(
                api_key=self._api_key,
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
        """Text completion via Anthropic Messages API."""
        if json_mode:
            system = f"{system}\n\n{prompts.JSON_ONLY_INSTRUCTION}" if system else prompts.JSON_ONLY_INSTRUCTION
        kwargs = self._build_kwargs(messages, system, max_tokens, temperature, model)

        start = time.monotonic()
        try:
            response = await self._client.messages.create(**kwargs)
        except anthropic.APIConnectionError as e:
            raise ProviderError(self.provider_name, str(e), "transport") from e
        except anthropic.APIStatusError as e:
            message = str(e)
            raise ProviderError(
                self.provider_name,
                message,
                error_code_for_status(e.status_code, message),
                e.status_code,
            ) from e
        latency_ms = int((time.monotonic() - start) * 1000)

        return LLMResponse(
            content=self._extract_content(response),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider=self.provider_name,
            latency_ms=latency_ms,
            finish_reason=response.stop_reason,
            raw_response=response,
        )

    async def research(
        self,
        query: str,
        jurisdiction: str = "canada",
        practice_area: str = "all",
        model: str | None = None,
    ) -> ResearchResult:
        """Research using Claude's own answer shape, converted to ResearchResult."""
        area = practice_area if practice_area and practice_area != "all" else "general"
        response = await self.complete(
            [Message(
                role="user",
                content=prompts.CLAUDE_RESEARCH_USER_PROMPT.format(
                    jurisdiction=jurisdiction, practice_area=area, query=query,
                ),
            )],
            system=prompts.CLAUDE_RESEARCH_SYSTEM_PROMPT.format(
                jurisdiction=jurisdiction, practice_area=area,
            ),
            max_tokens=RESEARCH_MAX_TOKENS,
            temperature=self.default_temperature,
            model=model,
        )
        text = response.content
        if not text.strip():
            raise ProviderError(self.provider_name, "empty response", "empty_response")
        return convert_claude_research(text, jurisdiction)

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return self._model

    # --- Internal helpers ---

    def _build_kwargs(
        self,
        messages: list[Message],
        system: str | None,
        max_tokens: int,
        temperature: float,
        model: str | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": model or self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [self._to_api_message(m) for m in messages if m.role != "system"],
        }
        if system:
            kwargs["system"] = system
        return kwargs

    @staticmethod
    def _to_api_message(m: Message) -> dict[str, Any]:
        return {"role": m.role, "content": m.content}

    @staticmethod
    def _extract_content(response: Any) -> str:
        """Concatenate text blocks from Anthropic response content."""
        return "".join(
            block.text
            for block in response.content
            if getattr(block, "type", None) == "text"
        )


def convert_claude_research(text: str, jurisdiction: str) -> ResearchResult:
    """Convert Claude's {summary, cases, statutes, analysis} answer.

    Cases keep their name/citation/relevance and take the requested
    jurisdiction; statutes become laws (name → title, relevance →
    description, citation → source); a non-empty analysis becomes a single
    "Legal Analysis" concept. Prose answers keep a short summary and the
    full text as analysis.
    """
    data = extract_json_object(text)
    if data is None:
        logger.warning("Claude research answer was not JSON; using prose fallback")
        summary = text[:_PROSE_SUMMARY_CHARS] + ("..." if len(text) > _PROSE_SUMMARY_CHARS else "")
        return ResearchResult(
            summary=summary,
            legal_concepts=[_analysis_concept(text)],
        )

    cases = [
        CaseReference(
            name=str(c.get("name", "")),
            citation=str(c.get("citation", "")),
            relevance=str(c.get("relevance", "")),
            jurisdiction=jurisdiction,
        )
        for c in data.get("cases") or []
        if isinstance(c, dict)
    ]
    laws = [
        LawReference(
            title=str(s.get("name", "")),
            description=str(s.get("relevance", "")),
            source=str(s.get("citation", "")),
        )
        for s in data.get("statutes") or []
        if isinstance(s, dict)
    ]
    analysis = data.get("analysis")
    return ResearchResult(
        summary=str(data.get("summary") or "No summary provided"),
        relevant_cases=cases,
        relevant_laws=laws,
        legal_concepts=[_analysis_concept(str(analysis))] if analysis else None,
    )


def _analysis_concept(analysis: str) -> LegalConcept:
    return LegalConcept(
        concept="Legal Analysis",
        definition="Comprehensive legal analysis",
        relevance=analysis,
    )
