# src/llm/base_client.py — v2
"""Abstract LLM client interface.

Adapters implement complete() for one vendor. Everything else here is
shared: chat with the default legal-assistant system prompt, defensive JSON
completion, and the structured legal operations built on top of it.
Adapters never cache, queue or fall back across vendors; the orchestrator
does that.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from lexassist.core.models import (
    ContractAnalysisResult,
    ContractComparisonResult,
    DocumentEnhancement,
    ResearchResult,
)
from lexassist.llm import prompts
from lexassist.llm.errors import ProviderError
from lexassist.llm.json_parsing import coerce_structured
from lexassist.llm.models import LLMResponse, Message

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

RESEARCH_MAX_TOKENS = 2500
CONTRACT_ANALYSIS_MAX_TOKENS = 1500
CONTRACT_COMPARISON_MAX_TOKENS = 2000
DOCUMENT_ENHANCEMENT_MAX_TOKENS = 4000


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers.

    Args:
        default_temperature: Temperature used when a call passes None.
        default_max_tokens: Output cap used when a call passes None.
    """

    def __init__(
        self,
        default_temperature: float = 0.7,
        default_max_tokens: int = 800,
    ) -> None:
        self.default_temperature = default_temperature
        self.default_max_tokens = default_max_tokens

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 800,
        temperature: float = 0.7,
        json_mode: bool = False,
        model: str | None = None,
    ) -> LLMResponse:
        """Text completion. Raises ProviderError on any vendor failure."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (openai, anthropic, deepseek)."""

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model used when a call does not override it."""

    # --- Chat ---

    async def chat_respond(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
    ) -> str:
        """Single-turn chat answer as plain text.

        Raises:
            ProviderError: On vendor failure, or if the answer is empty.
        """
        response = await self.complete(
            [Message(role="user", content=prompt)],
            system=system or prompts.DEFAULT_SYSTEM_PROMPT,
            max_tokens=max_tokens if max_tokens is not None else self.default_max_tokens,
            temperature=temperature if temperature is not None else self.default_temperature,
            model=model,
        )
        if not response.content.strip():
            raise ProviderError(self.provider_name, "empty response", "empty_response")
        return response.content

    async def complete_json(
        self,
        prompt: str,
        system: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        model: str | None = None,
        prose_field: str = "summary",
    ) -> dict[str, Any]:
        """Completion parsed into a JSON object.

        Unparseable output becomes ``{prose_field: text}``; only vendor
        failures raise.
        """
        response = await self.complete(
            [Message(role="user", content=prompt)],
            system=system or prompts.DEFAULT_SYSTEM_PROMPT,
            max_tokens=max_tokens if max_tokens is not None else self.default_max_tokens,
            temperature=temperature if temperature is not None else self.default_temperature,
            json_mode=True,
            model=model,
        )
        if not response.content.strip():
            raise ProviderError(self.provider_name, "empty response", "empty_response")
        return coerce_structured(response.content, prose_field)

    # --- Structured legal operations ---

    async def research(
        self,
        query: str,
        jurisdiction: str = "canada",
        practice_area: str = "all",
        model: str | None = None,
    ) -> ResearchResult:
        """Legal research in the common result shape."""
        display = prompts.jurisdiction_display_name(jurisdiction)
        focus = prompts.practice_area_context(practice_area)
        data = await self.complete_json(
            prompts.RESEARCH_USER_PROMPT.format(
                jurisdiction=display, practice_area_context=focus, query=query,
            ),
            system=prompts.RESEARCH_SYSTEM_PROMPT.format(
                jurisdiction=display, practice_area_context=focus,
            ),
            max_tokens=RESEARCH_MAX_TOKENS,
            model=model,
        )
        return self._validate(ResearchResult, data)

    async def analyze_contract(
        self,
        text: str,
        jurisdiction: str = "Canada",
        contract_type: str = "general",
        model: str | None = None,
    ) -> ContractAnalysisResult:
        """Risks, suggestions and a summary for one contract."""
        data = await self.complete_json(
            prompts.CONTRACT_ANALYSIS_USER_PROMPT.format(
                contract_type=contract_type, jurisdiction=jurisdiction, contract_text=text,
            ),
            system=prompts.CONTRACT_ANALYSIS_SYSTEM_PROMPT.format(
                contract_type=contract_type, jurisdiction=jurisdiction,
            ),
            max_tokens=CONTRACT_ANALYSIS_MAX_TOKENS,
            model=model,
        )
        return self._validate(ContractAnalysisResult, data)

    async def compare_contracts(
        self,
        first: str,
        second: str,
        model: str | None = None,
    ) -> ContractComparisonResult:
        data = await self.complete_json(
            prompts.CONTRACT_COMPARISON_USER_PROMPT.format(first=first, second=second),
            system=prompts.CONTRACT_COMPARISON_SYSTEM_PROMPT,
            max_tokens=CONTRACT_COMPARISON_MAX_TOKENS,
            model=model,
        )
        return self._validate(ContractComparisonResult, data)

    async def enhance_document(
        self,
        content: str,
        form_data: dict[str, Any],
        document_type: str,
        jurisdiction: str,
        model: str | None = None,
    ) -> DocumentEnhancement:
        """Fill placeholders and strengthen a drafted legal document."""
        enhanced = await self.chat_respond(
            prompts.DOCUMENT_ENHANCEMENT_USER_PROMPT.format(
                document_type=document_type,
                jurisdiction=jurisdiction,
                content=content,
                form_data=json.dumps(form_data, indent=2, ensure_ascii=False),
            ),
            system=prompts.DOCUMENT_ENHANCEMENT_SYSTEM_PROMPT.format(
                document_type=document_type, jurisdiction=jurisdiction,
            ),
            max_tokens=DOCUMENT_ENHANCEMENT_MAX_TOKENS,
            model=model,
        )
        return DocumentEnhancement(content=enhanced)

    # --- Internal helpers ---

    def _validate(self, model_cls: type[_ModelT], data: dict[str, Any]) -> _ModelT:
        """Validate parsed JSON, keeping only the summary if the shape is off."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "%s returned malformed %s (%d errors); keeping summary only",
                self.provider_name, model_cls.__name__, e.error_count(),
            )
            summary = data.get("summary")
            return model_cls.model_validate(
                {"summary": summary if isinstance(summary, str) else json.dumps(data)}
            )
