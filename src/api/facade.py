# src/api/facade.py — v2
"""Public API facade — single entry point for the AI features.

Usage:
    from lexassist.api.facade import LegalAIService
    async with LegalAIService() as service:
        answer = await service.generate_chat_response("What is ...?")

Wires settings → logging → provider chain → cache tiers → queue →
orchestrator → feature services, and exposes the administrative surface
(status, feature flags, cache clearing).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from lexassist.api.models import ClearCacheResponse, QueueStats, ServiceStatus
from lexassist.cache.base_cache_store import BaseResponseCache
from lexassist.cache.cache_factory import create_memory_cache, create_persistent_cache
from lexassist.cache.sweeper import CacheSweeper
from lexassist.config.feature_flags import FeatureFlags, FeatureFlagStore
from lexassist.config.settings import Settings, load_settings
from lexassist.core.models import (
    ContractAnalysisResult,
    ContractComparisonResult,
    DocumentEnhancement,
    ResearchResult,
)
from lexassist.extraction.extractor_factory import extract_contract_text
from lexassist.features.chat import generate_chat_response
from lexassist.features.contract_analysis import ContractAnalysisService
from lexassist.features.document_enhancement import DocumentEnhancementService
from lexassist.features.research import enhanced_legal_research
from lexassist.llm.base_client import BaseLLMClient
from lexassist.llm.client_factory import create_provider_chain
from lexassist.llm.models import AIRequestOptions
from lexassist.logging.logger import setup_logging
from lexassist.orchestration.orchestrator import Orchestrator
from lexassist.orchestration.request_queue import RequestQueue
from lexassist.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)


class LegalAIService:
    """Composition root for the AI orchestration core.

    Args:
        settings: Application settings. Loaded from .env when omitted.
        clients: Provider clients in fallback order. Built from
            AI_PROVIDER_CHAIN when omitted.
        persistent_cache: Durable cache tier override.
        memory_cache: Process-local cache tier override.
        flag_store: Feature flag store override.
        configure_logging: Apply the logging settings on construction.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        clients: list[BaseLLMClient] | None = None,
        persistent_cache: BaseResponseCache | None = None,
        memory_cache: BaseResponseCache | None = None,
        flag_store: FeatureFlagStore | None = None,
        configure_logging: bool = False,
    ) -> None:
        self.settings = settings or load_settings()
        s = self.settings

        if configure_logging:
            setup_logging(
                level=s.log_level,
                log_format=s.log_format,
                log_file=s.log_file,
                rotation=s.log_rotation,
                retention=s.log_retention,
            )

        self.flag_store = flag_store or FeatureFlagStore.from_settings(s)
        self.persistent_cache = persistent_cache or create_persistent_cache(s)
        self.memory_cache = memory_cache or create_memory_cache(s)
        self.queue = RequestQueue(s.queue_concurrency_limit)
        self.call_logger = CallLogger()
        self.orchestrator = Orchestrator(
            clients=clients if clients is not None else create_provider_chain(s),
            flags=self.flag_store,
            persistent_cache=self.persistent_cache,
            memory_cache=self.memory_cache,
            queue=self.queue,
            call_logger=self.call_logger,
            attempt_timeout_s=s.llm_attempt_timeout_s,
            degraded_ttl_s=s.degraded_cache_ttl_s,
        )
        self.sweeper = CacheSweeper(
            [self.persistent_cache, self.memory_cache],
            interval_s=s.cache_sweep_interval_s,
        )
        self._contracts = ContractAnalysisService(self.orchestrator, s.contract_max_tokens)
        self._documents = DocumentEnhancementService(self.orchestrator)

        logger.info("AI service ready: chain=%s", self.orchestrator.chain_label)

    # --- Lifecycle ---

    async def start(self) -> None:
        """Start background cache sweeping."""
        self.sweeper.start()

    async def close(self) -> None:
        """Stop background work and release cache resources."""
        await self.sweeper.stop()
        self.persistent_cache.close()
        self.memory_cache.close()

    async def __aenter__(self) -> LegalAIService:
        await self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # --- Features ---

    async def generate_chat_response(
        self, message: str, options: AIRequestOptions | None = None,
    ) -> str:
        return await generate_chat_response(self.orchestrator, message, options)

    async def enhanced_ai_request(
        self, prompt: str, options: AIRequestOptions | None = None,
    ) -> str | dict[str, Any]:
        return await self.orchestrator.enhanced_request(prompt, options)

    async def enhanced_legal_research(
        self, query: str, jurisdiction: str = "canada", practice_area: str = "all",
    ) -> ResearchResult:
        return await enhanced_legal_research(self.orchestrator, query, jurisdiction, practice_area)

    async def analyze_contract(
        self, text: str, jurisdiction: str = "Canada", contract_type: str = "general",
    ) -> ContractAnalysisResult:
        return await self._contracts.analyze(text, jurisdiction, contract_type)

    async def analyze_contract_file(
        self,
        path: Path | str,
        jurisdiction: str = "Canada",
        contract_type: str = "general",
    ) -> ContractAnalysisResult:
        """Extract text from a contract file, then analyze it.

        Raises:
            UnsupportedFormatError: If no extractor can read the file.
        """
        text = await extract_contract_text(path)
        return await self.analyze_contract(text, jurisdiction, contract_type)

    async def compare_contracts(self, first: str, second: str) -> ContractComparisonResult:
        return await self._contracts.compare(first, second)

    async def enhance_document(
        self,
        content: str,
        form_data: dict[str, Any],
        document_type: str,
        jurisdiction: str,
    ) -> DocumentEnhancement:
        return await self._documents.enhance(content, form_data, document_type, jurisdiction)

    # --- Administration ---

    async def status(self) -> ServiceStatus:
        """Flags, cache tier stats, queue load and provider attempt stats."""
        cache_stats = {}
        for cache in (self.persistent_cache, self.memory_cache):
            cache_stats[cache.backend] = await cache.stats()
        return ServiceStatus(
            feature_flags=self.flag_store.snapshot().as_public_dict(),
            providers=[f"{c.provider_name}:{c.default_model}" for c in self.orchestrator.clients],
            cache_stats=cache_stats,
            queue=QueueStats(**self.queue.stats()),
            provider_stats=self.call_logger.stats_by_provider(),
            total_provider_calls=self.call_logger.total_calls,
        )

    def update_feature_flags(self, changes: Mapping[str, bool]) -> FeatureFlags:
        """Partial flag update; unknown names raise ValueError."""
        return self.flag_store.update(changes)

    async def clear_cache(self) -> ClearCacheResponse:
        """Empty both cache tiers."""
        cleared = {}
        for cache in (self.persistent_cache, self.memory_cache):
            cleared[cache.backend] = await cache.clear()
        total = sum(cleared.values())
        logger.info("AI response cache cleared (%d entries removed)", total)
        return ClearCacheResponse(
            cleared=cleared,
            message=f"Cache cleared successfully ({total} entries removed)",
        )
