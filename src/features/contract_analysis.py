# src/features/contract_analysis.py — v2
"""Contract analysis and comparison feature.

Long contracts are fitted into the analysis budget with TextBudgeter
before any provider sees them.
Provider failures, including a single failed provider when fallback is
disabled, become a result whose summary explains why.
"""

from __future__ import annotations

import hashlib
import logging

from lexassist.chunking.budget import TextBudgeter
from lexassist.core.models import (
    ContractAnalysisResult,
    ContractComparisonResult,
    ContractRisk,
)
from lexassist.llm.errors import ProviderError, ProvidersExhaustedError, classify_error
from lexassist.llm.models import AIRequestOptions
from lexassist.orchestration.degraded import DEGRADED_MESSAGES
from lexassist.orchestration.orchestrator import Orchestrator, ProviderTask

logger = logging.getLogger(__name__)

ANALYSIS_DISABLED_MESSAGE = (
    "Contract analysis is currently disabled during development. Please try again later."
)

_UNAVAILABLE_RISK = ContractRisk(
    description="Automated analysis could not be completed because AI services are unavailable.",
    severity="High",
    recommendation="Try again later or have the contract reviewed by a qualified lawyer.",
)


def _digest(*parts: str) -> str:
    h = hashlib.sha256()
    for part in parts:
        h.update(part.encode("utf-8"))
        h.update(b"\x00")
    return h.hexdigest()


def _unavailable_analysis(error: Exception) -> ContractAnalysisResult:
    return ContractAnalysisResult(
        risks=[_UNAVAILABLE_RISK.model_copy()],
        summary=DEGRADED_MESSAGES[classify_error(error)],
    )


class ContractAnalysisService:
    """Analyze and compare contracts through the orchestrator.

    Args:
        orchestrator: Request engine.
        max_tokens: Token budget a contract is fitted into before analysis.
    """

    def __init__(self, orchestrator: Orchestrator, max_tokens: int = 30000) -> None:
        self._orchestrator = orchestrator
        self._max_tokens = max_tokens
        self._budgeter = TextBudgeter(orchestrator.complete_with_fallback)

    async def analyze(
        self,
        text: str,
        jurisdiction: str = "Canada",
        contract_type: str = "general",
    ) -> ContractAnalysisResult:
        """Risks, suggestions and a summary. Never raises on provider failure."""
        if not self._orchestrator.flags.enable_contract_analysis:
            return ContractAnalysisResult(summary=ANALYSIS_DISABLED_MESSAGE)

        prepared = await self._budgeter.process_for_budget(text, self._max_tokens)
        task = ProviderTask.structured(
            "contract_analysis",
            prepared,
            lambda client, model: client.analyze_contract(
                prepared, jurisdiction, contract_type, model=model,
            ),
            ContractAnalysisResult,
        )
        options = AIRequestOptions(
            cache_key=f"contract:{jurisdiction}:{contract_type}:{_digest(prepared)}",
            log_prefix="ContractAnalysis",
        )
        try:
            return await self._orchestrator.execute(task, options, degrade=False)
        except (ProvidersExhaustedError, ProviderError) as e:
            return _unavailable_analysis(e)
        except Exception as e:
            logger.exception("Unexpected contract analysis error")
            return _unavailable_analysis(e)

    async def compare(self, first: str, second: str) -> ContractComparisonResult:
        """Substantive differences between two contracts. Never raises on provider failure."""
        if not self._orchestrator.flags.enable_contract_analysis:
            return ContractComparisonResult(summary=ANALYSIS_DISABLED_MESSAGE)

        half_budget = self._max_tokens // 2
        first = await self._budgeter.process_for_budget(first, half_budget)
        second = await self._budgeter.process_for_budget(second, half_budget)
        task = ProviderTask.structured(
            "contract_comparison",
            f"{first}\n\n{second}",
            lambda client, model: client.compare_contracts(first, second, model=model),
            ContractComparisonResult,
        )
        options = AIRequestOptions(
            cache_key=f"contract-compare:{_digest(first, second)}",
            log_prefix="ContractComparison",
        )
        try:
            return await self._orchestrator.execute(task, options, degrade=False)
        except (ProvidersExhaustedError, ProviderError) as e:
            return ContractComparisonResult(summary=DEGRADED_MESSAGES[classify_error(e)])
        except Exception as e:
            logger.exception("Unexpected contract comparison error")
            return ContractComparisonResult(summary=DEGRADED_MESSAGES[classify_error(e)])
