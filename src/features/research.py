# src/features/research.py — v2
"""Legal research feature.

Each provider answers through its own research() (Claude's answer shape is
converted by its adapter), so callers always receive a ResearchResult.
"""

from __future__ import annotations

import logging

from lexassist.core.models import ResearchResult
from lexassist.llm import prompts
from lexassist.llm.errors import ProviderError, ProvidersExhaustedError
from lexassist.llm.models import AIRequestOptions
from lexassist.orchestration.orchestrator import Orchestrator, ProviderTask

logger = logging.getLogger(__name__)

RESEARCH_DISABLED_MESSAGE = (
    "Legal research is currently disabled during development. Please try again later."
)
RESEARCH_FAILED_MESSAGE = (
    "I'm sorry, but there was an error retrieving research results. Please try again later."
)
RESEARCH_UNEXPECTED_MESSAGE = (
    "An unexpected error occurred during research. Please try again."
)


def build_research_prompt(query: str, jurisdiction: str = "canada", practice_area: str = "all") -> str:
    """User prompt for a research query with a readable jurisdiction label."""
    return prompts.RESEARCH_USER_PROMPT.format(
        jurisdiction=prompts.jurisdiction_display_name(jurisdiction),
        practice_area_context=prompts.practice_area_context(practice_area),
        query=query,
    )


def research_cache_key(query: str, jurisdiction: str, practice_area: str) -> str:
    return f"research:{jurisdiction}:{practice_area}:{query}"


async def enhanced_legal_research(
    orchestrator: Orchestrator,
    query: str,
    jurisdiction: str = "canada",
    practice_area: str = "all",
) -> ResearchResult:
    """Research a legal question with provider fallback and caching.

    Never raises: a disabled feature, a failed provider or an exhausted
    chain yields an empty result whose summary explains why.
    """
    if not orchestrator.flags.enable_legal_research:
        return ResearchResult(summary=RESEARCH_DISABLED_MESSAGE)

    task = ProviderTask.structured(
        "research",
        build_research_prompt(query, jurisdiction, practice_area),
        lambda client, model: client.research(query, jurisdiction, practice_area, model=model),
        ResearchResult,
    )
    options = AIRequestOptions(
        cache_key=research_cache_key(query, jurisdiction, practice_area),
        log_prefix="Research",
    )
    try:
        return await orchestrator.execute(task, options, degrade=False)
    except (ProvidersExhaustedError, ProviderError):
        return ResearchResult(summary=RESEARCH_FAILED_MESSAGE)
    except Exception:
        logger.exception("Unexpected research error")
        return ResearchResult(summary=RESEARCH_UNEXPECTED_MESSAGE)
