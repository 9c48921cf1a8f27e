# src/llm/config.py — v2
"""Provider fallback chain resolution.

Resolution order:
  1. AI_PROVIDER_CHAIN (comma-separated provider:model entries, in order)
  2. Hardcoded fallback chain (OpenAI, Anthropic, DeepSeek)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lexassist.config.settings import Settings

logger = logging.getLogger(__name__)

_FALLBACK_CHAIN: tuple[tuple[str, str], ...] = (
    ("openai", "gpt-4o"),
    ("anthropic", "claude-3-7-sonnet-20250219"),
    ("deepseek", "deepseek-chat"),
)


@dataclass(frozen=True)
class LLMAssignment:
    """Resolved provider:model for one position in the chain."""

    provider: str
    model: str
    source: str  # "chain" or "fallback"

    @property
    def key(self) -> str:
        """Return 'provider:model' string."""
        return f"{self.provider}:{self.model}"


def parse_assignment(value: str) -> tuple[str, str] | None:
    """Parse 'provider:model' string. Returns None if malformed."""
    if not value or ":" not in value:
        return None
    provider, model = value.split(":", 1)
    provider, model = provider.strip().lower(), model.strip()
    if not provider or not model:
        return None
    return (provider, model)


def resolve_provider_chain(settings: Settings) -> list[LLMAssignment]:
    """Resolve the ordered provider chain.

    Duplicate providers keep their first position, so no provider is ever
    invoked twice for one request.
    """
    chain: list[LLMAssignment] = []
    seen: set[str] = set()
    for item in settings.ai_provider_chain.split(","):
        parsed = parse_assignment(item)
        if parsed is None:
            if item.strip():
                logger.warning("Ignoring malformed provider chain entry: %r", item)
            continue
        if parsed[0] in seen:
            logger.warning("Ignoring duplicate provider in chain: %s", parsed[0])
            continue
        seen.add(parsed[0])
        chain.append(LLMAssignment(provider=parsed[0], model=parsed[1], source="chain"))

    if chain:
        return chain

    return [
        LLMAssignment(provider=p, model=m, source="fallback")
        for p, m in _FALLBACK_CHAIN
    ]
