# src/llm/token_budget.py — v2
"""Token estimation heuristics and budget thresholds.

Word count times a constant factor; a gate for deciding when a document
needs condensing, not an exact accounting of vendor tokenizers.
"""

from __future__ import annotations

import math

TOKENS_PER_WORD = 0.75

# process_for_budget tiers (fractions of the caller's max_tokens)
FITS_RATIO = 0.85
MANAGEABLE_RATIO = 1.3
MANAGEABLE_TARGET_RATIO = 0.8
OVERSIZE_TARGET_RATIO = 0.6


def word_count(text: str) -> int:
    """Number of whitespace-separated words."""
    return len(text.split())


def estimate_tokens(text: str) -> int:
    """Approximate model-token cost of text."""
    return math.ceil(word_count(text) * TOKENS_PER_WORD)


def fits_budget(text: str, max_tokens: int, ratio: float = FITS_RATIO) -> bool:
    """Whether text fits within ratio * max_tokens."""
    return estimate_tokens(text) <= ratio * max_tokens
