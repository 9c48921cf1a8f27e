# src/chunking/budget.py — v2
"""Fit long documents into a token budget before analysis.

Three tiers by estimated size: unchanged, condensed section by section, or
condensed harder with a warning banner. LLM summaries come from a
``generate(prompt, options)`` coroutine that raises when no provider
answers; summarize() falls back to word truncation in that case, and any
other failure falls back to structural_extract().
"""

from __future__ import annotations

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable

from lexassist.chunking.paragraph_chunker import chunk_text
from lexassist.llm import prompts
from lexassist.llm.models import AIRequestOptions
from lexassist.llm.token_budget import (
    MANAGEABLE_RATIO,
    MANAGEABLE_TARGET_RATIO,
    OVERSIZE_TARGET_RATIO,
    TOKENS_PER_WORD,
    estimate_tokens,
    fits_budget,
    word_count,
)

logger = logging.getLogger(__name__)

Generate = Callable[[str, AIRequestOptions], Awaitable[str]]

TRUNCATION_MARKER = "\n[... truncated ...]"
OMISSION_MARKER = "[... omitted ...]"
SECTION_COUNT = 4
SUMMARY_TEMPERATURE = 0.1

EXTRACTION_NOTICE = (
    "NOTE: This document was automatically condensed to fit the analysis budget. "
    "Detailed language may have been summarized; legally significant terms were preserved."
)
TRUNCATION_NOTICE = (
    "NOTICE: This document was truncated due to its length. "
    "Sections from the beginning, middle and end have been preserved."
)

_HEADER_RESERVE_LINES = 5


def oversize_warning(estimated_tokens: int) -> str:
    return (
        f"WARNING: This document is exceptionally large (approximately {estimated_tokens} tokens).\n"
        "The analysis covers automatically extracted key sections only. "
        "This is a partial view and some details may be missing."
    )


def truncate_words(text: str, target_words: int) -> str:
    """First target_words words followed by the truncation marker."""
    return " ".join(text.split()[:target_words]) + TRUNCATION_MARKER


class TextBudgeter:
    """Condenses text with an LLM, degrading to plain truncation.

    Args:
        generate: Raising completion coroutine, normally
            Orchestrator.complete_with_fallback.
    """

    def __init__(self, generate: Generate) -> None:
        self._generate = generate

    async def summarize(self, text: str, target_words: int) -> str:
        """Compress text to about target_words words. Never raises."""
        target_words = max(1, target_words)
        if word_count(text) <= target_words:
            return text

        options = AIRequestOptions(
            system=prompts.SUMMARIZE_SYSTEM_PROMPT,
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=max(1, math.ceil(target_words * 1.5)),
            log_prefix="summarize",
        )
        try:
            summary = await self._generate(
                prompts.SUMMARIZE_USER_PROMPT.format(target_words=target_words, text=text),
                options,
            )
        except Exception as e:
            logger.warning("Summarization failed, truncating to %d words: %s", target_words, e)
            return truncate_words(text, target_words)

        if not summary or not summary.strip():
            return truncate_words(text, target_words)
        return summary.strip()

    async def process_for_budget(self, text: str, max_tokens: int) -> str:
        """Return text sized for max_tokens according to the three tiers."""
        if fits_budget(text, max_tokens):
            return text

        estimated = estimate_tokens(text)
        oversize = estimated > MANAGEABLE_RATIO * max_tokens
        ratio = OVERSIZE_TARGET_RATIO if oversize else MANAGEABLE_TARGET_RATIO
        logger.info(
            "Document needs condensing: ~%d tokens for budget %d (%s)",
            estimated, max_tokens, "oversize" if oversize else "manageable",
        )

        try:
            condensed = await self._condense_sections(text, int(ratio * max_tokens))
        except Exception:
            logger.exception("Section condensing failed; using structural extraction")
            return structural_extract(text, max_tokens)

        body = f"{EXTRACTION_NOTICE}\n\n{condensed}"
        if oversize:
            return f"{oversize_warning(estimated)}\n\n{body}"
        return body

    async def _condense_sections(self, text: str, target_budget: int) -> str:
        chunks = chunk_text(text, SECTION_COUNT)
        if not chunks:
            return text
        per_chunk = max(1, target_budget // len(chunks))
        summaries = await asyncio.gather(
            *(self.summarize(chunk, per_chunk) for chunk in chunks)
        )
        total = len(chunks)
        return "\n\n".join(
            f"--- SECTION {i} OF {total} ---\n{summary}"
            for i, summary in enumerate(summaries, start=1)
        )


def structural_extract(text: str, max_tokens: int) -> str:
    """Keep the beginning, a centred middle slice and the end of the text.

    Line budget is split 40/20/40; slices never overlap. Text that already
    fits is returned unchanged.
    """
    estimated = estimate_tokens(text)
    if estimated <= max_tokens:
        return text

    lines = text.split("\n")
    tokens_per_line = estimated / len(lines)
    max_lines = int(max_tokens / tokens_per_line) - _HEADER_RESERVE_LINES

    if max_lines < 3:
        # Too few lines to slice (e.g. one huge line): plain word truncation.
        words = max(1, int(max_tokens / TOKENS_PER_WORD))
        return f"{TRUNCATION_NOTICE}\n\n{truncate_words(text, words)}"

    head = int(max_lines * 0.4)
    middle = int(max_lines * 0.2)
    tail = int(max_lines * 0.4)

    middle_start = max(head, len(lines) // 2 - middle // 2)
    middle_end = middle_start + middle
    tail_start = max(middle_end, len(lines) - tail)

    parts = [
        *lines[:head],
        OMISSION_MARKER,
        *lines[middle_start:middle_end],
        OMISSION_MARKER,
        *lines[tail_start:],
    ]
    return f"{TRUNCATION_NOTICE}\n\n" + "\n".join(parts)
