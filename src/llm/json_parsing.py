# src/llm/json_parsing.py — v1
"""Defensive JSON extraction from LLM responses.

Tries, in order: the whole text, a ```json fenced block, the outermost
``{...}`` span. Never raises.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_FENCED = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Return the first JSON object found in text, or None."""
    if not text or not text.strip():
        return None

    candidates = [text.strip()]

    fenced = _FENCED.search(text)
    if fenced:
        candidates.append(fenced.group(1))

    start = text.find("{")
    end = text.rfind("}")
    if start >= 0 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, ValueError):
            continue
        if isinstance(parsed, dict):
            return parsed

    return None


def coerce_structured(text: str | None, prose_field: str = "summary") -> dict[str, Any]:
    """Parse a JSON object from text, falling back to ``{prose_field: text}``."""
    parsed = extract_json_object(text)
    if parsed is not None:
        return parsed

    logger.warning(
        "Structured response was not valid JSON (%d chars); using prose fallback",
        len(text or ""),
    )
    return {prose_field: (text or "").strip()}
