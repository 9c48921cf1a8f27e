# src/cache/keys.py — v1
"""Deterministic cache key derivation for AI responses."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any


def canonical_json(value: Any) -> str:
    """Serialize with sorted keys and compact separators."""
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def derive_cache_key(
    model: str,
    prompt: str,
    options: Mapping[str, Any] | None = None,
) -> str:
    """SHA-256 hex digest of the (model, prompt, options) triple.

    Key order inside options does not affect the result, and None options
    hash the same as an empty mapping.
    """
    payload = {
        "model": model,
        "prompt": prompt,
        "options": dict(options) if options else {},
    }
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()
