# src/llm/models.py — v2
"""LLM-specific types: Message, LLMResponse, AIRequestOptions."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel


class Message(BaseModel):
    """Single message in a conversation."""

    role: Literal["user", "assistant", "system"]
    content: str


class LLMResponse(BaseModel):
    """Normalized response from any LLM provider."""

    content: str
    input_tokens: int = 0
    output_tokens: int = 0
    model: str
    provider: str
    latency_ms: int = 0
    finish_reason: str | None = None
    raw_response: Any = None


class AIRequestOptions(BaseModel):
    """Per-call options for orchestrated AI requests.

    Every control option left as None falls back to the global feature flag
    snapshot for this one call.
    """

    system: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    cache_key: str | None = None
    use_cache: bool | None = None
    skip_queue: bool = False
    model: str | None = None
    log_prefix: str | None = None
    skip_fallback: bool = False
    json_response: bool = False

    def cache_options(self) -> dict[str, Any]:
        """Response-shaping subset that participates in the cache key."""
        shaping = self.model_dump(
            include={"system", "temperature", "max_tokens", "model", "json_response"},
        )
        return {k: v for k, v in shaping.items() if v is not None and v is not False}
