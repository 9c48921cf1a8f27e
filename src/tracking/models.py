# src/tracking/models.py — v2
"""Tracking domain models: ProviderAttemptRecord, ProviderStats."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class ProviderAttemptRecord(BaseModel):
    """One attempt against one provider within an orchestrated call."""

    call_id: str
    timestamp: datetime
    feature: str | None = None
    provider: str
    model: str
    duration_ms: int
    prompt_chars: int
    status: Literal["success", "failed"]
    error_type: str | None = None


class ProviderStats(BaseModel):
    """Aggregated attempt stats for one provider."""

    provider: str
    total_attempts: int = 0
    successes: int = 0
    failures: int = 0
    avg_duration_ms: float = 0.0
    max_duration_ms: int = 0
    errors_by_type: dict[str, int] = Field(default_factory=dict)

    @property
    def success_rate(self) -> float:
        return self.successes / self.total_attempts if self.total_attempts else 0.0
