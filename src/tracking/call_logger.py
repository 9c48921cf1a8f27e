# src/tracking/call_logger.py — v2
"""Provider attempt logging for the admin status view.

Keeps a bounded history of ProviderAttemptRecord entries; older records
are dropped once max_records is reached.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections import deque
from datetime import datetime, timezone
from pathlib import Path

from lexassist.tracking.models import ProviderAttemptRecord, ProviderStats

logger = logging.getLogger(__name__)


class CallLogger:
    """Accumulates provider attempt records.

    Args:
        max_records: History size; the oldest records are evicted first.
    """

    def __init__(self, max_records: int = 1000) -> None:
        self._records: deque[ProviderAttemptRecord] = deque(maxlen=max_records)
        self._total_calls = 0

    def record(
        self,
        provider: str,
        model: str,
        duration_ms: int,
        prompt_chars: int,
        status: str = "success",
        error_type: str | None = None,
        feature: str | None = None,
    ) -> ProviderAttemptRecord:
        """Record one provider attempt.

        Args:
            provider: Provider identifier (openai, anthropic, deepseek).
            model: Model name used for the attempt.
            duration_ms: Wall time of the attempt.
            prompt_chars: Prompt length in characters.
            status: "success" or "failed".
            error_type: Classified error type for failed attempts.
            feature: Calling feature (chat, research, ...).

        Returns:
            The recorded ProviderAttemptRecord.
        """
        record = ProviderAttemptRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            feature=feature,
            provider=provider,
            model=model,
            duration_ms=duration_ms,
            prompt_chars=prompt_chars,
            status=status,
            error_type=error_type,
        )
        self._records.append(record)
        self._total_calls += 1
        return record

    @property
    def records(self) -> list[ProviderAttemptRecord]:
        """Retained records, oldest first."""
        return list(self._records)

    @property
    def total_calls(self) -> int:
        """Attempts recorded since start, including evicted ones."""
        return self._total_calls

    def stats_by_provider(self) -> dict[str, ProviderStats]:
        """Aggregate retained records per provider."""
        grouped: dict[str, list[ProviderAttemptRecord]] = {}
        for r in self._records:
            grouped.setdefault(r.provider, []).append(r)

        stats: dict[str, ProviderStats] = {}
        for provider, records in grouped.items():
            errors: dict[str, int] = {}
            for r in records:
                if r.status == "failed":
                    key = r.error_type or "general_error"
                    errors[key] = errors.get(key, 0) + 1
            durations = [r.duration_ms for r in records]
            successes = sum(1 for r in records if r.status == "success")
            stats[provider] = ProviderStats(
                provider=provider,
                total_attempts=len(records),
                successes=successes,
                failures=len(records) - successes,
                avg_duration_ms=sum(durations) / len(durations),
                max_duration_ms=max(durations),
                errors_by_type=errors,
            )
        return stats

    def save(self, path: Path) -> None:
        """Save retained records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(), default=str) + "\n")
        logger.debug("Saved %d provider attempt records to %s", len(self._records), path)
