# src/config/feature_flags.py — v1
"""Process-wide AI feature flags with snapshot reads and a single writer.

Readers call snapshot() once per request and keep the immutable object for
the whole call, so an administrative update never flips a flag mid-request.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from lexassist.config.settings import Settings

logger = logging.getLogger(__name__)


class FeatureFlags(BaseModel):
    """Immutable snapshot of AI feature flags."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    use_cache: bool = True
    use_request_queue: bool = True
    fallback_enabled: bool = True
    enable_chat_assistant: bool = True
    enable_document_generation: bool = True
    enable_legal_research: bool = True
    enable_contract_analysis: bool = True
    detailed_logging: bool = True

    @classmethod
    def from_settings(cls, settings: Settings) -> FeatureFlags:
        """Build the initial snapshot from AI_* settings."""
        return cls(
            use_cache=settings.ai_use_cache,
            use_request_queue=settings.ai_use_request_queue,
            fallback_enabled=settings.ai_fallback_enabled,
            enable_chat_assistant=settings.ai_enable_chat_assistant,
            enable_document_generation=settings.ai_enable_document_generation,
            enable_legal_research=settings.ai_enable_legal_research,
            enable_contract_analysis=settings.ai_enable_contract_analysis,
            detailed_logging=settings.ai_detailed_logging,
        )

    def as_public_dict(self) -> dict[str, bool]:
        """Return camelCase flag mapping for admin responses."""
        return self.model_dump(by_alias=True)


def _field_lookup() -> dict[str, str]:
    """Map both snake_case names and camelCase aliases to field names."""
    lookup: dict[str, str] = {}
    for name, info in FeatureFlags.model_fields.items():
        lookup[name] = name
        if info.alias:
            lookup[info.alias] = name
    return lookup


class FeatureFlagStore:
    """Holds the current FeatureFlags snapshot.

    Args:
        initial: Starting snapshot. Defaults to all flags enabled.
    """

    def __init__(self, initial: FeatureFlags | None = None) -> None:
        self._current = initial or FeatureFlags()
        self._write_lock = threading.Lock()
        self._lookup = _field_lookup()

    @classmethod
    def from_settings(cls, settings: Settings) -> FeatureFlagStore:
        return cls(FeatureFlags.from_settings(settings))

    def snapshot(self) -> FeatureFlags:
        """Return the current immutable snapshot."""
        return self._current

    def update(self, changes: Mapping[str, bool]) -> FeatureFlags:
        """Apply a partial update and publish a new snapshot.

        Args:
            changes: Flag name (snake_case or camelCase) to new value.

        Returns:
            The newly published snapshot.

        Raises:
            ValueError: If any flag name is unknown. Nothing is applied.
        """
        unknown = sorted(k for k in changes if k not in self._lookup)
        if unknown:
            raise ValueError(f"Unknown feature flag(s): {', '.join(unknown)}")

        update = {self._lookup[k]: bool(v) for k, v in changes.items()}
        with self._write_lock:
            self._current = self._current.model_copy(update=update)
            published = self._current

        logger.info("AI feature flags updated: %s", published.as_public_dict())
        return published
