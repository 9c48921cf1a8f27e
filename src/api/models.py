# src/api/models.py — v2
"""API-level models for the administrative surface.

Serialized with camelCase keys to match the web client.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lexassist.cache.models import CacheStats
from lexassist.tracking.models import ProviderStats


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QueueStats(_ApiModel):
    running: int
    waiting: int
    concurrency_limit: int


class ServiceStatus(_ApiModel):
    """Snapshot returned by GET /status."""

    feature_flags: dict[str, bool]
    providers: list[str]
    cache_stats: dict[str, CacheStats]
    queue: QueueStats
    provider_stats: dict[str, ProviderStats] = Field(default_factory=dict)
    total_provider_calls: int = 0


class FeatureFlagsUpdateRequest(_ApiModel):
    """Body of POST /feature-flags: flag name (either spelling) to value."""

    feature_flags: dict[str, bool]


class FeatureFlagsUpdateResponse(_ApiModel):
    success: bool = True
    feature_flags: dict[str, bool]


class ClearCacheResponse(_ApiModel):
    success: bool = True
    cleared: dict[str, int]
    message: str
