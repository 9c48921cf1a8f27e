# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides scripted LLM clients, settings, cache tiers and a ready
orchestrator. No external dependencies: every vendor SDK is mocked.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from lexassist.cache.memory_store import MemoryResponseCache
from lexassist.cache.sqlite_store import SqliteResponseCache
from lexassist.config.feature_flags import FeatureFlags, FeatureFlagStore
from lexassist.config.settings import Settings
from lexassist.llm.base_client import BaseLLMClient
from lexassist.llm.models import LLMResponse, Message
from lexassist.orchestration.orchestrator import Orchestrator
from lexassist.orchestration.request_queue import RequestQueue
from lexassist.tracking.call_logger import CallLogger


# === Scripted LLM client ===


class FakeLLMClient(BaseLLMClient):
    """BaseLLMClient answering from a script instead of a vendor API.

    Args:
        provider: Reported provider name.
        model: Reported default model.
        replies: Contents returned in order; the last one repeats.
        error: Raised on every call when set.
        delay_s: Sleep before answering (for concurrency tests).
    """

    def __init__(
        self,
        provider: str = "openai",
        model: str = "fake-model",
        replies: list[str] | None = None,
        error: Exception | None = None,
        delay_s: float = 0.0,
    ) -> None:
        super().__init__()
        self._provider = provider
        self._model = model
        self.replies = list(replies or ["Fake answer"])
        self.error = error
        self.delay_s = delay_s
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 800,
        temperature: float = 0.7,
        json_mode: bool = False,
        model: str | None = None,
    ) -> LLMResponse:
        self.calls.append({
            "prompt": messages[-1].content,
            "system": system,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "json_mode": json_mode,
            "model": model,
        })
        if self.delay_s:
            await asyncio.sleep(self.delay_s)
        if self.error is not None:
            raise self.error
        content = self.replies[min(len(self.calls), len(self.replies)) - 1]
        return LLMResponse(content=content, model=model or self._model, provider=self._provider)

    @property
    def provider_name(self) -> str:
        return self._provider

    @property
    def default_model(self) -> str:
        return self._model


class FakeClock:
    """Manually advanced UTC clock for cache expiry tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# === FIXTURES: Settings and flags ===


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env file, with the cache under tmp_path."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        cache_db_path=tmp_path / "cache" / "ai_response_cache.db",
        openai_api_key="sk-test",
        anthropic_api_key="sk-ant-test",
        deepseek_api_key="sk-ds-test",
    )


@pytest.fixture
def flag_store() -> FeatureFlagStore:
    return FeatureFlagStore(FeatureFlags())


# === FIXTURES: LLM clients ===


@pytest.fixture
def make_client() -> Callable[..., FakeLLMClient]:
    """Factory for FakeLLMClient instances."""
    return FakeLLMClient


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


# === FIXTURES: Cache tiers ===


@pytest.fixture
def memory_cache(fake_clock: FakeClock) -> MemoryResponseCache:
    return MemoryResponseCache(default_ttl_s=3600, max_entries=100, clock=fake_clock)


@pytest.fixture
def sqlite_cache(fake_clock: FakeClock):
    cache = SqliteResponseCache(":memory:", default_ttl_s=86400, clock=fake_clock)
    yield cache
    cache.close()


# === FIXTURES: Orchestrator ===


@pytest.fixture
def make_orchestrator(
    flag_store: FeatureFlagStore,
    sqlite_cache: SqliteResponseCache,
    memory_cache: MemoryResponseCache,
) -> Callable[..., Orchestrator]:
    """Factory building an Orchestrator over the shared fixtures.

    Keyword arguments override the Orchestrator constructor arguments.
    """

    def _make(clients: list[BaseLLMClient], **overrides: Any) -> Orchestrator:
        kwargs: dict[str, Any] = {
            "flags": flag_store,
            "persistent_cache": sqlite_cache,
            "memory_cache": memory_cache,
            "queue": RequestQueue(3),
            "call_logger": CallLogger(),
            "attempt_timeout_s": 5.0,
            "degraded_ttl_s": 60,
        }
        kwargs.update(overrides)
        return Orchestrator(clients, **kwargs)

    return _make
