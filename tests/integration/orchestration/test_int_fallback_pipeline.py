# tests/integration/orchestration/test_int_fallback_pipeline.py — v1
"""Integration tests for the full request pipeline.

Covers: facade, orchestrator, SQLite and memory tiers, request queue,
provider fallback, degraded responses and call tracking.

Pure Python — scripted providers, SQLite on tmp_path.
"""

from __future__ import annotations

import asyncio

import pytest

from lexassist.api.facade import LegalAIService
from lexassist.llm.errors import ProviderError
from lexassist.orchestration.degraded import DEGRADED_MESSAGES

_QUESTION = "What is the limitation period for a breach of contract claim in Ontario?"
_ANSWER = "Generally two years from the day the claim was discovered (Limitations Act, 2002)."


# ── Fallback and caching through the facade ────────────────────


class TestLimitationPeriodQuestion:
    @pytest.mark.asyncio
    async def test_fallback_then_cache_hit(self, settings, make_client):
        primary = make_client("openai", "gpt-4o", error=RuntimeError("rate limit exceeded"))
        secondary = make_client("deepseek", "deepseek-chat", replies=[_ANSWER])

        async with LegalAIService(settings=settings, clients=[primary, secondary]) as service:
            first = await service.generate_chat_response(_QUESTION)
            second = await service.generate_chat_response(_QUESTION)
            status = await service.status()

        assert first == _ANSWER
        assert second == _ANSWER
        assert len(primary.calls) == 1
        assert len(secondary.calls) == 1
        assert status.provider_stats["openai"].errors_by_type == {"rate_limit": 1}
        assert status.provider_stats["deepseek"].successes == 1
        assert status.cache_stats["sqlite"].hits == 1

    @pytest.mark.asyncio
    async def test_persistent_tier_survives_restart(self, settings, make_client):
        async with LegalAIService(
            settings=settings, clients=[make_client("openai", "gpt-4o", replies=[_ANSWER])],
        ) as service:
            await service.generate_chat_response(_QUESTION)

        restarted_client = make_client("openai", "gpt-4o", replies=["something else"])
        async with LegalAIService(settings=settings, clients=[restarted_client]) as service:
            assert await service.generate_chat_response(_QUESTION) == _ANSWER
        assert restarted_client.calls == []

    @pytest.mark.asyncio
    async def test_different_chain_does_not_share_entries(self, settings, make_client):
        async with LegalAIService(
            settings=settings, clients=[make_client("openai", "gpt-4o", replies=[_ANSWER])],
        ) as service:
            await service.generate_chat_response(_QUESTION)

        other = make_client("anthropic", "claude-test", replies=["From Claude."])
        async with LegalAIService(settings=settings, clients=[other]) as service:
            assert await service.generate_chat_response(_QUESTION) == "From Claude."

    @pytest.mark.asyncio
    async def test_fallback_disabled_surfaces_apology(self, settings, make_client):
        primary = make_client("openai", error=ProviderError("openai", "quota", "rate_limit"))
        secondary = make_client("deepseek", replies=[_ANSWER])

        async with LegalAIService(settings=settings, clients=[primary, secondary]) as service:
            service.update_feature_flags({"fallbackEnabled": False})
            answer = await service.generate_chat_response(_QUESTION)

        assert answer != _ANSWER
        assert secondary.calls == []


# ── Degraded responses ──────────────────────────────────────────


class TestDegradedResponses:
    @pytest.mark.asyncio
    async def test_degraded_answer_expires_quickly(self, make_orchestrator, make_client, fake_clock):
        failing = make_client("openai", error=ProviderError("openai", "quota", "rate_limit"))
        orch = make_orchestrator([failing])

        assert await orch.enhanced_request(_QUESTION) == DEGRADED_MESSAGES["rate_limit"]
        assert await orch.enhanced_request(_QUESTION) == DEGRADED_MESSAGES["rate_limit"]
        assert len(failing.calls) == 1

        fake_clock.advance(61)
        failing.error = None
        failing.replies = [_ANSWER]
        assert await orch.enhanced_request(_QUESTION) == _ANSWER

    @pytest.mark.asyncio
    async def test_success_outlives_degraded_ttl(self, make_orchestrator, make_client, fake_clock):
        client = make_client(replies=[_ANSWER])
        orch = make_orchestrator([client])

        await orch.enhanced_request(_QUESTION)
        fake_clock.advance(3599)
        assert await orch.enhanced_request(_QUESTION) == _ANSWER
        assert len(client.calls) == 1


# ── Queue under load ───────────────────────────────────────────


class TestConcurrentRequests:
    @pytest.mark.asyncio
    async def test_distinct_requests_all_answered(self, settings, make_client):
        settings.queue_concurrency_limit = 2
        client = make_client(replies=["ok"], delay_s=0.01)

        async with LegalAIService(settings=settings, clients=[client]) as service:
            answers = await asyncio.gather(
                *(service.generate_chat_response(f"question {i}") for i in range(6))
            )
            stats = service.queue.stats()

        assert answers == ["ok"] * 6
        assert len(client.calls) == 6
        assert stats["running"] == 0
        assert stats["waiting"] == 0
