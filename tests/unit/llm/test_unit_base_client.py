# tests/unit/llm/test_unit_base_client.py — v3
"""Tests for llm/base_client.py — shared chat, JSON and legal operations."""

from __future__ import annotations

import json

import pytest

from lexassist.core.models import ContractAnalysisResult, ResearchResult
from lexassist.llm import prompts
from lexassist.llm.base_client import RESEARCH_MAX_TOKENS, BaseLLMClient
from lexassist.llm.errors import ProviderError


class TestBaseLLMClient:
    def test_cannot_instantiate(self):
        with pytest.raises(TypeError):
            BaseLLMClient()  # type: ignore[abstract]

    def test_has_required_methods(self):
        for name in ("complete", "chat_respond", "complete_json", "research",
                     "analyze_contract", "compare_contracts", "enhance_document"):
            assert hasattr(BaseLLMClient, name)


class TestChatRespond:
    @pytest.mark.asyncio
    async def test_defaults(self, make_client):
        client = make_client(replies=["Two years."])
        answer = await client.chat_respond("How long do I have to sue?")
        assert answer == "Two years."
        call = client.calls[0]
        assert call["system"] == prompts.DEFAULT_SYSTEM_PROMPT
        assert call["temperature"] == 0.7
        assert call["max_tokens"] == 800
        assert call["json_mode"] is False

    @pytest.mark.asyncio
    async def test_overrides(self, make_client):
        client = make_client()
        await client.chat_respond("q", system="Be brief.", temperature=0.0, max_tokens=50, model="m2")
        call = client.calls[0]
        assert call["system"] == "Be brief."
        assert call["temperature"] == 0.0
        assert call["max_tokens"] == 50
        assert call["model"] == "m2"

    @pytest.mark.asyncio
    async def test_empty_answer_raises(self, make_client):
        client = make_client(replies=["   "])
        with pytest.raises(ProviderError) as exc_info:
            await client.chat_respond("q")
        assert exc_info.value.error_code == "empty_response"


class TestCompleteJson:
    @pytest.mark.asyncio
    async def test_parses_object(self, make_client):
        client = make_client(replies=['```json\n{"summary": "ok"}\n```'])
        assert await client.complete_json("q") == {"summary": "ok"}
        assert client.calls[0]["json_mode"] is True

    @pytest.mark.asyncio
    async def test_prose_fallback(self, make_client):
        client = make_client(replies=["Just prose."])
        assert await client.complete_json("q") == {"summary": "Just prose."}


class TestLegalOperations:
    @pytest.mark.asyncio
    async def test_research(self, make_client):
        payload = {
            "relevantLaws": [{"title": "Limitations Act, 2002", "description": "Basic period", "source": "S.O. 2002, c. 24"}],
            "relevantCases": [],
            "summary": "Two years from discovery.",
        }
        client = make_client(replies=[json.dumps(payload)])
        result = await client.research("limitation period", "ontario", "civil")
        assert isinstance(result, ResearchResult)
        assert result.relevant_laws[0].title == "Limitations Act, 2002"
        call = client.calls[0]
        assert "Ontario" in call["prompt"]
        assert call["max_tokens"] == RESEARCH_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_research_numeric_year_kept(self, make_client):
        payload = {
            "relevantLaws": [{"title": "Residential Tenancies Act", "source": "S.O. 2006, c. 17"}],
            "relevantCases": [{"name": "Smith v. Jones", "citation": "2019 ONCA 1", "year": 2019}],
            "summary": "s",
        }
        client = make_client(replies=[json.dumps(payload)])
        result = await client.research("eviction notice", "ontario")
        assert len(result.relevant_laws) == 1
        assert len(result.relevant_cases) == 1
        assert result.relevant_cases[0].year == "2019"

    @pytest.mark.asyncio
    async def test_contract_numeric_severity_kept(self, make_client):
        payload = {"risks": [{"description": "Unlimited liability", "severity": 3}], "summary": "s"}
        client = make_client(replies=[json.dumps(payload)])
        result = await client.analyze_contract("text")
        assert len(result.risks) == 1
        assert result.risks[0].severity == "3"
        assert result.risks[0].description == "Unlimited liability"

    @pytest.mark.asyncio
    async def test_malformed_shape_keeps_summary(self, make_client):
        client = make_client(replies=['{"summary": "Partial", "risks": "not a list"}'])
        result = await client.analyze_contract("text")
        assert isinstance(result, ContractAnalysisResult)
        assert result.summary == "Partial"
        assert result.risks == []

    @pytest.mark.asyncio
    async def test_compare(self, make_client):
        client = make_client(replies=['{"differences": [{"section": "Term", "impact": "High"}], "summary": "s"}'])
        result = await client.compare_contracts("A", "B")
        assert result.differences[0].section == "Term"

    @pytest.mark.asyncio
    async def test_enhance_document(self, make_client):
        client = make_client(replies=["Enhanced text"])
        result = await client.enhance_document("Draft", {"name": "Jane"}, "will", "Ontario")
        assert result.content == "Enhanced text"
        assert result.enhanced is True
        assert '"name": "Jane"' in client.calls[0]["prompt"]
