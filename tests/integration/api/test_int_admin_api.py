# tests/integration/api/test_int_admin_api.py — v1
"""Integration tests for the admin HTTP surface driving live features.

Covers: app lifespan, admin routes, feature flags seen by features,
cache clearing seen by the orchestrator.

Pure Python — scripted providers, SQLite on tmp_path.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lexassist.api.admin_routes import require_admin
from lexassist.api.app import create_app
from lexassist.api.facade import LegalAIService
from lexassist.features.chat import CHAT_DISABLED_MESSAGE

_PREFIX = "/api/admin/ai-service"


@pytest.fixture
def client_and_service(settings, make_client):
    provider = make_client("openai", "gpt-4o", replies=["first", "second"])
    service = LegalAIService(settings=settings, clients=[provider])
    app = create_app(service)
    app.dependency_overrides[require_admin] = lambda: None
    with TestClient(app) as http:
        yield http, service, provider


class TestAdminControlsFeatures:
    def test_lifespan_starts_sweeper(self, client_and_service):
        _, service, _ = client_and_service
        assert service.sweeper.running

    def test_disable_chat(self, client_and_service):
        http, service, provider = client_and_service
        http.post(f"{_PREFIX}/feature-flags", json={"featureFlags": {"enableChatAssistant": False}})

        answer = http.portal.call(service.generate_chat_response, "hello")
        assert answer == CHAT_DISABLED_MESSAGE
        assert provider.calls == []

    def test_clear_cache_forces_fresh_answer(self, client_and_service):
        http, service, provider = client_and_service
        assert http.portal.call(service.generate_chat_response, "hello") == "first"
        assert http.portal.call(service.generate_chat_response, "hello") == "first"

        body = http.post(f"{_PREFIX}/clear-cache").json()
        assert body["cleared"] == {"sqlite": 1, "memory": 1}

        assert http.portal.call(service.generate_chat_response, "hello") == "second"
        status = http.get(f"{_PREFIX}/status").json()
        assert status["totalProviderCalls"] == 2
        assert status["providerStats"]["openai"]["successes"] == 2

    def test_disable_cache(self, client_and_service):
        http, service, provider = client_and_service
        http.post(f"{_PREFIX}/feature-flags", json={"featureFlags": {"use_cache": False}})

        http.portal.call(service.generate_chat_response, "hello")
        http.portal.call(service.generate_chat_response, "hello")
        assert len(provider.calls) == 2
        assert http.get(f"{_PREFIX}/status").json()["cacheStats"]["sqlite"]["entries"] == 0
