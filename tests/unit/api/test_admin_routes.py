# tests/unit/api/test_admin_routes.py — v1
"""Tests for api/admin_routes.py and api/app.py using FastAPI's TestClient."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from lexassist.api.admin_routes import require_admin
from lexassist.api.app import create_app
from lexassist.api.facade import LegalAIService

_PREFIX = "/api/admin/ai-service"


@pytest.fixture
def service(settings, make_client):
    return LegalAIService(settings=settings, clients=[make_client("anthropic", "claude-test")])


@pytest.fixture
def admin_client(service):
    app = create_app(service)
    app.dependency_overrides[require_admin] = lambda: None
    with TestClient(app) as client:
        yield client


class TestAuthorization:
    def test_denied_by_default(self, service):
        with TestClient(create_app(service)) as client:
            response = client.get(f"{_PREFIX}/status")
        assert response.status_code == 403
        assert response.json()["detail"] == "Administrator access required"

    def test_all_routes_guarded(self, service):
        with TestClient(create_app(service)) as client:
            assert client.post(f"{_PREFIX}/clear-cache").status_code == 403
            assert client.post(f"{_PREFIX}/feature-flags", json={"featureFlags": {}}).status_code == 403


class TestStatus:
    def test_shape(self, admin_client):
        response = admin_client.get(f"{_PREFIX}/status")
        assert response.status_code == 200
        data = response.json()
        assert data["providers"] == ["anthropic:claude-test"]
        assert data["featureFlags"]["fallbackEnabled"] is True
        assert set(data["cacheStats"]) == {"sqlite", "memory"}
        assert data["queue"] == {"running": 0, "waiting": 0, "concurrencyLimit": 3}
        assert data["totalProviderCalls"] == 0


class TestFeatureFlags:
    def test_update(self, admin_client, service):
        response = admin_client.post(
            f"{_PREFIX}/feature-flags",
            json={"featureFlags": {"enableLegalResearch": False}},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["featureFlags"]["enableLegalResearch"] is False
        assert service.flag_store.snapshot().enable_legal_research is False

    def test_unknown_flag(self, admin_client, service):
        response = admin_client.post(
            f"{_PREFIX}/feature-flags",
            json={"featureFlags": {"useCache": False, "turboMode": True}},
        )
        assert response.status_code == 400
        assert "turboMode" in response.json()["detail"]
        assert service.flag_store.snapshot().use_cache is True

    @pytest.mark.parametrize("payload", [
        {},
        {"featureFlags": "off"},
        {"featureFlags": {"useCache": [1]}},
    ])
    def test_malformed(self, admin_client, payload):
        response = admin_client.post(f"{_PREFIX}/feature-flags", json=payload)
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid feature flags format"


class TestClearCache:
    def test_clear(self, admin_client, service):
        response = admin_client.post(f"{_PREFIX}/clear-cache")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["cleared"] == {"sqlite": 0, "memory": 0}
        assert body["message"] == "Cache cleared successfully (0 entries removed)"
