"""
Tests for the FastAPI application factory, middleware and health endpoint.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from burrow.api.app import create_app
from burrow.api.settings import BurrowAPISettings
from burrow.storage.memory import MemoryStorage
from tests._support.kinds import build_registry


class _ExplodingEngine:
    def __init__(self):
        self.storage = MemoryStorage()

    def resource(self, path, **kwargs):
        raise RuntimeError("engine exploded")


class TestCreateApp:
    def test_returns_fastapi_instance(self, app):
        assert isinstance(app, FastAPI)

    def test_docs_outside_resource_paths(self, app):
        assert app.openapi_url == "/_openapi.json"
        assert app.docs_url == "/_docs"

    def test_custom_settings(self):
        s = BurrowAPISettings(_env_file=None, api_prefix="/v2", api_title="Custom")
        app = create_app(settings=s, registry=build_registry(), storage=MemoryStorage())
        assert app.title == "Custom"
        assert app.openapi_url == "/v2/_openapi.json"

    def test_cors_middleware_present(self, app):
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes
        assert "RequestContextMiddleware" in middleware_classes

    def test_settings_and_engine_on_state(self, app, memory_storage):
        assert app.state.settings.check_ancestors is True
        assert app.state.engine.storage is memory_storage
        assert app.state.owns_storage is False

    def test_builds_storage_from_settings(self):
        s = BurrowAPISettings(_env_file=None, storage_url="sqlite://")
        app = create_app(settings=s, registry=build_registry())
        assert app.state.owns_storage is True
        with TestClient(app) as client:
            assert client.get("/_health").json()["storage"] == "SQLiteStorage"


class TestHealth:
    def test_reports_kinds(self, client):
        response = client.get("/_health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["storage"] == "MemoryStorage"
        assert body["kinds"] == ["account", "fragile", "item", "note", "order"]

    def test_health_ignores_prefix(self):
        s = BurrowAPISettings(_env_file=None, api_prefix="/v1")
        with TestClient(create_app(settings=s, registry=build_registry(), storage=MemoryStorage())) as client:
            assert client.get("/_health").status_code == 200
            assert client.post("/v1/account", json={"name": "acme"}).status_code == 201


class TestMiddleware:
    def test_request_id_generated(self, client):
        response = client.get("/_health")
        assert len(response.headers["X-Request-ID"]) == 36

    def test_request_id_echoed(self, client):
        response = client.get("/_health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    def test_elapsed_header(self, client):
        response = client.get("/account")
        assert float(response.headers["X-Elapsed-Ms"]) >= 0

    def test_request_id_on_error_responses(self, client):
        response = client.get("/account/9", headers={"X-Request-ID": "abc123"})
        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "abc123"


class TestUnhandledErrors:
    def test_problem_detail(self, app):
        app.state.engine = _ExplodingEngine()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.delete("/account/1")
        assert response.status_code == 500
        assert response.headers["content-type"] == "application/problem+json"
        body = response.json()
        assert body["title"] == "Internal Server Error"
        assert body["detail"] == "An unexpected error occurred."

    def test_debug_shows_detail(self):
        s = BurrowAPISettings(_env_file=None, debug=True)
        app = create_app(settings=s, registry=build_registry(), storage=MemoryStorage())
        app.state.engine = _ExplodingEngine()
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.delete("/account/1")
        assert response.json()["detail"] == "engine exploded"
