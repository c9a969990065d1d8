"""
Tests for error rendering
"""
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from results_service.errors import NotFoundError, ResultsServiceError, ValidationError
from results_service.index import create_app
from results_service.middleware.error_handler import error_handler


@pytest.fixture
def failing_client(store):
    app = create_app(store, seed_sample_data=False)

    async def boom():
        raise RuntimeError("database on fire")

    async def not_found():
        raise NotFoundError("Widget missing", {"widget": "w1"})

    app.add_api_route("/api/boom", boom)
    app.add_api_route("/api/widget", not_found)
    with TestClient(app) as client:
        yield client


class TestErrorHandler:
    def test_unexpected_exception_returns_500(self, failing_client):
        response = failing_client.get("/api/boom")
        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "details": "database on fire",
        }

    def test_service_keeps_running_after_failure(self, failing_client):
        failing_client.get("/api/boom")
        response = failing_client.get("/api/health")
        assert response.status_code == 200

    def test_service_error_rendered_with_context(self, failing_client):
        response = failing_client.get("/api/widget")
        assert response.status_code == 404
        assert response.json() == {"error": "Widget missing", "widget": "w1"}

    def test_unknown_route(self, failing_client):
        response = failing_client.get("/api/nothing-here")
        assert response.status_code == 404
        assert response.json()["path"] == "/api/nothing-here"

    def test_method_not_allowed(self, failing_client):
        response = failing_client.put("/api/health")
        assert response.status_code == 405
        assert "error" in response.json()


class TestErrorHandlerDirect:
    def test_validation_error_status(self):
        response = error_handler(MagicMock(), ValidationError("bad"))
        assert response.status_code == 400

    def test_base_error_defaults_to_500(self):
        response = error_handler(MagicMock(), ResultsServiceError("boom"))
        assert response.status_code == 500

    def test_http_exception_keeps_status(self):
        response = error_handler(MagicMock(), HTTPException(status_code=403, detail="Forbidden"))
        assert response.status_code == 403

    def test_to_dict_merges_context(self):
        assert NotFoundError("missing", {"id": "1"}).to_dict() == {"error": "missing", "id": "1"}
