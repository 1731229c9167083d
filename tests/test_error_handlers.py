"""Tests for the error envelope produced by the exception handlers."""
import pytest
from fastapi.testclient import TestClient

from app.api.error_handlers import GENERIC_SERVER_ERROR
from app.api.products import get_product_repository
from app.config import get_settings
from app.errors import ConflictError, StorageError
from app.logging_config import mask_sensitive_data
from app.main import app


class FailingRepository:
    def __init__(self, exc):
        self.exc = exc

    def list_categories(self):
        raise self.exc

    def create(self, data):
        raise self.exc


@pytest.fixture
def failing_client(test_db):
    """Client whose repository raises the exception stored on it."""
    repository = FailingRepository(StorageError("Failed to list categories"))
    app.dependency_overrides[get_product_repository] = lambda: repository
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client, repository


def test_storage_error_hidden_outside_development(failing_client):
    client, _ = failing_client
    response = client.get("/api/products/categories")
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": GENERIC_SERVER_ERROR}


def test_storage_error_detailed_in_development(failing_client, monkeypatch):
    monkeypatch.setattr(get_settings(), "app_env", "development")
    client, _ = failing_client
    response = client.get("/api/products/categories")
    assert response.status_code == 500
    body = response.json()
    assert body["message"] == "Failed to list categories"
    assert "StorageError" in body["stack"]


def test_unexpected_exception_becomes_500(failing_client):
    client, repository = failing_client
    repository.exc = RuntimeError("boom")
    response = client.get("/api/products/categories")
    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": GENERIC_SERVER_ERROR}


def test_conflict_error_is_client_error(failing_client):
    client, repository = failing_client
    repository.exc = ConflictError("name")
    response = client.post(
        "/api/products",
        json={"name": "Widget", "description": "A widget", "price": 1, "category": "tools"},
    )
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Name already exists."}


def test_client_errors_keep_message_outside_development(client):
    response = client.get("/api/products?limit=abc")
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation failed"
    assert "stack" not in body


def test_method_not_allowed(client):
    response = client.patch("/api/products")
    assert response.status_code == 405
    assert response.json()["status"] == "error"


def test_mask_sensitive_data():
    masked = mask_sensitive_data(
        {"query": {"token": "abc", "page": "1"}, "items": [{"Password": "x"}]}
    )
    assert masked == {
        "query": {"token": "[REDACTED]", "page": "1"},
        "items": [{"Password": "[REDACTED]"}],
    }
