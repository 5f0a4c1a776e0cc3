"""Tests for the HTTP surface."""

from __future__ import annotations

import pytest
import pytest_mock
from fastapi.testclient import TestClient

from image_bard.api.main import app, get_generator
from image_bard.poem import PoemGenerator


@pytest.fixture
def client() -> TestClient:
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_model_output(mocker: pytest_mock.MockerFixture, content: str) -> None:
    model = mocker.Mock()
    model.complete = mocker.AsyncMock(return_value=content)
    app.dependency_overrides[get_generator] = lambda: PoemGenerator(client=model)


def test_health_returns_ok(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_returns_data_url(client: TestClient, png_bytes: bytes) -> None:
    response = client.post("/api/v1/images/upload", files={"image": ("cat.png", png_bytes, "image/png")})

    body = response.json()
    assert response.status_code == 200
    assert body["success"] is True
    assert body["dataUrl"].startswith("data:image/png;base64,")
    assert body["error"] is None


def test_upload_rejects_unsupported_type(client: TestClient) -> None:
    response = client.post("/api/v1/images/upload", files={"image": ("notes.txt", b"hello", "text/plain")})

    assert response.json() == {
        "success": False,
        "dataUrl": None,
        "error": ".jpg, .jpeg, .png, .webp and .gif files are accepted.",
    }


def test_url_endpoint_rejects_malformed_url(client: TestClient) -> None:
    response = client.post("/api/v1/images/url", json={"imageUrl": "definitely not a url"})

    assert response.json() == {"success": False, "dataUrl": None, "error": "Invalid URL format."}


def test_poem_endpoint(client: TestClient, mocker: pytest_mock.MockerFixture) -> None:
    _use_model_output(mocker, '{"poem": "Two cats, one sunbeam"}')

    response = client.post("/api/v1/poems", json={"photoDataUri": "data:image/png;base64,iVBORw0KGgo="})

    assert response.status_code == 200
    assert response.json() == {"poem": "Two cats, one sunbeam"}


def test_poem_endpoint_maps_generation_error(client: TestClient, mocker: pytest_mock.MockerFixture) -> None:
    _use_model_output(mocker, '{"poem": ""}')

    response = client.post("/api/v1/poems", json={"photoDataUri": "data:image/png;base64,iVBORw0KGgo="})

    assert response.status_code == 502
    assert "no poem" in response.json()["detail"]


def test_poem_endpoint_validates_data_uri(client: TestClient) -> None:
    response = client.post("/api/v1/poems", json={"photoDataUri": "https://images.test/cat.png"})

    assert response.status_code == 422


def test_metrics_are_exposed(client: TestClient) -> None:
    client.post("/api/v1/images/upload", files={"image": ("notes.txt", b"hello", "text/plain")})

    response = client.get("/metrics/")

    assert response.status_code == 200
    assert "image_normalizations_total" in response.text
