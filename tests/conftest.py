"""Shared fixtures."""
from urllib.parse import urlsplit

from fastapi.testclient import TestClient
import httpx
import pytest

from calculator_rpc.server.app import create_app


@pytest.fixture
def app_client() -> TestClient:
    """HTTP test client bound to a default add/subtract application."""
    return TestClient(create_app())


@pytest.fixture
def served_app(monkeypatch, app_client: TestClient) -> TestClient:
    """Route ``httpx.post`` calls made by CalculatorClient into the in-process application."""

    def fake_post(url, content=None, headers=None, timeout=None):
        return app_client.post(urlsplit(url).path, content=content, headers=headers)

    monkeypatch.setattr(httpx, "post", fake_post)
    return app_client
