"""Fixtures for API integration tests.

The app runs with in-memory stores; each test gets its own service through
a get_service override.
"""

from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from agentforms.api.app import create_app
from agentforms.api.dependencies import get_service
from agentforms.bootstrap import build_service
from agentforms.config.settings import Settings
from agentforms.providers.llm import TemplateTextProvider, TextGenerationProvider
from tests.factories import agent_payload


@pytest.fixture
def make_client() -> Generator[Callable[..., TestClient], None, None]:
    """Build a TestClient over a fresh service.

    Usage:
        client = make_client(provider=MockTextProvider(), admission={...})
    """
    clients: list[TestClient] = []

    def _make(
        provider: TextGenerationProvider | None = None, **overrides: Any
    ) -> TestClient:
        service = build_service(
            Settings(**overrides), provider=provider or TemplateTextProvider()
        )
        app = create_app()
        app.dependency_overrides[get_service] = lambda: service
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client: Callable[..., TestClient]) -> TestClient:
    return make_client()


@pytest.fixture
def agent_id(client: TestClient) -> str:
    response = client.post("/v1/agents", json=agent_payload())
    assert response.status_code == 201
    return response.json()["id"]


@pytest.fixture
def session_id(client: TestClient, agent_id: str) -> str:
    response = client.post("/v1/sessions", json={"agent_id": agent_id})
    assert response.status_code == 201
    return response.json()["session_id"]
