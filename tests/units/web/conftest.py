"""Shared fixtures for the web tests."""

from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient
from licitasaas.web.dependencies import get_analysis_service, get_documents_repo, get_storage
from licitasaas.web.main import app
from pytest import MonkeyPatch

JWT_SECRET = "unit-test-secret-with-at-least-32-bytes"


@pytest.fixture
def make_token(monkeypatch: MonkeyPatch) -> Callable[..., str]:
    """Issues tokens signed with the secret configured for the test."""
    monkeypatch.setenv("JWT_SECRET", JWT_SECRET)

    def issue(claims: dict[str, Any] | None = None, secret: str = JWT_SECRET) -> str:
        payload = {"tenantId": "tenant-1", "exp": datetime.now(timezone.utc) + timedelta(hours=1)}
        payload.update(claims or {})
        return jwt.encode(payload, secret, algorithm="HS256")

    return issue


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token()}", "X-Request-ID": "req-1"}


@pytest.fixture
def mock_service() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_storage() -> MagicMock:
    return MagicMock()


@pytest.fixture
def mock_documents_repo() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(
    mock_service: MagicMock, mock_storage: MagicMock, mock_documents_repo: MagicMock
) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_analysis_service] = lambda: mock_service
    app.dependency_overrides[get_storage] = lambda: mock_storage
    app.dependency_overrides[get_documents_repo] = lambda: mock_documents_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
