"""Unit tests for the web application and its authentication."""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient


def test_health_check(client: TestClient) -> None:
    """Tests the health endpoint."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_token_is_unauthorized(client: TestClient) -> None:
    """Tests that a request without bearer token is refused."""
    response = client.post("/api/analyze-edital", json={"fileNames": ["a.pdf"]})

    assert response.status_code == 401


def test_token_with_wrong_signature_is_unauthorized(client: TestClient, make_token: Callable[..., str]) -> None:
    """Tests that a token signed with another secret is refused."""
    token = make_token(secret="another-secret-that-is-also-32-bytes-long")

    response = client.post(
        "/api/analyze-edital", json={"fileNames": ["a.pdf"]}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


def test_expired_token_is_unauthorized(client: TestClient, make_token: Callable[..., str]) -> None:
    """Tests that an expired token is refused."""
    token = make_token({"exp": datetime.now(timezone.utc) - timedelta(minutes=1)})

    response = client.post(
        "/api/analyze-edital", json={"fileNames": ["a.pdf"]}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Token has expired"


def test_token_without_tenant_is_unauthorized(client: TestClient, make_token: Callable[..., str]) -> None:
    """Tests that a token without tenant claim is refused."""
    token = make_token({"tenantId": None})

    response = client.post(
        "/api/analyze-edital", json={"fileNames": ["a.pdf"]}, headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
