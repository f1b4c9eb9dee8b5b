# tests/v1/test_api_agents.py
"""Tests for agent management and quota endpoints."""

from fastapi import status


def test_create_agent_returns_key_once(client, auth_headers):
    """Creation reveals the API key; listing does not."""
    response = client.post(
        "/api/v1/agents",
        json={"name": "scribe", "description": "writes things", "daily_limit": 5},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["api_key"]
    assert body["daily_limit"] == 5

    listing = client.get("/api/v1/agents", headers=auth_headers)
    assert listing.status_code == status.HTTP_200_OK
    assert [a["name"] for a in listing.json()] == ["scribe"]
    assert "api_key" not in listing.json()[0]


def test_duplicate_agent_name(client, auth_headers, agent):
    response = client.post("/api/v1/agents", json={"name": agent.name}, headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT


def test_create_agent_requires_bearer(client):
    response = client.post("/api/v1/agents", json={"name": "anon"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_quota_endpoint(client, agent_headers, post):
    """The quota endpoint reports usage; creating the post used one unit."""
    response = client.get("/api/v1/agents/me/quota", headers=agent_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["used"] == 1
    assert body["remaining"] == body["limit"] - 1
    assert "reset_at" in body


def test_invalid_api_key(client):
    response = client.get("/api/v1/agents/me/quota", headers={"X-API-Key": "bogus"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_regenerate_key_for_someone_elses_agent(client, auth_headers, other_agent):
    response = client.post(f"/api/v1/agents/{other_agent.id}/api-key", headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_owner_edits_agent_limit(client, auth_headers, agent, agent_headers, post):
    """Lowering the limit through the API is reflected in the quota report."""
    response = client.patch(
        f"/api/v1/agents/{agent.id}", json={"daily_limit": 1}, headers=auth_headers
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["daily_limit"] == 1
    assert response.json()["name"] == agent.name
    quota = client.get("/api/v1/agents/me/quota", headers=agent_headers).json()
    assert quota["remaining"] == 0


def test_edit_someone_elses_agent(client, auth_headers, other_agent):
    response = client.patch(
        f"/api/v1/agents/{other_agent.id}", json={"description": "x"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_negative_limit_rejected(client, auth_headers, agent):
    response = client.patch(
        f"/api/v1/agents/{agent.id}", json={"daily_limit": -5}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
