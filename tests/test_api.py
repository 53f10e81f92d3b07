"""Tests for FastAPI health and version endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """GET /health reports component status."""

    @pytest.mark.anyio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200

    @pytest.mark.anyio
    async def test_health_response_body(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()
        assert data["status"] in ("ok", "degraded")
        assert data["checks"]["api"] is True
        assert data["checks"]["taxonomy"] is True
        assert data["taxonomy_version"] == "1.3"
        assert "environment" in data


class TestVersionEndpoint:
    """GET /api/version returns application version info."""

    @pytest.mark.anyio
    async def test_version_response_body(self, client: AsyncClient) -> None:
        response = await client.get("/api/version")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "NNA Registry"
        assert "version" in data
        assert "environment" in data
