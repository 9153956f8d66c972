"""
Back Office API - Health Endpoint Tests
========================================
"""

from unittest.mock import AsyncMock, patch

import pytest


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["storage"] == "available"

    @pytest.mark.asyncio
    async def test_storage_unavailable_is_degraded(self, test_client):
        with patch("app.routes.health.blob_storage.health_check", AsyncMock(return_value=False)):
            response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["storage"] == "unavailable"

    @pytest.mark.asyncio
    async def test_database_down_is_unhealthy(self, test_client):
        with patch("app.routes.health.engine") as engine:
            engine.connect.side_effect = ConnectionRefusedError("db down")
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"


class TestErrorHandling:

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_generic_500(self):
        from httpx import ASGITransport, AsyncClient

        from app.main import app

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch(
            "app.routes.templates.get_template_preview",
            side_effect=RuntimeError("secret internals"),
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/templates/preview", params={"title": "x"})

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "secret internals" not in response.text
