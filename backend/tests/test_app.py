"""
Singers API — Application-Level Tests
=======================================

What:  Welcome and health routes, request-id propagation, router selection
       and the process entry point's exit status.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app import __version__
from app import main


class TestWelcomeAndHealth:

    @pytest.mark.asyncio
    async def test_welcome(self, embedded_client):
        response = await embedded_client.get("/")

        assert response.status_code == 200
        assert response.text == "welcome"

    @pytest.mark.asyncio
    async def test_health_reports_database(self, relational_client):
        response = await relational_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["singer_model"] == "relational"
        assert body["version"] == __version__

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, embedded_client):
        response = await embedded_client.get("/", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, embedded_client):
        response = await embedded_client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8


class TestRouterSelection:

    @pytest.mark.asyncio
    async def test_embedded_rejects_integer_ids(self, embedded_client):
        response = await embedded_client.get("/singer/7")
        assert response.json() == {"error": "'7' is not a valid document id"}

    @pytest.mark.asyncio
    async def test_relational_accepts_integer_ids(self, relational_client):
        response = await relational_client.get("/singer/7")
        assert response.json() == {"error": "No documents in database"}

    @pytest.mark.asyncio
    async def test_error_bodies_documented(self, embedded_client):
        schema = (await embedded_client.get("/openapi.json")).json()

        documented = schema["paths"]["/singers"]["get"]["responses"]["400"]
        ref = documented["content"]["application/json"]["schema"]["$ref"]
        assert ref == "#/components/schemas/ErrorResponse"
        assert "ErrorResponse" in schema["components"]["schemas"]


class TestRun:

    def test_exits_1_when_database_unreachable(self):
        with patch.object(main, "_check_connection", AsyncMock(return_value=False)), \
             patch.object(main, "setup_logging"), \
             patch.object(main.uvicorn, "run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main.run()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()

    def test_serves_on_configured_port(self):
        mock_run = MagicMock()
        with patch.object(main, "_check_connection", AsyncMock(return_value=True)), \
             patch.object(main, "setup_logging"), \
             patch.object(main.uvicorn, "run", mock_run):
            main.run()

        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs["port"] == main.default_settings.backend_port
