import pytest


class TestServiceEndpoints:
    @pytest.mark.asyncio
    async def test_root_reports_running(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "running"

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated_when_missing(self, test_client):
        response = await test_client.get("/")

        assert len(response.headers["X-Request-ID"]) == 32
