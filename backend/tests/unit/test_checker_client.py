"""
Unit tests for CheckerClient — synchronous bulk check against the external checker.

Tests cover:
- Request body carries the server-held API key, urls and mode
- Non-200 responses, timeouts and transport errors map to upstream faults
- Missing configuration fails before any request
- Non-JSON bodies raise UpstreamProtocolError

Version: 1.0.0
"""
import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.clients.checker_client import CheckerClient
from app.core.exceptions import (
    CheckerTimeoutError,
    UpstreamProtocolError,
    UpstreamTransportError,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def checker_settings():
    s = MagicMock()
    s.checker_bulk_check_url = "https://checker.test/api/bulk-check"
    s.checker_api_key = "secret-key"
    s.checker_timeout_seconds = 30.0
    return s


@pytest.fixture
def client(checker_settings):
    return CheckerClient(checker_settings)


class TestBulkCheck:

    @pytest.mark.asyncio
    async def test_returns_json_on_success(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {"results": [{"url": "a.com", "blocked": True}]}

        mock_http = AsyncMock()
        mock_http.post.return_value = mock_response

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            result = await client.bulk_check(["a.com"], "official")

        assert result == {"results": [{"url": "a.com", "blocked": True}]}
        MockAsyncClient.assert_called_once_with(timeout=30.0)
        call_args = mock_http.post.call_args
        assert call_args[0][0] == "https://checker.test/api/bulk-check"
        assert call_args[1]["json"] == {
            "apiKey": "secret-key",
            "urls": ["a.com"],
            "mode": "official",
        }

    @pytest.mark.asyncio
    async def test_default_mode_is_official(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.return_value = {}

        mock_http = AsyncMock()
        mock_http.post.return_value = mock_response

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            await client.bulk_check(["a.com"])

        assert mock_http.post.call_args[1]["json"]["mode"] == "official"

    @pytest.mark.asyncio
    async def test_raises_on_non_200_response(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 403
        mock_response.text = "Forbidden"

        mock_http = AsyncMock()
        mock_http.post.return_value = mock_response

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            with pytest.raises(UpstreamTransportError) as exc_info:
                await client.bulk_check(["a.com"])

        assert "403" in exc_info.value.message
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_timeout_maps_to_checker_timeout(self, client):
        mock_http = AsyncMock()
        mock_http.post.side_effect = httpx.ReadTimeout("timed out")

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            with pytest.raises(CheckerTimeoutError) as exc_info:
                await client.bulk_check(["a.com"])

        assert exc_info.value.status_code == 504

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_transport_fault(self, client):
        mock_http = AsyncMock()
        mock_http.post.side_effect = httpx.ConnectError("refused")

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            with pytest.raises(UpstreamTransportError) as exc_info:
                await client.bulk_check(["a.com"])

        assert not isinstance(exc_info.value, CheckerTimeoutError)

    @pytest.mark.asyncio
    async def test_non_json_body(self, client):
        mock_response = MagicMock()
        mock_response.status_code = 200
        mock_response.json.side_effect = ValueError("Expecting value")

        mock_http = AsyncMock()
        mock_http.post.return_value = mock_response

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            mock_ctx = AsyncMock()
            mock_ctx.__aenter__.return_value = mock_http
            MockAsyncClient.return_value = mock_ctx

            with pytest.raises(UpstreamProtocolError):
                await client.bulk_check(["a.com"])

    @pytest.mark.asyncio
    async def test_missing_configuration(self, checker_settings):
        checker_settings.checker_api_key = ""
        bad_client = CheckerClient(checker_settings)

        with patch("app.clients.checker_client.httpx.AsyncClient") as MockAsyncClient:
            with pytest.raises(UpstreamTransportError) as exc_info:
                await bad_client.bulk_check(["a.com"])

        assert "CHECKER_API_KEY" in exc_info.value.message
        MockAsyncClient.assert_not_called()
