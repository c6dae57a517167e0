"""Tests for ThreeCXClient"""

import asyncio
import json
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from conftest import RecordingHandler, mock_async_client, token_json
from threecx_api.auth import TokenProvider
from threecx_api.client import ThreeCXClient
from threecx_api.transport import BearerTokenAuth


class TestThreeCXClient:
    """Test ThreeCXClient HTTP operations

    This class is the authoritative source for HTTP error handling tests.
    Endpoint services only test their own request shapes.
    """

    @pytest.fixture
    def api_handler(self):
        return RecordingHandler(httpx.Response(200, json={"test": "data"}))

    @pytest.fixture
    def client(self, config, mock_token_provider, api_handler):
        return ThreeCXClient(
            config,
            token_provider=mock_token_provider,
            http_client=mock_async_client(api_handler),
        )

    def test_default_wiring(self, config):
        """Without injected collaborators the client builds the token pipeline"""
        client = ThreeCXClient(config)

        assert isinstance(client.token_provider, TokenProvider)
        assert client.token_provider.token_service.config is config
        assert isinstance(client.auth, BearerTokenAuth)
        assert client.auth.token_provider is client.token_provider
        assert client.token_provider.token_service.http_client is not client.http_client

    @pytest.mark.asyncio
    async def test_get_json_success(self, client, api_handler):
        result = await client.get_json("/callcontrol")

        assert result == {"test": "data"}
        request = api_handler.requests[0]
        assert str(request.url) == "https://pbx.test/callcontrol"
        assert request.headers["Authorization"] == "Bearer mock_token"

    @pytest.mark.asyncio
    async def test_post_json_success(self, client, api_handler):
        result = await client.post_json("/callcontrol/100/makecall", json={"a": 1})

        assert result == {"test": "data"}
        request = api_handler.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"a": 1}
        assert request.headers["Authorization"] == "Bearer mock_token"

    @pytest.mark.asyncio
    async def test_request_passes_auth_stage(self, config, mock_token_provider):
        """The auth stage is handed to the underlying client on every request"""
        mock_response = Mock()
        mock_response.raise_for_status.return_value = None
        mock_http_client = Mock(spec=httpx.AsyncClient)
        mock_http_client.request = AsyncMock(return_value=mock_response)
        client = ThreeCXClient(
            config, token_provider=mock_token_provider, http_client=mock_http_client
        )

        response = await client.get("/xapi/v1/Defs", params={"$select": "Id"})

        assert response is mock_response
        mock_http_client.request.assert_awaited_once_with(
            "GET",
            "https://pbx.test/xapi/v1/Defs",
            auth=client.auth,
            params={"$select": "Id"},
        )

    @pytest.mark.parametrize(
        "method,response,expected_exception",
        [
            ("get_json", httpx.ConnectError("Connection failed"), httpx.ConnectError),
            ("post_json", httpx.ConnectError("Connection failed"), httpx.ConnectError),
            ("get_json", httpx.Response(404), httpx.HTTPStatusError),
            ("post_json", httpx.Response(400), httpx.HTTPStatusError),
            ("get_json", httpx.Response(500), httpx.HTTPStatusError),
            ("post_json", httpx.Response(401), httpx.HTTPStatusError),
        ],
    )
    @pytest.mark.asyncio
    async def test_http_error_handling(
        self, config, mock_token_provider, method, response, expected_exception
    ):
        """Endpoint failures propagate to the caller"""
        client = ThreeCXClient(
            config,
            token_provider=mock_token_provider,
            http_client=mock_async_client(RecordingHandler(response)),
        )

        with pytest.raises(expected_exception):
            await getattr(client, method)("/callcontrol")

    @pytest.mark.asyncio
    async def test_aclose_only_closes_owned_clients(self, config):
        injected = mock_async_client(RecordingHandler(httpx.Response(200)))
        client = ThreeCXClient(config, http_client=injected)
        owned = client.token_provider.token_service.http_client

        await client.aclose()

        assert owned.is_closed
        assert not injected.is_closed
        await injected.aclose()

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, config):
        async with ThreeCXClient(config) as client:
            http_client = client.http_client

        assert http_client.is_closed


class TestClientTokenPipeline:
    """Client wired to the real token pipeline against mocked endpoints"""

    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_token(self, config):
        token_handler = RecordingHandler(httpx.Response(200, json=token_json("abc")))
        api_handler = RecordingHandler(httpx.Response(200, json=[]))
        client = ThreeCXClient(
            config,
            http_client=mock_async_client(api_handler),
            token_http_client=mock_async_client(token_handler),
        )

        await asyncio.gather(*(client.get_json("/callcontrol") for _ in range(5)))
        await client.get_json("/callcontrol")

        assert token_handler.count == 1
        assert api_handler.count == 6
        assert {r.headers["Authorization"] for r in api_handler.requests} == {
            "Bearer abc"
        }

    @pytest.mark.asyncio
    async def test_token_failure_sends_empty_bearer(self, config):
        """A failed token exchange surfaces as the API's own 401"""
        token_handler = RecordingHandler(httpx.Response(500))
        api_handler = RecordingHandler(httpx.Response(401))
        client = ThreeCXClient(
            config,
            http_client=mock_async_client(api_handler),
            token_http_client=mock_async_client(token_handler),
        )

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.get_json("/callcontrol")

        assert exc_info.value.response.status_code == 401
        assert api_handler.requests[0].headers["Authorization"] == "Bearer "

        # failures are not sticky
        with pytest.raises(httpx.HTTPStatusError):
            await client.get_json("/callcontrol")
        assert token_handler.count == 2

    @pytest.mark.asyncio
    async def test_out_of_range_expiry_sends_empty_bearer(self, config):
        """An unrepresentable token lifetime still lets the request go out"""
        token_handler = RecordingHandler(
            httpx.Response(200, json=token_json("T", expires_in=10**10))
        )
        api_handler = RecordingHandler(httpx.Response(200, json=[]))
        client = ThreeCXClient(
            config,
            http_client=mock_async_client(api_handler),
            token_http_client=mock_async_client(token_handler),
        )

        assert await client.get_json("/callcontrol") == []
        assert api_handler.requests[0].headers["Authorization"] == "Bearer "
