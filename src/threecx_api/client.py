"""3CX client — wires the token pipeline and handles low-level API calls."""

import logging
from functools import cache
from typing import Any

import httpx

from .auth import TokenApiService, TokenProvider
from .call_control import CallControlService
from .config import Config, get_config
from .configuration import ConfigurationService
from .consts import USER_AGENT
from .protocols import AccessTokenProvider
from .transport import BearerTokenAuth

logger = logging.getLogger("threecx-api.client")


class ThreeCXClient:
    """3CX API client with bearer token authentication.

    Responsibilities:
    - Build the shared token pipeline (acquirer, cache, auth stage)
    - Provide low-level HTTP API methods
    - Expose the endpoint services

    Example:
        async with ThreeCXClient(config) as client:
            states = await client.call_control.get_call_control_state()
    """

    def __init__(
        self,
        config: Config | None = None,
        token_provider: AccessTokenProvider | None = None,
        http_client: httpx.AsyncClient | None = None,
        token_http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize ThreeCXClient.

        Args:
            config: Config instance. If None, uses get_config().
            token_provider: Access token provider. If None, creates a
                TokenProvider backed by a TokenApiService.
            http_client: HTTP client for API calls. If None, creates a new one.
            token_http_client: HTTP client for token requests. If None and no
                token_provider is given, creates a new one.
        """
        self.config = config or get_config()
        self._owned_clients: list[httpx.AsyncClient] = []

        if token_provider is None:
            if token_http_client is None:
                token_http_client = self._create_http_client()
            token_provider = TokenProvider(
                TokenApiService(self.config, token_http_client)
            )
        self.token_provider = token_provider

        self.http_client = http_client or self._create_http_client()
        self.auth = BearerTokenAuth(self.token_provider)

        self.call_control = CallControlService(self)
        self.configuration = ConfigurationService(self)

        logger.info(f"3CX client created for {self.config.base_url}")

    def _create_http_client(self) -> httpx.AsyncClient:
        http_client = httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            timeout=self.config.timeout_seconds,
            follow_redirects=True,
        )
        self._owned_clients.append(http_client)
        return http_client

    def url_for(self, path: str) -> str:
        """Absolute URL for an API path."""
        return f"{self.config.base_url}{path}"

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send an authenticated request.

        Args:
            method: HTTP method.
            path: API path relative to the base URL.
            **kwargs: Additional arguments for httpx.AsyncClient.request.

        Returns:
            The successful response.

        Raises:
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        url = self.url_for(path)
        logger.debug(f"{method} {url}")
        response = await self.http_client.request(method, url, auth=self.auth, **kwargs)
        response.raise_for_status()
        logger.debug(f"{method} {url} successful")
        return response

    async def get(self, path: str, **kwargs) -> httpx.Response:
        """GET with authentication, returning the raw response."""
        return await self.request("GET", path, **kwargs)

    async def get_json(self, path: str, **kwargs) -> Any:
        """GET with authentication, returning parsed JSON."""
        response = await self.request("GET", path, **kwargs)
        return response.json()

    async def post_json(self, path: str, **kwargs) -> Any:
        """POST with authentication, returning parsed JSON."""
        response = await self.request("POST", path, **kwargs)
        return response.json()

    async def aclose(self) -> None:
        """Close the HTTP clients created by this instance."""
        for http_client in self._owned_clients:
            await http_client.aclose()
        self._owned_clients.clear()

    async def __aenter__(self) -> "ThreeCXClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


@cache
def get_client() -> ThreeCXClient:
    """Get a cached ThreeCXClient instance with default configuration.

    Raises:
        pydantic.ValidationError: If the environment holds no valid config.
    """
    return ThreeCXClient()
