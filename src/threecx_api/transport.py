"""Request pipeline stage that authenticates outgoing requests."""

import logging
from collections.abc import AsyncGenerator, Generator

import httpx

from .exceptions import ConfigError
from .protocols import AccessTokenProvider

logger = logging.getLogger("threecx-api.transport")


class BearerTokenAuth(httpx.Auth):
    """httpx auth stage attaching ``Authorization: Bearer <token>``.

    The header is set even when the provider hands back an empty token; the
    API then answers with its own authentication error. Responses pass
    through untouched and nothing is retried.
    """

    def __init__(self, token_provider: AccessTokenProvider):
        self.token_provider = token_provider

    def sync_auth_flow(
        self, request: httpx.Request
    ) -> Generator[httpx.Request, httpx.Response, None]:
        raise ConfigError(
            "BearerTokenAuth only supports asynchronous requests",
            suggestions=["Send requests through an httpx.AsyncClient"],
            context={"url": str(request.url)},
        )

    async def async_auth_flow(
        self, request: httpx.Request
    ) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self.token_provider.get_access_token()
        request.headers["Authorization"] = f"Bearer {token}"
        logger.debug(f"Authorized {request.method} {request.url}")
        yield request
