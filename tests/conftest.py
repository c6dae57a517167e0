"""Pytest configuration and shared fixtures"""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from threecx_api.config import Config

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)

BASE_URL = "https://pbx.test"
T0 = datetime(2024, 1, 1, tzinfo=UTC)


class FakeClock:
    """Settable UTC clock for expiry tests."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def token_json(access_token="T", expires_in=60, **extra):
    """Token endpoint JSON body"""
    return {
        "token_type": "Bearer",
        "expires_in": expires_in,
        "access_token": access_token,
        "refresh_token": None,
        **extra,
    }


class RecordingHandler:
    """MockTransport handler that records requests and replays responses.

    Each queued item is an httpx.Response, an exception to raise, or a
    callable taking the request.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, Exception):
            raise item
        if callable(item):
            return item(request)
        # fresh copy, so a queued response can be replayed
        return httpx.Response(item.status_code, headers=item.headers, content=item.content)

    @property
    def count(self) -> int:
        return len(self.requests)


@pytest.fixture
def config():
    """Config fixture with explicit test values"""
    return Config(
        base_url=BASE_URL,
        client_id="test-client",
        client_secret="s3cret",
        log_level="DEBUG",
    )


@pytest.fixture
def clock():
    """Fake clock starting at 2024-01-01T00:00:00Z"""
    return FakeClock()


@pytest.fixture
def mock_token_provider():
    """Token provider returning a fixed token"""
    provider = Mock()
    provider.get_access_token = AsyncMock(return_value="mock_token")
    return provider


def mock_async_client(handler) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by handler"""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def clean_env():
    """Fixture that temporarily clears THREECX_* environment variables."""
    threecx_vars = {
        key: value for key, value in os.environ.items() if key.startswith("THREECX_")
    }

    for key in threecx_vars:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key in list(os.environ):
            if key.startswith("THREECX_"):
                os.environ.pop(key, None)
        os.environ.update(threecx_vars)
