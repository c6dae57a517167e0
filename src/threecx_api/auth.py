"""OAuth2 client-credentials token acquisition and caching."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import ClassVar

import httpx
from pydantic import BaseModel, Field

from .config import Config
from .consts import DEFAULT_TOKEN_EXPIRES_IN

logger = logging.getLogger("threecx-api.auth")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


@dataclass(frozen=True)
class AccessToken:
    """Bearer token with its absolute UTC expiry.

    ``AccessToken.EMPTY`` stands for "no token yet" and is always expired.
    """

    value: str = field(repr=False)
    expires_at: datetime

    EMPTY: ClassVar["AccessToken"]

    def is_valid_at(self, now: datetime) -> bool:
        """True while the expiry instant is strictly after ``now``."""
        return self.expires_at > now


AccessToken.EMPTY = AccessToken(value="", expires_at=datetime.min.replace(tzinfo=UTC))


class TokenResponse(BaseModel):
    """Token endpoint response body."""

    token_type: str = Field(default="Bearer")
    expires_in: int = Field(default=DEFAULT_TOKEN_EXPIRES_IN)
    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class TokenGranted:
    """Successful token exchange."""

    token: AccessToken


@dataclass(frozen=True)
class TokenDenied:
    """Failed token exchange. Carries the empty token for callers that need one."""

    reason: str
    error: Exception | None = None

    @property
    def token(self) -> AccessToken:
        return AccessToken.EMPTY


TokenResult = TokenGranted | TokenDenied


class TokenApiService:
    """Performs the OAuth2 client-credentials exchange.

    Responsibilities:
    - Post the configured credentials to the token endpoint
    - Turn the response into an AccessToken
    - Absorb every failure into a TokenDenied result
    """

    def __init__(
        self,
        config: Config,
        http_client: httpx.AsyncClient,
        clock: Clock = utc_now,
    ):
        """Initialize TokenApiService.

        Args:
            config: Config instance with credentials and base URL.
            http_client: Unauthenticated HTTP client used for token requests only.
            clock: Source of the current UTC time.
        """
        self.config = config
        self.http_client = http_client
        self.clock = clock

    async def request_access_token(self) -> TokenResult:
        """Exchange client credentials for a token.

        Never raises: transport errors, non-success statuses, malformed or
        unexpected bodies are logged and returned as TokenDenied.

        Note:
            ``expires_in`` is applied as minutes from now. The PBX issues
            tokens whose real lifetime matches that reading.
        """
        logger.info(f"Requesting OAuth2 token for client_id {self.config.client_id}")

        form = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "grant_type": self.config.grant_type,
        }

        try:
            response = await self.http_client.post(self.config.token_url, data=form)
            response.raise_for_status()
            payload = response.json()
            if payload is None:
                logger.error("Token endpoint returned an empty body")
                return TokenDenied("empty response")
            body = TokenResponse.model_validate(payload)
            expires_at = self.clock() + timedelta(minutes=body.expires_in)
        except httpx.HTTPError as e:
            logger.error(f"HTTP request failed: {e}")
            return TokenDenied("http error", e)
        except (ValueError, OverflowError) as e:
            # json.JSONDecodeError, pydantic.ValidationError, out-of-range expires_in
            logger.error(f"JSON deserialization failed: {e}")
            return TokenDenied("invalid response", e)
        except Exception as e:
            logger.exception(f"Unexpected error: {e}")
            return TokenDenied("unexpected error", e)

        logger.debug(f"Token issued, type {body.token_type}, expires at {expires_at}")
        return TokenGranted(AccessToken(value=body.access_token, expires_at=expires_at))

    async def fetch_token(self) -> AccessToken:
        """Exchange credentials and return the token, or AccessToken.EMPTY."""
        result = await self.request_access_token()
        return result.token


class TokenProvider:
    """Shared token cache for every authenticated request.

    The validity check and the decision to refresh happen under one lock.
    A refresh runs as a single shared task: callers that find the token
    expired while a refresh is in flight await that same task, so one expired
    batch costs exactly one token request. Waiters are shielded, so a
    cancelled caller does not cancel the refresh the others depend on.
    """

    def __init__(self, token_service: TokenApiService, clock: Clock = utc_now):
        self.token_service = token_service
        self.clock = clock
        self._lock = asyncio.Lock()
        self._cached_token = AccessToken.EMPTY
        self._refresh_task: asyncio.Task[AccessToken] | None = None

    @property
    def token(self) -> AccessToken:
        """The currently cached token (possibly expired or empty)."""
        return self._cached_token

    async def get_access_token(self) -> str:
        """Get a bearer token value, refreshing it when expired.

        Returns:
            The cached token value, or an empty string when the last
            refresh failed.
        """
        async with self._lock:
            if self._cached_token.is_valid_at(self.clock()):
                return self._cached_token.value

            if self._refresh_task is None:
                logger.debug("Cached token expired, starting refresh")
                self._refresh_task = asyncio.create_task(self._refresh_token())
            refresh_task = self._refresh_task

        token = await asyncio.shield(refresh_task)
        return token.value

    async def _refresh_token(self) -> AccessToken:
        try:
            token = await self.token_service.fetch_token()
            # whole-value replace, failures included
            self._cached_token = token
        finally:
            self._refresh_task = None

        if token.value:
            logger.info(f"Token refreshed successfully, expires at {token.expires_at}")
        else:
            logger.warning("Token refresh failed, sending requests with an empty token")
        return token
