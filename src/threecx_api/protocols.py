"""Protocol definitions for dependency injection and interface contracts."""

from typing import Protocol


class AccessTokenProvider(Protocol):
    """Protocol for bearer token providers."""

    async def get_access_token(self) -> str:
        """Get the current access token.

        Returns:
            Bearer token string, empty when no token could be acquired.
        """
        ...
