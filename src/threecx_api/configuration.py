"""Configuration endpoints."""

import logging
from typing import TYPE_CHECKING

from .consts import VERSION_HEADER, VERSION_URL_PATH

if TYPE_CHECKING:
    from .client import ThreeCXClient

logger = logging.getLogger("threecx-api.configuration")


class ConfigurationService:
    """Wrappers over the ``/xapi/v1`` configuration API."""

    def __init__(self, client: "ThreeCXClient"):
        self.client = client

    async def get_version(self) -> str:
        """Get the PBX version string.

        The version travels in a response header of a minimal Defs query.

        Returns:
            The first ``X-3CX-Version`` header value, or "" if absent.
        """
        response = await self.client.get(VERSION_URL_PATH, params={"$select": "Id"})
        versions = response.headers.get_list(VERSION_HEADER)
        if not versions:
            logger.warning(f"Response carried no {VERSION_HEADER} header")
            return ""
        return versions[0]
