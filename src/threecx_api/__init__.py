"""threecx-api

Typed asyncio client for the 3CX PBX REST API, with a shared OAuth2
client-credentials token cache that authenticates every request.
"""

from .auth import AccessToken, TokenApiService, TokenProvider
from .call_control import CallControlService
from .client import ThreeCXClient, get_client
from .config import Config, get_config, setup_logging
from .configuration import ConfigurationService
from .consts import PACKAGE_VERSION
from .exceptions import ConfigError, InvalidParameterError, ThreeCXApiError
from .models import (
    ActionResponse,
    Device,
    DnState,
    MakeCallParameters,
    Participant,
    ParticipantActionParameters,
)
from .transport import BearerTokenAuth

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "get_client",
    "setup_logging",
    "Config",
    "ThreeCXClient",
    "AccessToken",
    "TokenApiService",
    "TokenProvider",
    "BearerTokenAuth",
    "CallControlService",
    "ConfigurationService",
    "ActionResponse",
    "Device",
    "DnState",
    "MakeCallParameters",
    "Participant",
    "ParticipantActionParameters",
    "ThreeCXApiError",
    "ConfigError",
    "InvalidParameterError",
]
