"""High-value constants for the threecx-api package."""

# Package metadata
PACKAGE_VERSION = "0.3.0"
CLIENT_NAME = "threecx-api"
USER_AGENT = f"{CLIENT_NAME}/{PACKAGE_VERSION}"

# External API contract consts
TOKEN_URL_PATH = "/connect/token"
CALL_CONTROL_URL_PATH = "/callcontrol"
VERSION_URL_PATH = "/xapi/v1/Defs"
VERSION_HEADER = "X-3CX-Version"

# OAuth2 consts
DEFAULT_GRANT_TYPE = "client_credentials"
DEFAULT_TOKEN_EXPIRES_IN = 60  # interpreted as minutes, see auth.TokenApiService

# Call control consts
DEFAULT_PARTICIPANT_ACTION_REASON = "None"
DEFAULT_TRANSFER_TIMEOUT = 30
