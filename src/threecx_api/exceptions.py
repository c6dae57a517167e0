"""threecx-api custom exceptions.

Exception Design Principles:
1. Use these custom exceptions only when additional useful context can be provided
2. Token acquisition never raises; failures collapse to an empty token
3. HTTP and transport failures of API endpoints stay as httpx exceptions
"""


class ThreeCXApiError(Exception):
    """Base exception for all threecx-api errors.

    Provides rich context and actionable suggestions beyond standard exceptions.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        suggestions: list[str] | None = None,
        context: dict | None = None,
    ):
        """Initialize ThreeCXApiError.

        Args:
            message: Primary error message for users
            errors: List of specific error details
            suggestions: List of actionable suggestions for resolution
            context: Additional context information as key-value pairs
        """
        super().__init__(message)
        self.message = message
        self.errors = errors or []
        self.suggestions = suggestions or []
        self.context = context or {}


class ConfigError(ThreeCXApiError):
    """Client setup errors - recoverable by fixing how the client is built.

    Covers wiring mistakes that cannot be caught by settings validation:
    - Driving the async-only auth pipeline from a synchronous httpx.Client
    - Missing collaborators that cannot be defaulted

    Invalid settings values raise pydantic.ValidationError from Config itself.
    """

    pass


class InvalidParameterError(ThreeCXApiError):
    """Endpoint wrapper called with arguments the PBX would reject.

    Raised before any request is sent:
    - Empty DN number, device id or action name
    - Make-call parameters without a destination
    """

    pass
