"""Configuration management."""

import logging
from functools import cache

import httpx
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .consts import CLIENT_NAME, DEFAULT_GRANT_TYPE, TOKEN_URL_PATH


class Config(BaseSettings):
    """3CX API settings with computed endpoints.

    Every field can be supplied through a ``THREECX_``-prefixed environment
    variable. Missing or invalid values fail at construction time.
    """

    model_config = SettingsConfigDict(
        env_prefix="THREECX_", case_sensitive=False, extra="ignore"
    )

    base_url: str = Field(
        ..., description="Absolute base address of the 3CX instance"
    )
    client_id: str = Field(..., min_length=1, description="OAuth2 client id")
    client_secret: str = Field(
        ..., min_length=1, repr=False, description="OAuth2 client secret"
    )
    grant_type: str = Field(
        default=DEFAULT_GRANT_TYPE, min_length=1, description="OAuth2 grant type"
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    timeout_seconds: int = Field(
        default=30, gt=0, le=300, description="HTTP request timeout in seconds"
    )

    @field_validator("base_url")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(f"base_url is not a valid URI: {e}") from e
        if not url.is_absolute_url or url.scheme not in ("http", "https"):
            raise ValueError("base_url must be an absolute http(s) URI")
        return value.rstrip("/")

    @computed_field
    @property
    def token_url(self) -> str:
        """URL for fetching access tokens."""
        return f"{self.base_url}{TOKEN_URL_PATH}"


@cache
def get_config() -> Config:
    """Get a cached Config instance built from the environment."""
    return Config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure logging for the entire application"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    return logging.getLogger(CLIENT_NAME)
