"""
Configuration module for the Firecrawl SDK.

Settings are resolved in this order:
1. Values passed explicitly to the client or to load_config()
2. Environment variables (FIRECRAWL_API_KEY, FIRECRAWL_API_URL), including
   those read from a local .env file
3. Built-in defaults
"""

import os
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_URL = "https://api.firecrawl.dev"
API_KEY_ENV = "FIRECRAWL_API_KEY"
API_URL_ENV = "FIRECRAWL_API_URL"


class ClientConfig(BaseModel):
    """Client configuration settings."""

    api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv(API_KEY_ENV),
        description="API key sent as a bearer token",
    )
    api_url: str = Field(
        default_factory=lambda: os.getenv(API_URL_ENV) or DEFAULT_API_URL,
        description="Base URL of the Firecrawl API",
    )
    timeout: float = Field(
        default=300.0, gt=0, description="HTTP request timeout in seconds"
    )
    max_retries: int = Field(
        default=3, ge=0, description="Retries for transient failures, beyond the first attempt"
    )
    backoff_factor: float = Field(
        default=0.5, ge=0, description="Base of the exponential backoff, in seconds"
    )
    poll_interval: float = Field(
        default=2.0, gt=0, description="Seconds between job status checks"
    )
    job_timeout: float = Field(
        default=300.0, gt=0, description="Seconds to wait for an async job to finish"
    )


def load_config(**overrides: Any) -> ClientConfig:
    """
    Create a ClientConfig from defaults, the environment and overrides.

    Overrides set to None are ignored so that callers can forward optional
    arguments unchanged.

    Args:
        **overrides: Keyword arguments matching ClientConfig field names.

    Returns:
        A ClientConfig with a resolved API key.

    Raises:
        ConfigError: If an override is unknown or out of range, or no API key is found.
    """
    valid_fields = set(ClientConfig.model_fields)
    invalid = set(overrides) - valid_fields
    if invalid:
        raise ConfigError(
            f"Unknown config fields: {sorted(invalid)}. Valid fields: {sorted(valid_fields)}"
        )

    try:
        config = ClientConfig(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigError(f"Invalid client configuration: {e}") from e

    if not config.api_key or not config.api_key.strip():
        raise ConfigError(
            f"API key is required. Pass api_key or set the {API_KEY_ENV} environment variable."
        )
    return config
