"""Configuration for the market data providers."""

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError


@dataclass
class FinnhubConfig:
    """
    Configuration for the Finnhub earnings calendar client.

    Attributes:
        api_key: Finnhub API key for authentication
        base_url: Base URL for Finnhub API
        timeout: Request timeout in seconds
        max_retries: Maximum number of retry attempts for failed requests
        retry_delay: Initial delay between retries (seconds)
    """

    api_key: str
    base_url: str = "https://finnhub.io/api/v1"
    timeout: int = 10
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.api_key:
            raise ConfigurationError("API key cannot be empty")
        if self.timeout <= 0:
            raise ConfigurationError("Timeout must be positive")
        if self.max_retries < 0:
            raise ConfigurationError("Max retries cannot be negative")
        if self.retry_delay <= 0:
            raise ConfigurationError("Retry delay must be positive")

    @classmethod
    def from_env(cls, api_key_var: str = "FINNHUB_API_KEY") -> "FinnhubConfig":
        """
        Load configuration from environment variables.

        Raises:
            ConfigurationError: If the API key variable is not set
        """
        api_key = os.getenv(api_key_var)
        if not api_key:
            raise ConfigurationError(
                f"{api_key_var} environment variable not set. "
                f"Get your API key from https://finnhub.io/register"
            )
        return cls(api_key=api_key)


@dataclass
class SchwabConfig:
    """
    Configuration for the Schwab market data client.

    The scanner authenticates with a long-lived refresh token obtained
    out of band; it never runs the interactive authorization flow.

    Attributes:
        client_id: Schwab App client ID from Dev Portal
        client_secret: Schwab App client secret from Dev Portal
        refresh_token: OAuth refresh token
        token_url: Schwab OAuth token endpoint
        refresh_buffer_seconds: Refresh access tokens this long before expiry
        timeout: Request timeout in seconds
        max_retries: Retry attempts for transient errors
        retry_delay: Initial delay between retries (seconds)
    """

    client_id: str
    client_secret: str
    refresh_token: str
    token_url: str = "https://api.schwabapi.com/v1/oauth/token"
    refresh_buffer_seconds: int = 300
    timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 1.0

    def __post_init__(self) -> None:
        if not self.client_id:
            raise ConfigurationError("client_id cannot be empty")
        if not self.client_secret:
            raise ConfigurationError("client_secret cannot be empty")
        if not self.refresh_token:
            raise ConfigurationError("refresh_token cannot be empty")
        if self.refresh_buffer_seconds < 0:
            raise ConfigurationError("refresh_buffer_seconds cannot be negative")

    @classmethod
    def from_env(cls) -> "SchwabConfig":
        """
        Load configuration from environment variables.

        Required environment variables:
            SCHWAB_CLIENT_ID: Schwab App client ID
            SCHWAB_CLIENT_SECRET: Schwab App client secret
            SCHWAB_REFRESH_TOKEN: OAuth refresh token

        Raises:
            ConfigurationError: If a required variable is missing
        """
        client_id = os.environ.get("SCHWAB_CLIENT_ID")
        client_secret = os.environ.get("SCHWAB_CLIENT_SECRET")
        refresh_token = os.environ.get("SCHWAB_REFRESH_TOKEN")

        if not client_id or not client_secret or not refresh_token:
            raise ConfigurationError(
                "Missing Schwab credentials. Set environment variables:\n"
                "  SCHWAB_CLIENT_ID=your_client_id\n"
                "  SCHWAB_CLIENT_SECRET=your_client_secret\n"
                "  SCHWAB_REFRESH_TOKEN=your_refresh_token"
            )

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            refresh_token=refresh_token,
        )
