"""Unit tests for configuration module."""

import pytest

from options_scanner.config import FinnhubConfig, SchwabConfig
from options_scanner.exceptions import ConfigurationError


class TestFinnhubConfig:
    """Test suite for FinnhubConfig class."""

    def test_config_initialization_valid(self):
        """Test successful configuration initialization."""
        config = FinnhubConfig(api_key="test_key_12345")

        assert config.api_key == "test_key_12345"
        assert config.base_url == "https://finnhub.io/api/v1"
        assert config.timeout == 10
        assert config.max_retries == 3
        assert config.retry_delay == 1.0

    def test_config_empty_api_key(self):
        """Test that empty API key raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="API key cannot be empty"):
            FinnhubConfig(api_key="")

    def test_config_invalid_timeout(self):
        """Test that invalid timeout raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Timeout must be positive"):
            FinnhubConfig(api_key="test_key", timeout=0)

    def test_config_negative_retries(self):
        with pytest.raises(ConfigurationError, match="Max retries cannot be negative"):
            FinnhubConfig(api_key="test_key", max_retries=-1)

    def test_config_invalid_retry_delay(self):
        with pytest.raises(ConfigurationError, match="Retry delay must be positive"):
            FinnhubConfig(api_key="test_key", retry_delay=0)

    def test_config_from_env(self, monkeypatch):
        """Test loading configuration from environment variable."""
        monkeypatch.setenv("FINNHUB_API_KEY", "env_test_key")
        assert FinnhubConfig.from_env().api_key == "env_test_key"

    def test_config_from_env_missing_key(self, monkeypatch):
        """Test that a missing environment variable raises ConfigurationError."""
        monkeypatch.delenv("FINNHUB_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="FINNHUB_API_KEY environment variable not set"):
            FinnhubConfig.from_env()


class TestSchwabConfig:
    """Test suite for SchwabConfig class."""

    def test_defaults(self):
        config = SchwabConfig(client_id="id", client_secret="secret", refresh_token="rt")
        assert config.token_url == "https://api.schwabapi.com/v1/oauth/token"
        assert config.refresh_buffer_seconds == 300
        assert config.timeout == 30

    @pytest.mark.parametrize("field", ["client_id", "client_secret", "refresh_token"])
    def test_required_fields(self, field):
        """Test that each credential must be non-empty."""
        values = dict(client_id="id", client_secret="secret", refresh_token="rt")
        values[field] = ""
        with pytest.raises(ConfigurationError, match=f"{field} cannot be empty"):
            SchwabConfig(**values)

    def test_negative_refresh_buffer(self):
        with pytest.raises(ConfigurationError, match="refresh_buffer_seconds"):
            SchwabConfig(
                client_id="id", client_secret="secret", refresh_token="rt",
                refresh_buffer_seconds=-1,
            )

    def test_from_env(self, monkeypatch):
        """Test loading credentials from environment variables."""
        monkeypatch.setenv("SCHWAB_CLIENT_ID", "env_id")
        monkeypatch.setenv("SCHWAB_CLIENT_SECRET", "env_secret")
        monkeypatch.setenv("SCHWAB_REFRESH_TOKEN", "env_rt")

        config = SchwabConfig.from_env()
        assert (config.client_id, config.client_secret, config.refresh_token) == (
            "env_id", "env_secret", "env_rt"
        )

    def test_from_env_missing(self, monkeypatch):
        """Test that missing credentials raise ConfigurationError."""
        monkeypatch.setenv("SCHWAB_CLIENT_ID", "env_id")
        monkeypatch.delenv("SCHWAB_CLIENT_SECRET", raising=False)
        monkeypatch.delenv("SCHWAB_REFRESH_TOKEN", raising=False)
        with pytest.raises(ConfigurationError, match="Missing Schwab credentials"):
            SchwabConfig.from_env()
