"""
Access-token provider for the Schwab market data client.

The scanner runs unattended, so it only ever exercises the refresh-token
grant: the refresh token comes from configuration and access tokens are
refreshed in memory shortly before they expire.
"""

import logging
import time
from base64 import b64encode
from typing import Optional

import requests

from ..config import SchwabConfig
from .exceptions import SchwabAuthenticationError

logger = logging.getLogger(__name__)


class SchwabTokenProvider:
    """
    Supplies a valid bearer token, refreshing it when needed.

    Attributes:
        config: Schwab configuration with client credentials and refresh token
    """

    def __init__(self, config: SchwabConfig):
        self.config = config
        self._access_token: Optional[str] = None
        self._expires_at = 0.0
        self._refresh_token = config.refresh_token

    def _needs_refresh(self) -> bool:
        if self._access_token is None:
            return True
        return time.time() >= self._expires_at - self.config.refresh_buffer_seconds

    def refresh(self) -> str:
        """
        Exchange the refresh token for a new access token.

        Returns:
            New access token

        Raises:
            SchwabAuthenticationError: If the token endpoint rejects the request
                or cannot be reached
        """
        logger.info("Refreshing Schwab access token")

        credentials = f"{self.config.client_id}:{self.config.client_secret}"
        auth_header = b64encode(credentials.encode()).decode()

        try:
            response = requests.post(
                self.config.token_url,
                headers={
                    "Authorization": f"Basic {auth_header}",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data={
                    "grant_type": "refresh_token",
                    "refresh_token": self._refresh_token,
                },
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Network error during token refresh: {e}")
            raise SchwabAuthenticationError(f"Network error during token refresh: {e}") from e

        if response.status_code != 200:
            logger.error(f"Token refresh failed: {response.status_code} - {response.text}")
            raise SchwabAuthenticationError(
                f"Token refresh failed with status {response.status_code}. "
                f"The refresh token may have expired."
            )

        try:
            data = response.json()
            self._access_token = data["access_token"]
            self._expires_at = time.time() + int(data["expires_in"])
        except (KeyError, ValueError) as e:
            raise SchwabAuthenticationError(f"Invalid response from token endpoint: {e}") from e

        # Schwab may rotate the refresh token
        self._refresh_token = data.get("refresh_token", self._refresh_token)
        logger.debug("Access token refreshed")
        return self._access_token

    def get_access_token(self) -> str:
        if self._needs_refresh():
            return self.refresh()
        return self._access_token

    def get_authorization_header(self) -> dict[str, str]:
        """Authorization header for API requests."""
        return {"Authorization": f"Bearer {self.get_access_token()}"}
