"""
Base HTTP client shared by the market data providers.

Provides:
- requests.Session reuse with default JSON headers
- Retry with exponential backoff on timeouts, connection errors and 5xx
- A hook for provider-specific status handling

The scanner never retries; all retry policy lives here.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """
    Base class for provider HTTP clients.

    Subclasses set BASE_URL and may override _auth_headers() to add
    credentials and _handle_error_response() to map status codes to
    their own exceptions.
    """

    BASE_URL: str = ""

    def __init__(
        self,
        max_retries: int = 3,
        retry_delay: float = 1.0,
        timeout: int = 30,
    ):
        """
        Initialize base API client.

        Args:
            max_retries: Retry attempts for transient errors
            retry_delay: Base delay in seconds, doubled on each retry
            timeout: Request timeout in seconds
        """
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": f"options-scanner/{self.__class__.__name__}",
        })

        logger.debug(f"{self.__class__.__name__} initialized")

    def _get_full_url(self, endpoint: str) -> str:
        if not self.BASE_URL:
            raise ValueError(f"{self.__class__.__name__} must set BASE_URL class attribute")
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.BASE_URL.rstrip('/')}{endpoint}"

    def _auth_headers(self) -> Dict[str, str]:
        """Per-request credential headers. None by default."""
        return {}

    def _calculate_backoff_delay(self, retry_count: int) -> float:
        return self.retry_delay * (2 ** retry_count)

    def _handle_error_response(self, response: requests.Response) -> None:
        """
        Handle a non-success response.

        Raises:
            requests.exceptions.HTTPError: Unless a subclass maps it first
        """
        response.raise_for_status()

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        """
        Send a request, retrying transient failures with exponential backoff.

        Server errors still failing after the last retry are passed to
        _handle_error_response(). Other non-2xx responses are returned to the
        caller unchanged.

        Raises:
            requests.exceptions.RequestException: If all retry attempts fail
        """
        url = self._get_full_url(endpoint)
        headers = self._auth_headers()

        logger.debug(f"{method} {url}")
        if params:
            logger.debug(f"  Params: {self._redact(params)}")

        retry_count = 0
        while True:
            try:
                response = self.session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json_data,
                    timeout=self.timeout,
                )
            except requests.exceptions.RequestException as e:
                if retry_count >= self.max_retries:
                    logger.error(f"Request failed after {self.max_retries} retries: {e}")
                    raise
                delay = self._calculate_backoff_delay(retry_count)
                logger.warning(
                    f"Network error: {e}. Retrying in {delay}s "
                    f"(attempt {retry_count + 1}/{self.max_retries})"
                )
                time.sleep(delay)
                retry_count += 1
                continue

            if response.status_code >= 500:
                if retry_count >= self.max_retries:
                    logger.error(
                        f"Server error ({response.status_code}) after {self.max_retries} retries"
                    )
                    self._handle_error_response(response)
                    return response
                delay = self._calculate_backoff_delay(retry_count)
                logger.warning(
                    f"Server error ({response.status_code}). "
                    f"Retrying in {delay}s (attempt {retry_count + 1}/{self.max_retries})"
                )
                time.sleep(delay)
                retry_count += 1
                continue

            logger.debug(f"Response: {response.status_code}")
            return response

    @staticmethod
    def _redact(params: Dict[str, Any]) -> Dict[str, Any]:
        return {k: ("***" if k in ("token", "apikey") else v) for k, v in params.items()}

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        return self._request("GET", endpoint, params=params)

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
        logger.debug(f"{self.__class__.__name__} closed")

    def __enter__(self) -> "BaseAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
