"""
Finnhub API client for earnings calendar data.

API Documentation: https://finnhub.io/docs/api

Endpoints used:
- /calendar/earnings: Upcoming earnings announcements (free tier)
"""

import logging
from typing import Any

import requests

from ..api.base_client import BaseAPIClient
from ..config import FinnhubConfig

logger = logging.getLogger(__name__)


class FinnhubAPIError(Exception):
    """Custom exception for Finnhub API errors."""

    pass


class FinnhubClient(BaseAPIClient):
    """
    Client for the Finnhub earnings calendar.

    Inherits session reuse and retry with exponential backoff from
    BaseAPIClient.
    """

    BASE_URL = "https://finnhub.io/api/v1"

    def __init__(self, config: FinnhubConfig):
        """
        Initialize client with configuration.

        Args:
            config: FinnhubConfig instance with API credentials and settings
        """
        super().__init__(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
        )
        self.config = config
        if config.base_url:
            self.BASE_URL = config.base_url

    def get_earnings_calendar(self, symbol: str, from_date: str, to_date: str) -> list[str]:
        """
        Fetch earnings dates for a symbol.

        Args:
            symbol: Stock ticker symbol (e.g., "F", "AAPL")
            from_date: Start date in YYYY-MM-DD format
            to_date: End date in YYYY-MM-DD format

        Returns:
            Sorted list of earnings dates (YYYY-MM-DD format)

        Raises:
            FinnhubAPIError: If API request fails
        """
        symbol = symbol.upper().strip()

        endpoint = "/calendar/earnings"
        params = {"symbol": symbol, "from": from_date, "to": to_date, "token": self.config.api_key}

        logger.info(f"Fetching earnings calendar for {symbol} from {from_date} to {to_date}")

        try:
            response = self.get(endpoint, params=params)

            if response.status_code == 401:
                raise FinnhubAPIError("Authentication failed. Check your API key.")
            elif response.status_code == 429:
                raise FinnhubAPIError(
                    "Rate limit exceeded. Finnhub free tier allows 60 calls/minute."
                )

            response.raise_for_status()
            data: dict[str, Any] = response.json()

        except requests.exceptions.RequestException as e:
            raise FinnhubAPIError(f"Earnings API request failed: {str(e)}") from e
        except ValueError as e:
            raise FinnhubAPIError(f"Invalid JSON response from API: {str(e)}") from e

        earnings_dates = []
        for entry in data.get("earningsCalendar") or []:
            if entry.get("symbol") == symbol and entry.get("date"):
                earnings_dates.append(entry["date"])

        logger.info(f"Found {len(earnings_dates)} earnings dates for {symbol}")
        return sorted(earnings_dates)
