"""
Schwab market data client.

This module provides the scanner's chain provider. It handles:

- Bearer token injection via SchwabTokenProvider
- Retry with exponential backoff (inherited from BaseAPIClient)
- Mapping of Schwab status codes to SchwabAPIError subclasses
- Wrapping every failure into ChainFetchError at the fetch_chain boundary
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..api.base_client import BaseAPIClient
from ..config import SchwabConfig
from ..exceptions import ChainFetchError
from ..models.chain import OptionChainSnapshot
from ..volatility import PriceData
from . import endpoints
from .auth import SchwabTokenProvider
from .exceptions import (
    SchwabAPIError,
    SchwabAuthenticationError,
    SchwabInvalidSymbolError,
    SchwabRateLimitError,
)
from .parsers import parse_option_chain, parse_price_history

logger = logging.getLogger(__name__)


class SchwabClient(BaseAPIClient):
    """
    Authenticated client for Schwab market data.

    Example:
        config = SchwabConfig.from_env()
        with SchwabClient(config) as client:
            chain = client.fetch_chain("AAPL")
    """

    BASE_URL = "https://api.schwabapi.com"

    def __init__(
        self,
        config: SchwabConfig,
        token_provider: Optional[Any] = None,
    ):
        """
        Initialize Schwab client.

        Args:
            config: Schwab configuration
            token_provider: Object exposing get_authorization_header()
                (creates a SchwabTokenProvider if not provided)
        """
        super().__init__(
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            timeout=config.timeout,
        )
        self.config = config
        self.token_provider = token_provider or SchwabTokenProvider(config)

    def _auth_headers(self) -> Dict[str, str]:
        return self.token_provider.get_authorization_header()

    def _handle_error_response(self, response: requests.Response) -> None:
        raise SchwabAPIError(
            f"Schwab API server error ({response.status_code}): {response.text}"
        )

    def _get_json(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET an endpoint and decode the JSON body.

        Raises:
            SchwabAuthenticationError: If authentication fails (401)
            SchwabRateLimitError: If rate limit exceeded (429)
            SchwabInvalidSymbolError: If symbol not found (404)
            SchwabAPIError: For other API or network errors
        """
        try:
            response = self.get(endpoint, params=params)
        except requests.exceptions.RequestException as e:
            raise SchwabAPIError(f"Network error: {e}") from e

        if response.status_code == 401:
            logger.error(f"Authentication failed (401): {response.text}")
            raise SchwabAuthenticationError(
                "Authentication failed. Access token may be expired or revoked."
            )
        elif response.status_code == 429:
            logger.warning("Rate limit exceeded (429)")
            raise SchwabRateLimitError(
                "Schwab API rate limit exceeded. Please wait before retrying."
            )
        elif response.status_code == 404:
            logger.warning(f"Resource not found (404): {endpoint}")
            raise SchwabInvalidSymbolError(
                f"Resource not found. Check symbol or endpoint: {endpoint}"
            )
        elif not response.ok:
            logger.error(f"API error ({response.status_code}): {response.text}")
            raise SchwabAPIError(f"Schwab API error ({response.status_code}): {response.text}")

        try:
            return response.json()
        except ValueError as e:
            raise SchwabAPIError(f"Invalid JSON response from Schwab: {e}") from e

    def get_option_chain(
        self,
        symbol: str,
        contract_type: Optional[str] = None,
        strike_count: Optional[int] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
    ) -> OptionChainSnapshot:
        """
        Get the option chain for a symbol.

        Args:
            symbol: Underlying stock symbol (e.g., "AAPL")
            contract_type: "CALL", "PUT", or None for both
            strike_count: Number of strikes around the money (None for all)
            from_date: Earliest expiration (YYYY-MM-DD)
            to_date: Latest expiration (YYYY-MM-DD)

        Returns:
            OptionChainSnapshot

        Raises:
            SchwabAPIError: If the request fails or the chain is malformed
        """
        symbol = symbol.upper()
        params: Dict[str, Any] = {
            "symbol": symbol,
            "includeUnderlyingQuote": "true",
        }
        if contract_type:
            params["contractType"] = contract_type.upper()
        if strike_count:
            params["strikeCount"] = strike_count
        if from_date:
            params["fromDate"] = from_date
        if to_date:
            params["toDate"] = to_date

        logger.info(f"Fetching options chain for {symbol}")
        data = self._get_json(endpoints.MARKETDATA_OPTION_CHAINS, params=params)
        try:
            return parse_option_chain(symbol, data)
        except (ValueError, TypeError, AttributeError) as e:
            raise SchwabAPIError(f"Malformed option chain for {symbol}: {e}") from e

    def fetch_chain(self, symbol: str) -> OptionChainSnapshot:
        """
        Chain provider entry point used by OptionChainCache.

        Raises:
            ChainFetchError: On any API, authentication or transport failure
        """
        try:
            return self.get_option_chain(symbol)
        except SchwabAPIError as e:
            logger.error(f"Failed to fetch options chain for {symbol}: {e}")
            raise ChainFetchError(symbol, str(e)) from e

    def get_price_history(
        self,
        symbol: str,
        period_type: str = "month",
        period: int = 3,
        frequency_type: str = "daily",
        frequency: int = 1,
    ) -> PriceData:
        """
        Get daily price history for a symbol.

        Args:
            symbol: Stock symbol
            period_type: "day", "month", "year" or "ytd"
            period: Number of periods
            frequency_type: "minute", "daily", "weekly" or "monthly"
            frequency: Frequency interval

        Returns:
            PriceData with closes, oldest first

        Raises:
            SchwabAPIError: If the request fails or returns no candles
        """
        symbol = symbol.upper()
        params: Dict[str, Any] = {
            "symbol": symbol,
            "periodType": period_type,
            "period": period,
            "frequencyType": frequency_type,
            "frequency": frequency,
        }

        logger.info(f"Fetching price history for {symbol}")
        data = self._get_json(endpoints.MARKETDATA_PRICE_HISTORY, params=params)
        return parse_price_history(symbol, data)
