"""
Earnings calendar for the earnings-avoidance check.

Strategies with ignore_earnings=False skip any expiration that has an
earnings announcement between today and expiration. This module provides
the cached lookup behind that check.

Example:
    from options_scanner.earnings_calendar import EarningsCalendar

    calendar = EarningsCalendar(finnhub_client)
    event = calendar.next_earnings("AAPL", before="2026-03-20")
    if event:
        print(f"{event.symbol} reports on {event.date}")
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from .exceptions import EarningsCheckError

logger = logging.getLogger(__name__)


@dataclass
class EarningsEvent:
    """
    Earnings announcement for one symbol.

    Attributes:
        symbol: Stock ticker symbol
        date: Earnings announcement date (YYYY-MM-DD)
        days_until: Days until earnings (negative if past)
    """

    symbol: str
    date: str
    days_until: Optional[int] = None

    def __post_init__(self) -> None:
        """Calculate days until earnings."""
        if self.days_until is None:
            try:
                self.days_until = (date.fromisoformat(self.date) - date.today()).days
            except ValueError:
                self.days_until = None

    @property
    def is_upcoming(self) -> bool:
        """Check if earnings is today or later."""
        return self.days_until is not None and self.days_until >= 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "symbol": self.symbol,
            "date": self.date,
            "days_until": self.days_until,
            "is_upcoming": self.is_upcoming,
        }


class EarningsCalendar:
    """
    Cached earnings calendar.

    Each symbol is fetched once per TTL over a window running from today to
    at least lookahead_days ahead; narrower queries are answered from that
    window. Safe to share across threads; concurrent lookups for one symbol
    trigger a single fetch.

    Attributes:
        finnhub_client: Client exposing get_earnings_calendar(symbol, from, to)
        cache_ttl_hours: How long to cache earnings data
        lookahead_days: Minimum fetch window length
    """

    def __init__(self, finnhub_client: Any, cache_ttl_hours: int = 24, lookahead_days: int = 365):
        """
        Initialize earnings calendar.

        Args:
            finnhub_client: FinnhubClient instance for API calls
            cache_ttl_hours: Cache time-to-live in hours (default 24)
            lookahead_days: Days ahead fetched on a cache miss (default 365)
        """
        self._client = finnhub_client
        self._cache: dict[str, tuple[list[str], str, float]] = {}
        self._inflight: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._cache_ttl = cache_ttl_hours * 3600
        self._lookahead = timedelta(days=lookahead_days)

    def get_earnings_dates(
        self, symbol: str, from_date: Optional[str] = None, to_date: Optional[str] = None
    ) -> list[str]:
        """
        Get earnings dates for a symbol within a date range.

        Args:
            symbol: Stock ticker symbol
            from_date: Start date (YYYY-MM-DD), default today
            to_date: End date (YYYY-MM-DD), default today + lookahead

        Returns:
            Sorted earnings dates (YYYY-MM-DD) within the range

        Raises:
            EarningsCheckError: If the calendar cannot be fetched
        """
        symbol = symbol.upper()
        today = date.today()
        from_date = from_date or today.isoformat()
        to_date = to_date or (today + self._lookahead).isoformat()

        dates = self._fetch_through(symbol, to_date)
        return [d for d in dates if from_date <= d <= to_date]

    def _cached_dates(self, symbol: str, to_date: str) -> Optional[list[str]]:
        cached = self._cache.get(symbol)
        if cached is None:
            return None
        dates, fetched_through, cached_at = cached
        fresh = (datetime.now().timestamp() - cached_at) < self._cache_ttl
        if fresh and fetched_through >= to_date:
            return dates
        return None

    def _fetch_through(self, symbol: str, to_date: str) -> list[str]:
        with self._lock:
            dates = self._cached_dates(symbol, to_date)
            if dates is not None:
                logger.debug(f"Cache hit for {symbol} earnings dates")
                return dates
            symbol_lock = self._inflight.setdefault(symbol, threading.Lock())

        # Only callers for the same symbol wait here
        with symbol_lock:
            with self._lock:
                dates = self._cached_dates(symbol, to_date)
                if dates is not None:
                    return dates

            today = date.today()
            fetch_through = max(to_date, (today + self._lookahead).isoformat())
            try:
                dates = sorted(
                    self._client.get_earnings_calendar(symbol, today.isoformat(), fetch_through)
                )
            except Exception as e:
                raise EarningsCheckError(f"Failed to fetch earnings for {symbol}: {e}") from e

            with self._lock:
                self._cache[symbol] = (dates, fetch_through, datetime.now().timestamp())
                self._inflight.pop(symbol, None)
            logger.info(f"Fetched {len(dates)} earnings dates for {symbol}")
            return dates

    def next_earnings(self, symbol: str, before: Union[str, date]) -> Optional[EarningsEvent]:
        """
        Get the next earnings event on or before a date.

        Args:
            symbol: Stock ticker symbol
            before: Last date to consider (YYYY-MM-DD or date), inclusive

        Returns:
            Earliest EarningsEvent from today through `before`, or None

        Raises:
            EarningsCheckError: If the calendar cannot be fetched
        """
        if isinstance(before, date):
            before = before.isoformat()

        dates = self.get_earnings_dates(symbol, to_date=before)
        if not dates:
            return None
        return EarningsEvent(symbol=symbol.upper(), date=dates[0])

    def expiration_spans_earnings(
        self, symbol: str, expiration_date: str
    ) -> tuple[bool, Optional[str]]:
        """
        Check if an expiration date spans an earnings announcement.

        Args:
            symbol: Stock ticker symbol
            expiration_date: Option expiration date (YYYY-MM-DD)

        Returns:
            Tuple of (spans_earnings: bool, earnings_date: str or None)

        Raises:
            EarningsCheckError: If the calendar cannot be fetched
        """
        try:
            date.fromisoformat(expiration_date)
        except ValueError:
            return False, None

        event = self.next_earnings(symbol, expiration_date)
        if event is None:
            return False, None
        return True, event.date

    def clear_cache(self, symbol: Optional[str] = None) -> None:
        """
        Clear cache for symbol or all symbols.

        Args:
            symbol: Symbol to clear, or None to clear all
        """
        with self._lock:
            if symbol:
                self._cache.pop(symbol.upper(), None)
            else:
                self._cache.clear()
