"""
Historical volatility for the underlying-volatility gate.

Strategies may require a minimum annualized historical volatility of the
underlying before enumerating any trades (min_historical_volatility on the
strategy filter). Volatility is the standard close-to-close estimator:

    σ = sqrt(252 / (n-1) * Σ(r_i - r_mean)²),  r_i = ln(P_i / P_{i-1})

Values returned by the provider are in percent (25.0 = 25% annualized).
"""

import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

TRADING_DAYS_PER_YEAR = 252.0
MIN_DATA_POINTS = 10


@dataclass
class PriceData:
    """
    Daily price history for one symbol.

    Attributes:
        dates: Trading dates (ISO format strings), oldest first
        closes: Closing prices
        volumes: Trading volumes (optional)
    """

    dates: List[str]
    closes: List[float]
    volumes: Optional[List[int]] = None

    def __post_init__(self) -> None:
        """Validate data consistency."""
        if len(self.closes) != len(self.dates):
            raise ValueError("closes must match dates length")
        if self.volumes is not None and len(self.volumes) != len(self.dates):
            raise ValueError("volumes must match dates length")
        if any(c <= 0 for c in self.closes):
            raise ValueError("All prices must be positive")


def close_to_close_volatility(
    prices: List[float],
    window: Optional[int] = None,
    annualization_factor: float = TRADING_DAYS_PER_YEAR,
) -> float:
    """
    Calculate annualized close-to-close realized volatility.

    Args:
        prices: Closing prices, oldest to newest
        window: Lookback window in days (None = use all data)
        annualization_factor: Trading days per year

    Returns:
        Annualized volatility as a decimal (0.25 = 25%)

    Raises:
        ValueError: If fewer than MIN_DATA_POINTS prices are available
    """
    prices_window = prices[-window:] if window and len(prices) > window else prices

    if len(prices_window) < MIN_DATA_POINTS:
        raise ValueError(
            f"Insufficient data: need at least {MIN_DATA_POINTS} points, "
            f"got {len(prices_window)}"
        )

    log_returns = [
        math.log(prices_window[i] / prices_window[i - 1]) for i in range(1, len(prices_window))
    ]
    mean_return = sum(log_returns) / len(log_returns)
    variance = sum((r - mean_return) ** 2 for r in log_returns) / (len(log_returns) - 1)

    return math.sqrt(variance) * math.sqrt(annualization_factor)


class HistoricalVolatilityProvider:
    """
    Per-run historical volatility lookups.

    Each symbol's price history is fetched at most once per provider
    instance. Create one provider per scan run.

    Attributes:
        price_source: Object exposing get_price_history(symbol, period_type, period)
            -> PriceData, such as SchwabClient
        window: Lookback window in trading days (None = the full year fetched)
    """

    def __init__(self, price_source: Any, window: Optional[int] = None):
        self.price_source = price_source
        self.window = window
        self._values: dict[str, float] = {}
        self._lock = threading.Lock()

    def historical_volatility(self, symbol: str) -> float:
        """
        Annualized historical volatility for a symbol, in percent.

        Raises:
            Exception: Whatever the price source raises; callers decide
                whether a failed lookup blocks the symbol
        """
        symbol = symbol.upper()
        with self._lock:
            if symbol in self._values:
                return self._values[symbol]

        history = self.price_source.get_price_history(symbol, period_type="year", period=1)
        value = close_to_close_volatility(history.closes, window=self.window) * 100

        with self._lock:
            self._values[symbol] = value
        logger.debug(f"[{symbol}] Historical volatility: {value:.1f}%")
        return value
