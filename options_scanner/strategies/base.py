"""
Strategy interfaces and the earnings guard.

Two interfaces:
- Strategy: find_trades(chain, filter) over a whole chain. This is what the
  scanner calls.
- ExpiryStrategy: find_valid_trades(chain, expiry_date, filter) for a
  single expiration. The credit spread, iron condor, butterfly and ZEBRA
  enumerators implement this.

EarningsGuard turns an ExpiryStrategy into a Strategy: it applies the
historical volatility gate, resolves which expirations to scan, skips
expirations with earnings before them and concatenates the results.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from ..exceptions import NoExpiryFoundError
from ..models.chain import OptionChainSnapshot
from ..models.filters import StrategyFilter
from ..models.trades import TradeCandidate

logger = logging.getLogger(__name__)


class Strategy(ABC):
    """Whole-chain trade finder."""

    name: str = ""

    @abstractmethod
    def find_trades(
        self, chain: OptionChainSnapshot, strategy_filter: StrategyFilter
    ) -> list[TradeCandidate]:
        """Find all candidates in a chain that satisfy the filter."""


class ExpiryStrategy(ABC):
    """Single-expiration trade enumerator."""

    name: str = ""

    @abstractmethod
    def find_valid_trades(
        self, chain: OptionChainSnapshot, expiry_date: str, strategy_filter: StrategyFilter
    ) -> list[TradeCandidate]:
        """Enumerate candidates at one expiration."""


def passes_volatility_gate(
    volatility: Optional[Any], symbol: str, strategy_filter: StrategyFilter
) -> bool:
    """
    Check the underlying's historical volatility against the filter minimum.

    Passes when no minimum is set, no provider is configured, or the
    lookup fails.
    """
    minimum = strategy_filter.min_historical_volatility
    if minimum is None or volatility is None:
        return True

    try:
        historical = volatility.historical_volatility(symbol)
    except Exception as e:
        logger.warning(f"[{symbol}] Historical volatility check failed, allowing symbol: {e}")
        return True

    if historical is None:
        return True
    if historical < minimum:
        logger.info(
            f"[{symbol}] Historical volatility {historical:.1f}% is below minimum "
            f"{minimum:.1f}%, skipping symbol"
        )
        return False
    return True


def has_earnings_before(
    earnings: Optional[Any], symbol: str, expiry_date: str, strategy_filter: StrategyFilter
) -> bool:
    """
    Check whether an earnings announcement falls before an expiration.

    Always False when the filter ignores earnings or no earnings provider is
    configured. A failed lookup is logged and treated as no earnings.
    """
    if strategy_filter.ignore_earnings or earnings is None:
        return False

    try:
        event = earnings.next_earnings(symbol, expiry_date)
    except Exception as e:
        logger.warning(f"[{symbol}] Earnings check failed for {expiry_date}, proceeding: {e}")
        return False

    if event is not None:
        logger.info(f"[{symbol}] Skipping expiry {expiry_date} due to earnings on {event.date}")
        return True
    return False


class EarningsGuard(Strategy):
    """
    Runs a single-expiration enumerator across the filter's expirations.

    Attributes:
        strategy: Wrapped ExpiryStrategy
        earnings: Earnings provider exposing next_earnings(symbol, before)
        volatility: Provider exposing historical_volatility(symbol)
        name: Display name (defaults to the wrapped strategy's name)
    """

    def __init__(
        self,
        strategy: ExpiryStrategy,
        earnings: Optional[Any] = None,
        volatility: Optional[Any] = None,
        name: Optional[str] = None,
    ):
        self.strategy = strategy
        self.earnings = earnings
        self.volatility = volatility
        self.name = name or strategy.name

    def find_trades(
        self, chain: OptionChainSnapshot, strategy_filter: StrategyFilter
    ) -> list[TradeCandidate]:
        symbol = chain.symbol
        if not passes_volatility_gate(self.volatility, symbol, strategy_filter):
            return []

        try:
            expiries = chain.expiries_in_range(
                strategy_filter.min_dte, strategy_filter.max_dte, strategy_filter.target_dte
            )
        except NoExpiryFoundError as e:
            logger.info(f"[{symbol}] {e}")
            return []

        if not expiries:
            logger.debug(
                f"[{symbol}] No expiry dates in range "
                f"[{strategy_filter.min_dte}-{strategy_filter.max_dte}]"
            )
            return []

        logger.info(f"[{symbol}] {self.name}: processing {len(expiries)} expiry dates")

        trades: list[TradeCandidate] = []
        for expiry_date in expiries:
            if has_earnings_before(self.earnings, symbol, expiry_date, strategy_filter):
                continue
            found = self.strategy.find_valid_trades(chain, expiry_date, strategy_filter)
            logger.debug(f"[{symbol}] Found {len(found)} trades for expiry {expiry_date}")
            trades.extend(found)

        logger.info(f"[{symbol}] {self.name}: {len(trades)} trades found")
        return trades
