"""
Option chain data models.

An OptionChainSnapshot is a typed view over one option chain response:
two maps (calls and puts) keyed by ExpirationKey, each holding a
strike -> quotes map. The snapshot is built once per fetch and only
mutated by scrub_invalid_quotes(), which the chain cache runs before any
strategy sees the chain.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..constants import INVALID_DELTA_THRESHOLD
from ..exceptions import NoExpiryFoundError

logger = logging.getLogger(__name__)


class OptionType(Enum):
    """Side of the option chain."""

    CALL = "CALL"
    PUT = "PUT"


@dataclass(frozen=True)
class ExpirationKey:
    """
    Expiration map key.

    Chain responses key expirations as "YYYY-MM-DD:DTE". The date is the
    identity used for lookups; DTE is carried along for nearest-expiry
    resolution and range filtering.
    """

    date: str
    dte: int = 0

    @classmethod
    def parse(cls, source: str) -> "ExpirationKey":
        """
        Parse a composite expiration key.

        Args:
            source: Key such as "2026-02-21:30"; a bare date yields dte=0

        Returns:
            ExpirationKey instance
        """
        if ":" not in source:
            return cls(date=source, dte=0)
        date, dte = source.split(":", 1)
        return cls(date=date, dte=int(dte))

    def __str__(self) -> str:
        return f"{self.date}:{self.dte}"


@dataclass(frozen=True)
class OptionQuote:
    """
    Single option contract quote.

    Attributes:
        strike: Strike price
        bid: Bid price per share
        ask: Ask price per share
        mark: Mark (mid) price per share, used for premium filters
        delta: Option delta (negative for puts)
        volatility: Implied volatility in percent, as reported by the feed
        open_interest: Open interest in contracts
        volume: Session volume in contracts
        intrinsic_value: Intrinsic value per share
        extrinsic_value: Extrinsic (time) value per share
        expiration_date: Expiration date (YYYY-MM-DD)
        dte: Days to expiration
    """

    strike: float
    bid: float = 0.0
    ask: float = 0.0
    mark: float = 0.0
    last: float = 0.0
    delta: float = 0.0
    gamma: float = 0.0
    theta: float = 0.0
    vega: float = 0.0
    volatility: float = 0.0
    open_interest: int = 0
    volume: int = 0
    intrinsic_value: float = 0.0
    extrinsic_value: float = 0.0
    expiration_date: str = ""
    dte: int = 0
    put_call: str = ""
    symbol: str = ""
    description: str = ""

    @property
    def abs_delta(self) -> float:
        """Absolute delta, used by every delta bound."""
        return abs(self.delta)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "put_call": self.put_call,
            "strike": self.strike,
            "expiration_date": self.expiration_date,
            "dte": self.dte,
            "bid": self.bid,
            "ask": self.ask,
            "mark": self.mark,
            "delta": self.delta,
            "volatility": self.volatility,
            "open_interest": self.open_interest,
            "volume": self.volume,
        }


StrikeMap = dict[str, list[OptionQuote]]
ExpiryMap = dict[ExpirationKey, StrikeMap]


def quote_at(strike_map: StrikeMap, strike: float) -> Optional[OptionQuote]:
    """
    Return the first quote listed at a strike.

    Strike keys are matched numerically so "95" and "95.0" resolve to the
    same bucket. A missing or empty bucket yields None.
    """
    for key, quotes in strike_map.items():
        if float(key) == strike:
            return quotes[0] if quotes else None
    return None


def strike_ladder(strike_map: StrikeMap) -> list[tuple[float, OptionQuote]]:
    """
    Build an ascending (strike, quote) ladder from a strike map.

    Empty buckets are skipped, so every rung carries a usable quote.
    """
    ladder = []
    for key, quotes in strike_map.items():
        if quotes:
            ladder.append((float(key), quotes[0]))
    ladder.sort(key=lambda rung: rung[0])
    return ladder


@dataclass
class OptionChainSnapshot:
    """
    Option chain for one underlying at one point in time.

    Attributes:
        symbol: Underlying ticker symbol
        underlying_price: Current underlying price
        calls_by_expiry: Call side, ExpirationKey -> strike -> quotes
        puts_by_expiry: Put side, ExpirationKey -> strike -> quotes
        dividend_yield: Annual dividend yield in percent
        interest_rate: Risk-free rate reported with the chain, if any
        volatility: Underlying volatility reported with the chain, if any
        status: Feed status string ("SUCCESS" for a good chain)
    """

    symbol: str
    underlying_price: float
    calls_by_expiry: ExpiryMap = field(default_factory=dict)
    puts_by_expiry: ExpiryMap = field(default_factory=dict)
    dividend_yield: float = 0.0
    interest_rate: Optional[float] = None
    volatility: Optional[float] = None
    status: str = "SUCCESS"

    def _side(self, option_type: OptionType) -> ExpiryMap:
        if option_type == OptionType.CALL:
            return self.calls_by_expiry
        return self.puts_by_expiry

    def options_for_expiry(self, option_type: OptionType, expiry_date: str) -> StrikeMap:
        """
        Get the strike map for one side and expiration date.

        Args:
            option_type: CALL or PUT side
            expiry_date: Expiration date (YYYY-MM-DD)

        Returns:
            Strike -> quotes map, or an empty dict if the date is absent
        """
        for key, strikes in self._side(option_type).items():
            if key.date == expiry_date:
                return strikes
        return {}

    def strike_ladder(
        self, option_type: OptionType, expiry_date: str
    ) -> list[tuple[float, OptionQuote]]:
        """Ascending (strike, quote) pairs for one side and expiration."""
        return strike_ladder(self.options_for_expiry(option_type, expiry_date))

    def sorted_strikes(self, option_type: OptionType, expiry_date: str) -> list[float]:
        """Ascending strikes with at least one quote for one side and expiration."""
        return [strike for strike, _ in self.strike_ladder(option_type, expiry_date)]

    def expiry_nearest_to(self, target_dte: int) -> str:
        """
        Find the expiration whose DTE is closest to a target.

        The put side is searched first; the call side is used only when the
        chain has no puts. Ties go to the first key encountered.

        Args:
            target_dte: Desired days to expiration

        Returns:
            Expiration date (YYYY-MM-DD)

        Raises:
            NoExpiryFoundError: If the chain has no expirations
        """
        keys = list(self.puts_by_expiry) or list(self.calls_by_expiry)
        if not keys:
            raise NoExpiryFoundError(f"No expiry found for {self.symbol}")

        nearest = min(keys, key=lambda k: abs(k.dte - target_dte))
        logger.debug(
            f"[{self.symbol}] Nearest expiry to {target_dte} DTE: {nearest.date} ({nearest.dte} DTE)"
        )
        return nearest.date

    def expiries_in_range(
        self, min_dte: int = 0, max_dte: Optional[int] = None, target_dte: int = 0
    ) -> list[str]:
        """
        List expirations within a DTE window.

        A positive target_dte takes precedence and yields the single nearest
        expiration instead of a window.

        Args:
            min_dte: Lower DTE bound (inclusive)
            max_dte: Upper DTE bound (inclusive), None for unbounded
            target_dte: Single-expiry target, 0 when unused

        Returns:
            Expiration dates ascending by DTE

        Raises:
            NoExpiryFoundError: If target_dte is set and the chain is empty
        """
        if target_dte > 0:
            return [self.expiry_nearest_to(target_dte)]

        upper = max_dte if max_dte is not None else float("inf")
        seen: dict[str, int] = {}
        for key in list(self.puts_by_expiry) + list(self.calls_by_expiry):
            if key.date not in seen and min_dte <= key.dte <= upper:
                seen[key.date] = key.dte

        return sorted(seen, key=lambda date: seen[date])

    def expiry_keys(self) -> list[ExpirationKey]:
        """All distinct expiration keys across both sides, ascending by DTE."""
        keys = {key.date: key for key in list(self.calls_by_expiry) + list(self.puts_by_expiry)}
        return sorted(keys.values(), key=lambda k: k.dte)

    def expiry_dte(self, expiry_date: str) -> Optional[int]:
        """DTE recorded in the expiration key for a date, or None if absent."""
        for key in list(self.puts_by_expiry) + list(self.calls_by_expiry):
            if key.date == expiry_date:
                return key.dte
        return None

    def scrub_invalid_quotes(self) -> int:
        """
        Remove quotes carrying sentinel delta values.

        The upstream feed reports deltas such as -999 when it cannot price a
        contract. Any quote with |delta| > INVALID_DELTA_THRESHOLD is
        dropped from its strike bucket on both sides. Safe to call twice.

        Returns:
            Number of quotes removed
        """
        removed = 0
        for side in (self.calls_by_expiry, self.puts_by_expiry):
            for strikes in side.values():
                for strike, quotes in strikes.items():
                    kept = [q for q in quotes if q.abs_delta <= INVALID_DELTA_THRESHOLD]
                    if len(kept) != len(quotes):
                        removed += len(quotes) - len(kept)
                        strikes[strike] = kept

        if removed:
            logger.debug(f"[{self.symbol}] Scrubbed {removed} quotes with invalid delta")
        return removed

    @property
    def quote_count(self) -> int:
        """Total quotes across both sides."""
        return sum(
            len(quotes)
            for side in (self.calls_by_expiry, self.puts_by_expiry)
            for strikes in side.values()
            for quotes in strikes.values()
        )
