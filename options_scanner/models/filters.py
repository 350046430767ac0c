"""
Strategy and leg filter models.

Filters are layered: a StrategyFilter carries the expiry window and the
economics limits shared by every strategy, and each strategy-specific
subtype adds one LegFilter per leg role. The subtype is chosen when the
strategy configuration is parsed, so every enumerator receives the exact
filter type it expects.
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from ..constants import (
    DEFAULT_COST_EFFICIENCY_PERCENT,
    DEFAULT_MARGIN_INTEREST_RATE,
    DEFAULT_SAVINGS_INTEREST_RATE,
    DEFAULT_TOP_TRADES_COUNT,
)
from .chain import OptionQuote


@dataclass
class LegFilter:
    """
    Bounds applied to a single leg's quote.

    Every bound is optional; an unset bound is unconstrained. Delta bounds
    compare against absolute delta and premium bounds against the mark.
    """

    min_delta: Optional[float] = None
    max_delta: Optional[float] = None
    min_premium: Optional[float] = None
    max_premium: Optional[float] = None
    min_open_interest: Optional[int] = None
    min_volume: Optional[int] = None
    min_volatility: Optional[float] = None
    max_volatility: Optional[float] = None

    def passes_min_delta(self, quote: OptionQuote) -> bool:
        return self.min_delta is None or quote.abs_delta >= self.min_delta

    def passes_max_delta(self, quote: OptionQuote) -> bool:
        return self.max_delta is None or quote.abs_delta <= self.max_delta

    def passes_delta(self, quote: OptionQuote) -> bool:
        return self.passes_min_delta(quote) and self.passes_max_delta(quote)

    def passes(self, quote: Optional[OptionQuote]) -> bool:
        """
        Check a quote against every set bound.

        Args:
            quote: Quote to check; None never passes

        Returns:
            True if all configured bounds hold
        """
        if quote is None:
            return False
        if not self.passes_delta(quote):
            return False
        if self.min_premium is not None and quote.mark < self.min_premium:
            return False
        if self.max_premium is not None and quote.mark > self.max_premium:
            return False
        if self.min_open_interest is not None and quote.open_interest < self.min_open_interest:
            return False
        if self.min_volume is not None and quote.volume < self.min_volume:
            return False
        if self.min_volatility is not None and quote.volatility < self.min_volatility:
            return False
        if self.max_volatility is not None and quote.volatility > self.max_volatility:
            return False
        return True


def leg_passes(leg_filter: Optional[LegFilter], quote: Optional[OptionQuote]) -> bool:
    """Full leg check where a missing filter accepts any quote."""
    if leg_filter is None:
        return quote is not None
    return leg_filter.passes(quote)


def leg_passes_min_delta(leg_filter: Optional[LegFilter], quote: OptionQuote) -> bool:
    return leg_filter is None or leg_filter.passes_min_delta(quote)


def leg_passes_max_delta(leg_filter: Optional[LegFilter], quote: OptionQuote) -> bool:
    return leg_filter is None or leg_filter.passes_max_delta(quote)


def leg_passes_delta(leg_filter: Optional[LegFilter], quote: OptionQuote) -> bool:
    return leg_filter is None or leg_filter.passes_delta(quote)


@dataclass
class StrategyFilter:
    """
    Strategy-level filter shared by all strategies.

    Attributes:
        target_dte: Single nearest expiry to this DTE (0 = use the window)
        min_dte: Lower bound of the DTE window (inclusive)
        max_dte: Upper bound of the DTE window (inclusive, None = unbounded)
        max_loss_limit: Maximum loss per trade in dollars (None or <= 0 = unset)
        min_return_on_risk: Minimum return on risk in percent
        max_total_debit: Maximum debit paid in dollars
        max_total_credit: Maximum credit received in dollars
        min_total_credit: Minimum credit received in dollars
        max_cagr_for_break_even: Maximum annualized move to break even (LEAP)
        max_option_price_percent: Maximum premium as percent of price (LEAP)
        ignore_earnings: Skip the earnings check when True
        margin_interest_rate: Annual margin rate in percent (LEAP)
        savings_interest_rate: Annual return on freed cash in percent (LEAP)
        min_historical_volatility: Minimum annualized historical volatility
            of the underlying in percent; symbols below it are skipped
    """

    LEG_ROLES = ()

    target_dte: int = 0
    min_dte: int = 0
    max_dte: Optional[int] = None
    max_loss_limit: Optional[float] = None
    min_return_on_risk: float = 0.0
    max_total_debit: Optional[float] = None
    max_total_credit: Optional[float] = None
    min_total_credit: Optional[float] = None
    max_cagr_for_break_even: Optional[float] = None
    max_option_price_percent: Optional[float] = None
    ignore_earnings: bool = True
    margin_interest_rate: float = DEFAULT_MARGIN_INTEREST_RATE
    savings_interest_rate: float = DEFAULT_SAVINGS_INTEREST_RATE
    min_historical_volatility: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate the DTE window."""
        if self.target_dte < 0:
            raise ValueError("target_dte cannot be negative")
        if self.min_dte < 0:
            raise ValueError("min_dte cannot be negative")
        if self.max_dte is not None and self.max_dte < self.min_dte:
            raise ValueError(f"max_dte ({self.max_dte}) must be >= min_dte ({self.min_dte})")

    def passes_max_loss(self, max_loss: float) -> bool:
        if self.max_loss_limit is None or self.max_loss_limit <= 0:
            return True
        return max_loss <= self.max_loss_limit

    def passes_min_return_on_risk(self, profit: float, max_loss: float) -> bool:
        """
        Check that profit covers the required return on the capital at risk.

        A non-positive max loss has nothing at risk and always passes.
        """
        if max_loss <= 0:
            return True
        required_profit = max_loss * self.min_return_on_risk / 100
        return profit >= required_profit

    def passes_debit_limit(self, debit: float) -> bool:
        if self.max_total_debit is None or self.max_total_debit <= 0:
            return True
        return debit <= self.max_total_debit

    def passes_credit_limit(self, credit: float) -> bool:
        if self.max_total_credit is None or self.max_total_credit <= 0:
            return True
        return credit <= self.max_total_credit

    def passes_min_credit(self, credit: float) -> bool:
        if self.min_total_credit is None:
            return True
        return credit >= self.min_total_credit

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StrategyFilter":
        """
        Build a filter from a plain mapping.

        Nested mappings under leg-role keys become LegFilter instances.

        Args:
            data: Filter parameters keyed by field name

        Returns:
            Filter of this class

        Raises:
            ValueError: If a key is unknown or a value is invalid
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown {cls.__name__} fields: {', '.join(unknown)}")

        kwargs = dict(data)
        for role in cls.LEG_ROLES:
            leg = kwargs.get(role)
            if isinstance(leg, dict):
                leg_known = {f.name for f in fields(LegFilter)}
                leg_unknown = sorted(set(leg) - leg_known)
                if leg_unknown:
                    raise ValueError(f"Unknown {role} fields: {', '.join(leg_unknown)}")
                kwargs[role] = LegFilter(**leg)
        return cls(**kwargs)


@dataclass
class CreditSpreadFilter(StrategyFilter):
    """Filter for put and call credit spreads."""

    LEG_ROLES = ("short_leg", "long_leg")

    short_leg: Optional[LegFilter] = None
    long_leg: Optional[LegFilter] = None


@dataclass
class IronCondorFilter(StrategyFilter):
    """Filter for iron condors, one leg filter per wing leg."""

    LEG_ROLES = ("put_short_leg", "put_long_leg", "call_short_leg", "call_long_leg")

    put_short_leg: Optional[LegFilter] = None
    put_long_leg: Optional[LegFilter] = None
    call_short_leg: Optional[LegFilter] = None
    call_long_leg: Optional[LegFilter] = None


@dataclass
class BrokenWingButterflyFilter(StrategyFilter):
    """Filter for call broken-wing butterflies (long, short x2, long)."""

    LEG_ROLES = ("leg1_long", "leg2_short", "leg3_long")

    leg1_long: Optional[LegFilter] = None
    leg2_short: Optional[LegFilter] = None
    leg3_long: Optional[LegFilter] = None


@dataclass
class ZebraFilter(StrategyFilter):
    """Filter for ZEBRA trades (2 long calls, 1 short call)."""

    LEG_ROLES = ("short_call", "long_call")

    short_call: Optional[LegFilter] = None
    long_call: Optional[LegFilter] = None
    max_net_extrinsic_value: Optional[float] = None


@dataclass
class LongCallLeapFilter(StrategyFilter):
    """
    Filter for long call LEAPs.

    Quality constraints (max_cagr_for_break_even, max_option_price_percent,
    min_cost_savings_percent) may be relaxed by the Top-N strategy. Hard
    constraints (DTE bounds, earnings flag and the long_call delta bounds)
    are never relaxed.
    """

    LEG_ROLES = ("long_call",)

    long_call: Optional[LegFilter] = None
    min_cost_savings_percent: Optional[float] = None
    min_cost_efficiency_percent: Optional[float] = DEFAULT_COST_EFFICIENCY_PERCENT
    top_trades_count: int = DEFAULT_TOP_TRADES_COUNT

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.top_trades_count < 1:
            raise ValueError("top_trades_count must be at least 1")

    def relaxed(self, constraints: tuple[str, ...]) -> "LongCallLeapFilter":
        """Copy of this filter with the named quality constraints cleared."""
        return replace(self, **{name: None for name in constraints})
