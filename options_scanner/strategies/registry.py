"""
Strategy registry.

Maps a StrategyKind to the factory that builds its strategy and to the
filter class its configuration is parsed into. Adding a strategy means
adding a kind, one factory entry and one filter entry.

Example:
    kind = StrategyKind.from_name("PUT_CREDIT_SPREAD")
    strategy = create_strategy(kind, earnings=calendar)
    trades = strategy.find_trades(chain, filter_class_for(kind).from_dict(params))
"""

from enum import Enum
from typing import Any, Callable, Optional

from ..models.filters import (
    BrokenWingButterflyFilter,
    CreditSpreadFilter,
    IronCondorFilter,
    LongCallLeapFilter,
    StrategyFilter,
    ZebraFilter,
)
from .base import EarningsGuard, ExpiryStrategy, Strategy
from .butterfly import BrokenWingButterflyStrategy
from .credit_spreads import CallCreditSpreadStrategy, PutCreditSpreadStrategy
from .iron_condor import IronCondorStrategy
from .leap import LongCallLeapStrategy
from .leap_top_n import LongCallLeapTopNStrategy
from .zebra import ZebraStrategy


class StrategyKind(Enum):
    """
    Configurable strategy types.

    TECH_ and BULLISH_LONG_ variants run the same enumerator as their base
    kind under their own name; the technical screen that distinguishes
    them is configured per strategy and applied by the scanner.
    """

    PUT_CREDIT_SPREAD = "PUT_CREDIT_SPREAD"
    TECH_PUT_CREDIT_SPREAD = "TECH_PUT_CREDIT_SPREAD"
    BULLISH_LONG_PUT_CREDIT_SPREAD = "BULLISH_LONG_PUT_CREDIT_SPREAD"
    CALL_CREDIT_SPREAD = "CALL_CREDIT_SPREAD"
    TECH_CALL_CREDIT_SPREAD = "TECH_CALL_CREDIT_SPREAD"
    IRON_CONDOR = "IRON_CONDOR"
    BULLISH_LONG_IRON_CONDOR = "BULLISH_LONG_IRON_CONDOR"
    BULLISH_BROKEN_WING_BUTTERFLY = "BULLISH_BROKEN_WING_BUTTERFLY"
    BULLISH_ZEBRA = "BULLISH_ZEBRA"
    LONG_CALL_LEAP = "LONG_CALL_LEAP"
    LONG_CALL_LEAP_TOP_N = "LONG_CALL_LEAP_TOP_N"

    @property
    def display_name(self) -> str:
        return DISPLAY_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "StrategyKind":
        """
        Resolve a kind from its identifier or display name (case-insensitive).

        Raises:
            ValueError: If no kind matches
        """
        wanted = name.strip().upper()
        for kind in cls:
            if wanted in (kind.value, DISPLAY_NAMES[kind].upper()):
                return kind
        raise ValueError(f"Unknown strategy type: {name}")


DISPLAY_NAMES: dict[StrategyKind, str] = {
    StrategyKind.PUT_CREDIT_SPREAD: "Put Credit Spread",
    StrategyKind.TECH_PUT_CREDIT_SPREAD: "Technical Put Credit Spread",
    StrategyKind.BULLISH_LONG_PUT_CREDIT_SPREAD: "Bullish Long Put Credit Spread",
    StrategyKind.CALL_CREDIT_SPREAD: "Call Credit Spread",
    StrategyKind.TECH_CALL_CREDIT_SPREAD: "Technical Call Credit Spread",
    StrategyKind.IRON_CONDOR: "Iron Condor",
    StrategyKind.BULLISH_LONG_IRON_CONDOR: "Bullish Long Iron Condor",
    StrategyKind.BULLISH_BROKEN_WING_BUTTERFLY: "Bullish Broken Wing Butterfly",
    StrategyKind.BULLISH_ZEBRA: "Bullish ZEBRA",
    StrategyKind.LONG_CALL_LEAP: "Long Call LEAP",
    StrategyKind.LONG_CALL_LEAP_TOP_N: "Long Call LEAP Top N",
}

# Single-expiration enumerators, wrapped in an EarningsGuard on creation
EXPIRY_STRATEGIES: dict[StrategyKind, Callable[[], ExpiryStrategy]] = {
    StrategyKind.PUT_CREDIT_SPREAD: PutCreditSpreadStrategy,
    StrategyKind.TECH_PUT_CREDIT_SPREAD: PutCreditSpreadStrategy,
    StrategyKind.BULLISH_LONG_PUT_CREDIT_SPREAD: PutCreditSpreadStrategy,
    StrategyKind.CALL_CREDIT_SPREAD: CallCreditSpreadStrategy,
    StrategyKind.TECH_CALL_CREDIT_SPREAD: CallCreditSpreadStrategy,
    StrategyKind.IRON_CONDOR: IronCondorStrategy,
    StrategyKind.BULLISH_LONG_IRON_CONDOR: IronCondorStrategy,
    StrategyKind.BULLISH_BROKEN_WING_BUTTERFLY: BrokenWingButterflyStrategy,
    StrategyKind.BULLISH_ZEBRA: ZebraStrategy,
}

# Whole-chain strategies that resolve their own expirations
CHAIN_STRATEGIES: dict[StrategyKind, Callable[..., Strategy]] = {
    StrategyKind.LONG_CALL_LEAP: LongCallLeapStrategy,
    StrategyKind.LONG_CALL_LEAP_TOP_N: LongCallLeapTopNStrategy,
}

FILTER_TYPES: dict[StrategyKind, type[StrategyFilter]] = {
    StrategyKind.PUT_CREDIT_SPREAD: CreditSpreadFilter,
    StrategyKind.TECH_PUT_CREDIT_SPREAD: CreditSpreadFilter,
    StrategyKind.BULLISH_LONG_PUT_CREDIT_SPREAD: CreditSpreadFilter,
    StrategyKind.CALL_CREDIT_SPREAD: CreditSpreadFilter,
    StrategyKind.TECH_CALL_CREDIT_SPREAD: CreditSpreadFilter,
    StrategyKind.IRON_CONDOR: IronCondorFilter,
    StrategyKind.BULLISH_LONG_IRON_CONDOR: IronCondorFilter,
    StrategyKind.BULLISH_BROKEN_WING_BUTTERFLY: BrokenWingButterflyFilter,
    StrategyKind.BULLISH_ZEBRA: ZebraFilter,
    StrategyKind.LONG_CALL_LEAP: LongCallLeapFilter,
    StrategyKind.LONG_CALL_LEAP_TOP_N: LongCallLeapFilter,
}


def filter_class_for(kind: StrategyKind) -> type[StrategyFilter]:
    """Filter class that configurations of this kind are parsed into."""
    return FILTER_TYPES[kind]


def create_strategy(
    kind: StrategyKind, earnings: Optional[Any] = None, volatility: Optional[Any] = None
) -> Strategy:
    """
    Build a ready-to-run strategy for a kind.

    Args:
        kind: Strategy kind
        earnings: Earnings provider exposing next_earnings(symbol, before)
        volatility: Provider exposing historical_volatility(symbol)

    Returns:
        Strategy whose name is the kind's display name
    """
    if kind in CHAIN_STRATEGIES:
        strategy = CHAIN_STRATEGIES[kind](earnings=earnings, volatility=volatility)
        strategy.name = kind.display_name
        return strategy

    return EarningsGuard(
        EXPIRY_STRATEGIES[kind](),
        earnings=earnings,
        volatility=volatility,
        name=kind.display_name,
    )
