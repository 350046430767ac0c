"""
Data models for the options strategy scanner.

- chain: option chain snapshot, expiration keys and quotes
- filters: strategy-level and per-leg filters
- trades: trade candidates produced by the strategies
"""

from .chain import (
    ExpirationKey,
    OptionChainSnapshot,
    OptionQuote,
    OptionType,
    quote_at,
    strike_ladder,
)
from .filters import (
    BrokenWingButterflyFilter,
    CreditSpreadFilter,
    IronCondorFilter,
    LegFilter,
    LongCallLeapFilter,
    StrategyFilter,
    ZebraFilter,
    leg_passes,
)
from .trades import (
    BrokenWingButterfly,
    CallCreditSpread,
    IronCondor,
    LegAction,
    LongCallLeap,
    PutCreditSpread,
    TradeCandidate,
    TradeLeg,
    ZebraTrade,
)

__all__ = [
    # Chain
    "ExpirationKey",
    "OptionChainSnapshot",
    "OptionQuote",
    "OptionType",
    "quote_at",
    "strike_ladder",
    # Filters
    "BrokenWingButterflyFilter",
    "CreditSpreadFilter",
    "IronCondorFilter",
    "LegFilter",
    "LongCallLeapFilter",
    "StrategyFilter",
    "ZebraFilter",
    "leg_passes",
    # Trades
    "BrokenWingButterfly",
    "CallCreditSpread",
    "IronCondor",
    "LegAction",
    "LongCallLeap",
    "PutCreditSpread",
    "TradeCandidate",
    "TradeLeg",
    "ZebraTrade",
]
