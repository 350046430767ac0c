"""
Options strategy enumerators.

This package contains the trade finders run by the scanner:
- credit_spreads: Put and call credit spreads
- iron_condor: Paired put/call credit spreads
- butterfly: Bullish call broken-wing butterflies
- zebra: Zero extrinsic back ratio call spreads
- leap, leap_top_n: Long call LEAPs and the ranked Top-N variant
- registry: StrategyKind to strategy/filter mapping

All classes and functions are re-exported at the package level for convenience.
"""

from .base import EarningsGuard, ExpiryStrategy, Strategy
from .butterfly import BrokenWingButterflyStrategy
from .credit_spreads import CallCreditSpreadStrategy, PutCreditSpreadStrategy
from .iron_condor import IronCondorStrategy
from .leap import LongCallLeapStrategy, evaluate_leap
from .leap_top_n import LongCallLeapTopNStrategy
from .registry import StrategyKind, create_strategy, filter_class_for
from .zebra import ZebraStrategy

__all__ = [
    # base
    "Strategy",
    "ExpiryStrategy",
    "EarningsGuard",
    # enumerators
    "PutCreditSpreadStrategy",
    "CallCreditSpreadStrategy",
    "IronCondorStrategy",
    "BrokenWingButterflyStrategy",
    "ZebraStrategy",
    "LongCallLeapStrategy",
    "LongCallLeapTopNStrategy",
    "evaluate_leap",
    # registry
    "StrategyKind",
    "create_strategy",
    "filter_class_for",
]
