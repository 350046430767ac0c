"""
Strategy scanning package.

- scanner: OptionsScanner, StrategyConfig and the result dataclasses
- formatters: Text and JSON rendering of results
"""

from .formatters import (
    execution_to_json,
    format_execution_result,
    format_strategy_result,
    format_trade,
)
from .scanner import (
    ExecutionResult,
    OptionsScanner,
    StrategyConfig,
    StrategyResult,
    group_by_expiry,
    rank_trades,
)

__all__ = [
    "OptionsScanner",
    "StrategyConfig",
    "StrategyResult",
    "ExecutionResult",
    "rank_trades",
    "group_by_expiry",
    "format_trade",
    "format_strategy_result",
    "format_execution_result",
    "execution_to_json",
]
