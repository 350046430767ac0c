"""
Output formatting functions for scan results.

This module turns StrategyResult and ExecutionResult objects into plain
text for the terminal and JSON for downstream consumers.
"""

import json
import math
from typing import Any

from ..models.trades import LongCallLeap, TradeCandidate
from .scanner import ExecutionResult, StrategyResult


def format_trade(trade: TradeCandidate) -> str:
    """
    Format one trade candidate on a single line.

    Args:
        trade: Candidate to format

    Returns:
        Line such as "SELL 1 95 PUT / BUY 1 90 PUT | credit $140.00 | ..."
    """
    legs = " / ".join(str(leg) for leg in trade.legs)
    if trade.net_credit >= 0:
        cash = f"credit ${trade.net_credit:.2f}"
    else:
        cash = f"debit ${-trade.net_credit:.2f}"

    parts = [
        legs,
        cash,
        f"max loss ${trade.max_loss:.2f}",
        f"RoR {trade.return_on_risk:.1f}%",
        f"B/E ${trade.break_even_price:.2f} ({trade.break_even_percent:+.1f}%)",
    ]
    if isinstance(trade, LongCallLeap):
        cagr = trade.break_even_cagr
        parts.append(f"savings {trade.cost_savings_percent:.1f}%")
        if cagr is not None:
            parts.append(f"CAGR {cagr:.1f}%")
    return " | ".join(parts)


def format_strategy_result(result: StrategyResult) -> str:
    """Format one strategy's trades grouped by symbol and expiry."""
    lines = [
        f"=== {result.strategy_name} ===",
        f"Symbols scanned: {result.symbols_scanned}   Trades: {result.trades_found}",
    ]
    for trades in result.trades.values():
        first = trades[0]
        lines.append("")
        lines.append(
            f"{first.symbol} {first.expiry_date} ({first.dte} DTE) @ ${first.current_price:.2f}"
        )
        for trade in trades:
            lines.append(f"  {format_trade(trade)}")

    if result.errors:
        lines.append("")
        lines.append("Errors:")
        for symbol, message in result.errors.items():
            lines.append(f"  {symbol}: {message}")
    return "\n".join(lines)


def format_execution_result(execution: ExecutionResult) -> str:
    """Format a whole run, one section per strategy plus a summary line."""
    sections = [format_strategy_result(result) for result in execution.results]
    stats = execution.cache_stats
    summary = (
        f"Execution {execution.execution_id}: {execution.total_trades_found} trades, "
        f"{execution.total_execution_time_ms}ms, "
        f"{stats.get('fetches', 0)} chain fetches"
    )
    if execution.cancelled:
        summary += " (cancelled)"
    sections.append(summary)
    return "\n\n".join(sections)


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats with None; JSON has no Infinity or NaN."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def execution_to_json(execution: ExecutionResult, indent: int = 2) -> str:
    return json.dumps(_json_safe(execution.to_dict()), indent=indent, allow_nan=False)
