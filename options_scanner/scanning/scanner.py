"""
Strategy execution scanner.

Runs a list of configured strategies over their securities and collects
the resulting trade candidates.

Flow per run:
1. Create a fresh OptionChainCache (chains are fetched once per run)
2. For each strategy config, in order:
   - Apply the technical screen, if one is configured
   - For each symbol: get the chain, find trades, rank, limit, group by expiry
3. Report totals, duration and cache statistics

One failing symbol never aborts a strategy, and cancellation is checked
between strategies and between symbols.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from ..cache import OptionChainCache
from ..constants import DEFAULT_MAX_TRADES_TO_SEND
from ..models.filters import StrategyFilter
from ..models.trades import TradeCandidate
from ..strategies.registry import StrategyKind, create_strategy

logger = logging.getLogger(__name__)

Screener = Callable[[list[str], Any], list[str]]


@dataclass
class StrategyConfig:
    """
    One configured strategy.

    Attributes:
        kind: Strategy kind
        filter: Filter of the class registered for the kind
        securities: Symbols to scan
        name: Display name (defaults to the kind's display name)
        technical_filter: Opaque screening conditions passed to the screener
        max_trades_to_send: Per-symbol cap on ranked candidates
    """

    kind: StrategyKind
    filter: StrategyFilter
    securities: list[str]
    name: Optional[str] = None
    technical_filter: Optional[Any] = None
    max_trades_to_send: int = DEFAULT_MAX_TRADES_TO_SEND

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.kind.display_name
        if self.max_trades_to_send < 1:
            raise ValueError("max_trades_to_send must be at least 1")


@dataclass
class StrategyResult:
    """
    Trades found by one strategy.

    trades is keyed by "SYMBOL_EXPIRY"; keys appear in scan order and
    trades within a key in ranked order.
    """

    strategy_name: str
    kind: StrategyKind
    trades: dict[str, list[TradeCandidate]] = field(default_factory=dict)
    symbols_scanned: int = 0
    errors: dict[str, str] = field(default_factory=dict)
    execution_time_ms: int = 0

    @property
    def trades_found(self) -> int:
        return sum(len(group) for group in self.trades.values())

    def all_trades(self) -> list[TradeCandidate]:
        return [trade for group in self.trades.values() for trade in group]

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy_name": self.strategy_name,
            "strategy_type": self.kind.value,
            "trades_found": self.trades_found,
            "symbols_scanned": self.symbols_scanned,
            "execution_time_ms": self.execution_time_ms,
            "errors": dict(self.errors),
            "trades": {
                key: [trade.to_dict() for trade in group] for key, group in self.trades.items()
            },
        }


@dataclass
class ExecutionResult:
    """Results of one scan run across all strategies."""

    execution_id: str
    timestamp: datetime
    results: list[StrategyResult] = field(default_factory=list)
    total_execution_time_ms: int = 0
    cache_stats: dict[str, int] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def total_trades_found(self) -> int:
        return sum(result.trades_found for result in self.results)

    def to_dict(self) -> dict[str, Any]:
        return {
            "execution_id": self.execution_id,
            "timestamp": self.timestamp.isoformat(),
            "total_trades_found": self.total_trades_found,
            "total_execution_time_ms": self.total_execution_time_ms,
            "cancelled": self.cancelled,
            "cache_stats": dict(self.cache_stats),
            "results": [result.to_dict() for result in self.results],
        }


def rank_trades(trades: list[TradeCandidate], limit: int) -> list[TradeCandidate]:
    """
    Sort by return on risk (highest first) and keep the top `limit`.

    The sort is stable, so strategies whose candidates all share a return
    on risk (LEAPs) keep the order the strategy produced.
    """
    ranked = sorted(trades, key=lambda t: t.return_on_risk, reverse=True)
    return ranked[:limit]


def group_by_expiry(symbol: str, trades: list[TradeCandidate]) -> dict[str, list[TradeCandidate]]:
    """Group trades under "SYMBOL_EXPIRY" keys, preserving order."""
    groups: dict[str, list[TradeCandidate]] = {}
    for trade in trades:
        groups.setdefault(f"{symbol}_{trade.expiry_date}", []).append(trade)
    return groups


class OptionsScanner:
    """
    Runs configured strategies over their securities.

    Example:
        scanner = OptionsScanner(schwab_client, earnings=calendar)
        result = scanner.run([StrategyConfig(kind, filter, ["AAPL", "MSFT"])])
        print(result.total_trades_found)
    """

    def __init__(
        self,
        chain_provider: Any,
        earnings: Optional[Any] = None,
        volatility: Optional[Any] = None,
        screener: Optional[Screener] = None,
    ):
        """
        Initialize the scanner.

        Args:
            chain_provider: Provider exposing fetch_chain(symbol)
            earnings: Earnings provider exposing next_earnings(symbol, before)
            volatility: Provider exposing historical_volatility(symbol)
            screener: Callable (symbols, technical_filter) -> passing symbols
        """
        self.chain_provider = chain_provider
        self.earnings = earnings
        self.volatility = volatility
        self.screener = screener

    def run(
        self, configs: list[StrategyConfig], cancel_event: Optional[threading.Event] = None
    ) -> ExecutionResult:
        """
        Execute strategies in order with a shared per-run chain cache.

        Args:
            configs: Strategies to execute
            cancel_event: Set to stop the run between strategies or symbols

        Returns:
            ExecutionResult for the run (partial if cancelled)
        """
        start = time.monotonic()
        started_at = datetime.now()
        execution = ExecutionResult(
            execution_id=f"exec_{int(time.time() * 1000)}", timestamp=started_at
        )
        cache = OptionChainCache(self.chain_provider)

        for i, config in enumerate(configs):
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Execution cancelled after {i}/{len(configs)} strategies")
                execution.cancelled = True
                break

            logger.info(f"Executing strategy {i + 1}/{len(configs)}: {config.name}")
            execution.results.append(self.scan_strategy(config, cache, cancel_event))

        if cancel_event is not None and cancel_event.is_set():
            execution.cancelled = True

        execution.total_execution_time_ms = int((time.monotonic() - start) * 1000)
        execution.cache_stats = cache.stats()
        cache.log_stats()
        logger.info(
            f"Execution completed: {len(execution.results)} strategies, "
            f"{execution.total_trades_found} total trades, "
            f"{execution.total_execution_time_ms}ms"
        )
        return execution

    def screen(self, config: StrategyConfig) -> list[str]:
        """
        Apply the technical screen for a strategy.

        Returns all securities when no technical filter is configured. A
        configured filter without a screener is logged and ignored.
        """
        securities = [s.upper() for s in config.securities]
        if config.technical_filter is None:
            return securities
        if self.screener is None:
            logger.warning(f"[{config.name}] Technical filter configured but no screener available")
            return securities

        passing = [s.upper() for s in self.screener(securities, config.technical_filter)]
        logger.info(
            f"[{config.name}] Found {len(passing)} stocks matching technical criteria: {passing}"
        )
        return [s for s in securities if s in passing]

    def scan_strategy(
        self,
        config: StrategyConfig,
        cache: OptionChainCache,
        cancel_event: Optional[threading.Event] = None,
    ) -> StrategyResult:
        """
        Run one strategy over its securities.

        Args:
            config: Strategy to run
            cache: Chain cache for the current run
            cancel_event: Checked before each symbol

        Returns:
            StrategyResult with ranked trades grouped by "SYMBOL_EXPIRY"
        """
        start = time.monotonic()
        result = StrategyResult(strategy_name=config.name, kind=config.kind)
        strategy = create_strategy(config.kind, earnings=self.earnings, volatility=self.volatility)

        try:
            symbols = self.screen(config)
        except Exception as e:
            logger.error(f"[{config.name}] Technical screening failed, skipping strategy: {e}")
            result.errors["*"] = f"Technical screening failed: {e}"
            symbols = []

        for symbol in symbols:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"[{config.name}] Cancelled before {symbol}")
                break

            result.symbols_scanned += 1
            try:
                chain = cache.get(symbol)
                logger.info(f"[{symbol}] Processing symbol for {config.name}")
                trades = strategy.find_trades(chain, config.filter)
            except Exception as e:
                logger.error(f"[{symbol}] Error processing symbol: {e}")
                result.errors[symbol] = str(e)
                continue

            if not trades:
                continue

            top_trades = rank_trades(trades, config.max_trades_to_send)
            if len(trades) > len(top_trades):
                logger.info(
                    f"[{symbol}] Found {len(trades)} trades, limiting to top {len(top_trades)}"
                )
            result.trades.update(group_by_expiry(symbol, top_trades))

        result.execution_time_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"[{config.name}] {result.trades_found} trades across {len(symbols)} symbols")
        return result
