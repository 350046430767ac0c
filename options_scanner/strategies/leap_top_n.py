"""
Top-N LEAP ranking with progressive relaxation.

Runs the LEAP scan strictly first. If fewer than top_trades_count
candidates survive, quality constraints are cleared one level at a time
(see RELAXATION_LEVELS) and the scan is repeated, merging new candidates
until enough are found. DTE bounds, the earnings flag and leg delta bounds
are never relaxed.
"""

import logging
import math

from ..constants import RELAXATION_LEVELS
from ..models.chain import OptionChainSnapshot
from ..models.filters import LongCallLeapFilter
from ..models.trades import LongCallLeap
from .base import passes_volatility_gate
from .leap import LongCallLeapStrategy

logger = logging.getLogger(__name__)


def ranking_key(trade: LongCallLeap) -> tuple:
    """Sort key: DTE desc, cost savings desc, option price % asc, CAGR asc."""
    cagr = trade.break_even_cagr
    return (
        -trade.dte,
        -trade.cost_savings_percent,
        trade.option_price_percent,
        cagr if cagr is not None else math.inf,
    )


def merge_unique(pool: list[LongCallLeap], found: list[LongCallLeap]) -> int:
    """
    Append candidates whose (expiry_date, strike) is not yet in the pool.

    Returns:
        Number of candidates added
    """
    seen = {(t.expiry_date, t.strike) for t in pool}
    added = 0
    for trade in found:
        key = (trade.expiry_date, trade.strike)
        if key in seen:
            continue
        seen.add(key)
        pool.append(trade)
        added += 1
    return added


class LongCallLeapTopNStrategy(LongCallLeapStrategy):
    """Best top_trades_count LEAPs per symbol, relaxing quality filters as needed."""

    name = "Long Call LEAP Top N"

    def find_trades(
        self, chain: OptionChainSnapshot, strategy_filter: LongCallLeapFilter
    ) -> list[LongCallLeap]:
        symbol = chain.symbol
        top_n = strategy_filter.top_trades_count

        if not passes_volatility_gate(self.volatility, symbol, strategy_filter):
            return []

        expiries = self.eligible_expiries(chain, strategy_filter)
        if not expiries:
            logger.debug(f"[{symbol}] No LEAP expiries beyond {strategy_filter.min_dte} DTE")
            return []

        pool: list[LongCallLeap] = []
        merge_unique(pool, self.scan_expiries(chain, expiries, strategy_filter))
        logger.info(f"[{symbol}] Strict LEAP filter: {len(pool)} candidates (target {top_n})")

        for level, constraints in enumerate(RELAXATION_LEVELS, start=1):
            if len(pool) >= top_n:
                break
            relaxed = strategy_filter.relaxed(constraints)
            added = merge_unique(pool, self.scan_expiries(chain, expiries, relaxed))
            logger.info(
                f"[{symbol}] Relaxation level {level} (dropped {', '.join(constraints)}): "
                f"+{added} candidates, {len(pool)} total"
            )

        pool.sort(key=ranking_key)
        return pool[:top_n]
