"""
Iron condor enumerator.

An iron condor is a put credit spread below a call credit spread at the
same expiration. Both sides are enumerated with permissive filters (the
caller's DTE window, max loss and leg filters, but no return-on-risk
floor), then every (put, call) pair with put.short < call.short is
scored on the combined credit:

    total_credit = put.net_credit + call.net_credit
    max_risk     = max(put.width, call.width) * 100 - total_credit

Only one side can finish in the money, so the wider side bounds the loss.
Pairings with max_risk <= 0 are discarded.
"""

import logging
from typing import Optional

from ..constants import CONTRACT_MULTIPLIER
from ..models.chain import OptionChainSnapshot
from ..models.filters import CreditSpreadFilter, IronCondorFilter, LegFilter, StrategyFilter
from ..models.trades import IronCondor
from .base import ExpiryStrategy
from .credit_spreads import CallCreditSpreadStrategy, PutCreditSpreadStrategy

logger = logging.getLogger(__name__)


def _side_filter(
    strategy_filter: StrategyFilter,
    short_leg: Optional[LegFilter],
    long_leg: Optional[LegFilter],
) -> CreditSpreadFilter:
    return CreditSpreadFilter(
        target_dte=strategy_filter.target_dte,
        min_dte=strategy_filter.min_dte,
        max_dte=strategy_filter.max_dte,
        max_loss_limit=strategy_filter.max_loss_limit,
        min_return_on_risk=0.0,
        ignore_earnings=True,
        short_leg=short_leg,
        long_leg=long_leg,
    )


def side_filters(strategy_filter: StrategyFilter) -> tuple[CreditSpreadFilter, CreditSpreadFilter]:
    """
    Build the put-side and call-side spread filters for a condor.

    An IronCondorFilter supplies separate leg filters per side; a plain
    CreditSpreadFilter shares its short/long leg filters across both sides.
    """
    if isinstance(strategy_filter, IronCondorFilter):
        return (
            _side_filter(strategy_filter, strategy_filter.put_short_leg, strategy_filter.put_long_leg),
            _side_filter(strategy_filter, strategy_filter.call_short_leg, strategy_filter.call_long_leg),
        )
    short_leg = getattr(strategy_filter, "short_leg", None)
    long_leg = getattr(strategy_filter, "long_leg", None)
    return (
        _side_filter(strategy_filter, short_leg, long_leg),
        _side_filter(strategy_filter, short_leg, long_leg),
    )


class IronCondorStrategy(ExpiryStrategy):
    """
    Iron condors at one expiration.

    Besides the max loss, return-on-risk and credit filters, a pairing is
    rejected when its combined credit is at least the wider side's width
    (max_risk <= 0).
    """

    name = "Iron Condor"

    def __init__(self):
        self._puts = PutCreditSpreadStrategy()
        self._calls = CallCreditSpreadStrategy()

    def find_valid_trades(
        self, chain: OptionChainSnapshot, expiry_date: str, strategy_filter: StrategyFilter
    ) -> list[IronCondor]:
        price = chain.underlying_price
        put_filter, call_filter = side_filters(strategy_filter)

        put_spreads = self._puts.find_valid_trades(chain, expiry_date, put_filter)
        call_spreads = self._calls.find_valid_trades(chain, expiry_date, call_filter)
        logger.debug(
            f"[{chain.symbol}] Pairing {len(put_spreads)} put spreads with "
            f"{len(call_spreads)} call spreads at {expiry_date}"
        )

        trades = []
        for put_spread in put_spreads:
            for call_spread in call_spreads:
                put_short = put_spread.short_put.strike
                call_short = call_spread.short_call.strike
                if put_short >= call_short:
                    continue

                total_credit = put_spread.net_credit + call_spread.net_credit
                max_risk = (
                    max(put_spread.width, call_spread.width) * CONTRACT_MULTIPLIER - total_credit
                )
                if max_risk <= 0:
                    continue
                if not strategy_filter.passes_max_loss(max_risk):
                    continue
                if not strategy_filter.passes_min_return_on_risk(total_credit, max_risk):
                    continue
                if not strategy_filter.passes_credit_limit(total_credit):
                    continue
                if not strategy_filter.passes_min_credit(total_credit):
                    continue

                lower = put_short - total_credit / CONTRACT_MULTIPLIER
                upper = call_short + total_credit / CONTRACT_MULTIPLIER
                lower_pct = (price - lower) / price * 100 if price else 0.0
                upper_pct = (upper - price) / price * 100 if price else 0.0

                trades.append(IronCondor(
                    symbol=chain.symbol,
                    expiry_date=expiry_date,
                    dte=put_spread.dte,
                    current_price=price,
                    net_credit=total_credit,
                    max_loss=max_risk,
                    return_on_risk=total_credit / max_risk * 100,
                    break_even_price=lower,
                    break_even_percent=lower_pct,
                    put_spread=put_spread,
                    call_spread=call_spread,
                    lower_break_even=lower,
                    upper_break_even=upper,
                    lower_break_even_percent=lower_pct,
                    upper_break_even_percent=upper_pct,
                ))

        logger.debug(f"[{chain.symbol}] {len(trades)} iron condors at {expiry_date}")
        return trades
