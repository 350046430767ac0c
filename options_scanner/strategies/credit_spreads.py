"""
Vertical credit spread enumerators.

- Put credit spread: sell a put, buy a lower-strike put
- Call credit spread: sell an OTM call, buy a higher-strike call

Both walk the strike ladder of one expiration in ascending order and try
every (short, long) pair, so the enumeration is O(n²) in strikes.

For a spread with strike width W (points) and per-share prices:

    net_credit      = (short.bid - long.ask) * 100
    max_loss        = W * 100 - net_credit
    return_on_risk  = net_credit / max_loss * 100

Example:
    strategy = EarningsGuard(PutCreditSpreadStrategy(), earnings=calendar)
    trades = strategy.find_trades(chain, CreditSpreadFilter(target_dte=30))
"""

import logging
from typing import Optional

from ..constants import CONTRACT_MULTIPLIER
from ..models.chain import OptionChainSnapshot, OptionQuote, OptionType
from ..models.filters import CreditSpreadFilter, leg_passes
from ..models.trades import CallCreditSpread, PutCreditSpread
from .base import ExpiryStrategy

logger = logging.getLogger(__name__)


def _spread_economics(
    short_quote: OptionQuote, long_quote: OptionQuote, width: float, strategy_filter: CreditSpreadFilter
) -> Optional[tuple[float, float, float]]:
    """
    Credit, max loss and return on risk for a spread, or None if rejected.

    Rejects non-positive credit or max loss, then applies the max loss,
    return on risk and credit limits of the filter.
    """
    net_credit = (short_quote.bid - long_quote.ask) * CONTRACT_MULTIPLIER
    if net_credit <= 0:
        return None

    max_loss = width * CONTRACT_MULTIPLIER - net_credit
    if max_loss <= 0:
        return None
    if not strategy_filter.passes_max_loss(max_loss):
        return None
    if not strategy_filter.passes_min_return_on_risk(net_credit, max_loss):
        return None
    if not strategy_filter.passes_credit_limit(net_credit):
        return None
    if not strategy_filter.passes_min_credit(net_credit):
        return None

    return net_credit, max_loss, net_credit / max_loss * 100


class PutCreditSpreadStrategy(ExpiryStrategy):
    """Bullish put credit spreads at one expiration."""

    name = "Put Credit Spread"

    def find_valid_trades(
        self, chain: OptionChainSnapshot, expiry_date: str, strategy_filter: CreditSpreadFilter
    ) -> list[PutCreditSpread]:
        price = chain.underlying_price
        ladder = chain.strike_ladder(OptionType.PUT, expiry_date)
        short_filter = getattr(strategy_filter, "short_leg", None)
        long_filter = getattr(strategy_filter, "long_leg", None)

        trades = []
        for i, (short_strike, short_put) in enumerate(ladder):
            if not leg_passes(short_filter, short_put):
                continue

            for long_strike, long_put in ladder[:i]:
                if not leg_passes(long_filter, long_put):
                    continue

                economics = _spread_economics(
                    short_put, long_put, short_strike - long_strike, strategy_filter
                )
                if economics is None:
                    continue
                net_credit, max_loss, return_on_risk = economics

                break_even = short_strike - net_credit / CONTRACT_MULTIPLIER
                trades.append(PutCreditSpread(
                    symbol=chain.symbol,
                    expiry_date=expiry_date,
                    dte=short_put.dte,
                    current_price=price,
                    net_credit=net_credit,
                    max_loss=max_loss,
                    return_on_risk=return_on_risk,
                    break_even_price=break_even,
                    break_even_percent=(price - break_even) / price * 100 if price else 0.0,
                    short_put=short_put,
                    long_put=long_put,
                ))

        logger.debug(f"[{chain.symbol}] {len(trades)} put credit spreads at {expiry_date}")
        return trades


class CallCreditSpreadStrategy(ExpiryStrategy):
    """Bearish call credit spreads at one expiration, short strike above price."""

    name = "Call Credit Spread"

    def find_valid_trades(
        self, chain: OptionChainSnapshot, expiry_date: str, strategy_filter: CreditSpreadFilter
    ) -> list[CallCreditSpread]:
        price = chain.underlying_price
        ladder = chain.strike_ladder(OptionType.CALL, expiry_date)
        short_filter = getattr(strategy_filter, "short_leg", None)
        long_filter = getattr(strategy_filter, "long_leg", None)

        trades = []
        for i, (short_strike, short_call) in enumerate(ladder):
            # Short call must be OTM
            if short_strike <= price:
                continue
            if not leg_passes(short_filter, short_call):
                continue

            for long_strike, long_call in ladder[i + 1:]:
                if not leg_passes(long_filter, long_call):
                    continue

                economics = _spread_economics(
                    short_call, long_call, long_strike - short_strike, strategy_filter
                )
                if economics is None:
                    continue
                net_credit, max_loss, return_on_risk = economics

                break_even = short_strike + net_credit / CONTRACT_MULTIPLIER
                trades.append(CallCreditSpread(
                    symbol=chain.symbol,
                    expiry_date=expiry_date,
                    dte=short_call.dte,
                    current_price=price,
                    net_credit=net_credit,
                    max_loss=max_loss,
                    return_on_risk=return_on_risk,
                    break_even_price=break_even,
                    break_even_percent=(break_even - price) / price * 100 if price else 0.0,
                    short_call=short_call,
                    long_call=long_call,
                ))

        logger.debug(f"[{chain.symbol}] {len(trades)} call credit spreads at {expiry_date}")
        return trades
