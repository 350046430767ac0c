"""
Long call LEAP enumerator.

A LEAP is bought as a stock replacement, so each call is judged against
the alternative of buying the stock on 50% margin for the same holding
period. Per share, over dte/365 years:

    intrinsic        = max(0, price - strike)
    extrinsic        = ask - intrinsic
    margin_interest  = 0.5 * price * margin_rate/100 * dte/365
    dividend_cost    = price * dividend_yield/100 * dte/365
    savings_interest = (0.5 * price - ask) * savings_rate/100 * dte/365

    cost_of_option       = extrinsic + dividend_cost
    cost_of_buying_stock = margin_interest + savings_interest

The call is accepted when cost_of_option is at most
min_cost_efficiency_percent (default 90%) of cost_of_buying_stock.

Unlike the single-expiry strategies, every expiration beyond min_dte is
evaluated: far expirations often compete with each other on cost.
"""

import logging
import math
from typing import Any, Optional

from ..constants import CONTRACT_MULTIPLIER, DAYS_PER_YEAR, MARGIN_REQUIREMENT
from ..models.chain import OptionChainSnapshot, OptionQuote, OptionType
from ..models.filters import StrategyFilter, leg_passes
from ..models.trades import LongCallLeap
from .base import Strategy, has_earnings_before, passes_volatility_gate

logger = logging.getLogger(__name__)


def evaluate_leap(
    chain: OptionChainSnapshot,
    expiry_date: str,
    quote: OptionQuote,
    strategy_filter: StrategyFilter,
) -> Optional[LongCallLeap]:
    """
    Score one call as a LEAP and apply the filter.

    Checks run in order: long_call leg filter, premium cap, max loss, cost
    efficiency, break-even CAGR and cost savings. The first failure rejects
    the call.

    Args:
        chain: Chain the quote belongs to (price and dividend yield)
        expiry_date: Expiration date of the quote
        quote: Call quote to evaluate
        strategy_filter: LEAP filter (a plain StrategyFilter skips the
            LEAP-specific checks)

    Returns:
        LongCallLeap candidate, or None if rejected
    """
    if not leg_passes(getattr(strategy_filter, "long_call", None), quote):
        return None

    price = chain.underlying_price
    premium = quote.ask
    if strategy_filter.max_option_price_percent is not None:
        if premium > price * strategy_filter.max_option_price_percent / 100:
            return None

    max_loss = premium * CONTRACT_MULTIPLIER
    if not strategy_filter.passes_max_loss(max_loss):
        return None

    dte = quote.dte or chain.expiry_dte(expiry_date) or 0
    years = dte / DAYS_PER_YEAR
    intrinsic = max(0.0, price - quote.strike)
    extrinsic = premium - intrinsic

    margin_interest = (
        MARGIN_REQUIREMENT * price * strategy_filter.margin_interest_rate / 100 * years
    )
    dividend_cost = price * chain.dividend_yield / 100 * years
    savings_interest = (
        (MARGIN_REQUIREMENT * price - premium) * strategy_filter.savings_interest_rate / 100 * years
    )
    cost_of_option = extrinsic + dividend_cost
    cost_of_buying_stock = margin_interest + savings_interest

    min_efficiency = getattr(strategy_filter, "min_cost_efficiency_percent", None)
    if min_efficiency is not None:
        if cost_of_option > cost_of_buying_stock * min_efficiency / 100:
            return None

    cost_savings = 0.0
    if cost_of_buying_stock > 0:
        cost_savings = (cost_of_buying_stock - cost_of_option) / cost_of_buying_stock * 100

    break_even = quote.strike + premium
    break_even_percent = (break_even - price) / price * 100 if price else 0.0

    candidate = LongCallLeap(
        symbol=chain.symbol,
        expiry_date=expiry_date,
        dte=dte,
        current_price=price,
        net_credit=-max_loss,
        max_loss=max_loss,
        return_on_risk=0.0,
        break_even_price=break_even,
        break_even_percent=break_even_percent,
        long_call=quote,
        intrinsic_value=intrinsic,
        extrinsic_value=extrinsic,
        margin_interest=margin_interest,
        savings_interest=savings_interest,
        dividend_cost=dividend_cost,
        cost_of_option=cost_of_option,
        cost_of_buying_stock=cost_of_buying_stock,
        cost_savings_percent=cost_savings,
        option_price_percent=premium / price * 100 if price else math.inf,
    )

    if strategy_filter.max_cagr_for_break_even is not None:
        cagr = candidate.break_even_cagr
        if cagr is None or cagr > strategy_filter.max_cagr_for_break_even:
            return None

    min_savings = getattr(strategy_filter, "min_cost_savings_percent", None)
    if min_savings is not None and cost_savings < min_savings:
        return None

    return candidate


class LongCallLeapStrategy(Strategy):
    """
    Long call LEAPs across every expiration past min_dte.

    Attributes:
        earnings: Earnings provider exposing next_earnings(symbol, before)
        volatility: Provider exposing historical_volatility(symbol)
    """

    name = "Long Call LEAP"

    def __init__(self, earnings: Optional[Any] = None, volatility: Optional[Any] = None):
        self.earnings = earnings
        self.volatility = volatility

    def eligible_expiries(
        self, chain: OptionChainSnapshot, strategy_filter: StrategyFilter
    ) -> list[str]:
        """
        Expirations to evaluate: DTE above min_dte and within max_dte.

        Expirations with earnings before them are dropped when the filter
        does not ignore earnings.
        """
        expiries = []
        for key in chain.expiry_keys():
            if key.dte <= strategy_filter.min_dte:
                continue
            if strategy_filter.max_dte is not None and key.dte > strategy_filter.max_dte:
                continue
            if has_earnings_before(self.earnings, chain.symbol, key.date, strategy_filter):
                continue
            expiries.append(key.date)
        return expiries

    def scan_expiries(
        self, chain: OptionChainSnapshot, expiries: list[str], strategy_filter: StrategyFilter
    ) -> list[LongCallLeap]:
        """Evaluate every call quote at the given expirations."""
        trades = []
        for expiry_date in expiries:
            strikes = chain.options_for_expiry(OptionType.CALL, expiry_date)
            for quotes in strikes.values():
                for quote in quotes:
                    candidate = evaluate_leap(chain, expiry_date, quote, strategy_filter)
                    if candidate is not None:
                        trades.append(candidate)
        return trades

    def find_trades(
        self, chain: OptionChainSnapshot, strategy_filter: StrategyFilter
    ) -> list[LongCallLeap]:
        symbol = chain.symbol
        if not passes_volatility_gate(self.volatility, symbol, strategy_filter):
            return []

        expiries = self.eligible_expiries(chain, strategy_filter)
        if not expiries:
            logger.debug(f"[{symbol}] No LEAP expiries beyond {strategy_filter.min_dte} DTE")
            return []

        logger.info(f"[{symbol}] {self.name}: processing {len(expiries)} expiry dates")
        trades = self.scan_expiries(chain, expiries, strategy_filter)
        logger.info(f"[{symbol}] {self.name}: {len(trades)} trades found")
        return trades
