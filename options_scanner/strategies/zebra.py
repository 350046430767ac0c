"""
Bullish ZEBRA (zero extrinsic back ratio) enumerator.

Buy 2 calls at a lower strike and sell 1 call at a higher strike. With
deep ITM long calls the extrinsic value paid on the longs is largely
financed by the short call, so the position behaves like 100 shares of
stock with the downside limited to the debit.

    net_debit           = (2 * long.ask - short.bid) * 100   (= max loss)
    net_extrinsic_value = 2 * long.extrinsic - short.extrinsic
    break_even          = long_strike + net_debit / 100
"""

import logging

from ..constants import CONTRACT_MULTIPLIER
from ..models.chain import OptionChainSnapshot, OptionType
from ..models.filters import ZebraFilter, leg_passes
from ..models.trades import ZebraTrade
from .base import ExpiryStrategy

logger = logging.getLogger(__name__)


class ZebraStrategy(ExpiryStrategy):
    """
    ZEBRA trades at one expiration.

    A ZEBRA has no fixed profit target, so return_on_risk is always 0 and
    min_return_on_risk does not constrain it. Only the extrinsic cap, the
    leg filters and max loss are enforced.
    """

    name = "Bullish ZEBRA"

    def find_valid_trades(
        self, chain: OptionChainSnapshot, expiry_date: str, strategy_filter: ZebraFilter
    ) -> list[ZebraTrade]:
        price = chain.underlying_price
        ladder = chain.strike_ladder(OptionType.CALL, expiry_date)
        short_filter = getattr(strategy_filter, "short_call", None)
        long_filter = getattr(strategy_filter, "long_call", None)
        extrinsic_cap = getattr(strategy_filter, "max_net_extrinsic_value", None)

        trades = []
        for i, (long_strike, long_call) in enumerate(ladder):
            if not leg_passes(long_filter, long_call):
                continue

            for short_strike, short_call in ladder[i + 1:]:
                if not leg_passes(short_filter, short_call):
                    continue

                net_debit = (2 * long_call.ask - short_call.bid) * CONTRACT_MULTIPLIER
                net_extrinsic = 2 * long_call.extrinsic_value - short_call.extrinsic_value
                if extrinsic_cap is not None and net_extrinsic > extrinsic_cap:
                    continue
                if not strategy_filter.passes_max_loss(net_debit):
                    continue

                break_even = long_strike + net_debit / CONTRACT_MULTIPLIER
                trades.append(ZebraTrade(
                    symbol=chain.symbol,
                    expiry_date=expiry_date,
                    dte=long_call.dte,
                    current_price=price,
                    net_credit=-net_debit,
                    max_loss=net_debit,
                    return_on_risk=0.0,
                    break_even_price=break_even,
                    break_even_percent=(break_even - price) / price * 100 if price else 0.0,
                    long_call=long_call,
                    short_call=short_call,
                    net_debit=net_debit,
                    net_extrinsic_value=net_extrinsic,
                ))

        logger.debug(f"[{chain.symbol}] {len(trades)} ZEBRA trades at {expiry_date}")
        return trades
