"""
Bullish call broken-wing butterfly enumerator.

Three ascending call strikes leg1 < leg2 < leg3: buy 1 leg1, sell 2 leg2,
buy 1 leg3. The upper wing may be wider than the lower one, which moves
risk to the upside in exchange for a lower debit.

    total_debit      = (leg1.ask + leg3.ask - 2 * leg2.bid) * 100
    lower_wing_width = (leg2 - leg1) * 100
    upper_wing_width = (leg3 - leg2) * 100
    max_loss         = max(upper - lower + debit, debit)
    max_profit       = lower_wing_width - total_debit
"""

import logging

from ..constants import CONTRACT_MULTIPLIER
from ..models.chain import OptionChainSnapshot, OptionType
from ..models.filters import (
    BrokenWingButterflyFilter,
    leg_passes_delta,
    leg_passes_max_delta,
    leg_passes_min_delta,
)
from ..models.trades import BrokenWingButterfly
from .base import ExpiryStrategy

logger = logging.getLogger(__name__)


class BrokenWingButterflyStrategy(ExpiryStrategy):
    """
    Broken-wing butterflies at one expiration.

    Leg filters apply to delta only: leg1 its minimum, leg2 its maximum and
    leg3 both bounds. Triple loop over the strike ladder, O(n³).
    """

    name = "Bullish Broken Wing Butterfly"

    def find_valid_trades(
        self,
        chain: OptionChainSnapshot,
        expiry_date: str,
        strategy_filter: BrokenWingButterflyFilter,
    ) -> list[BrokenWingButterfly]:
        price = chain.underlying_price
        ladder = chain.strike_ladder(OptionType.CALL, expiry_date)
        leg1_filter = getattr(strategy_filter, "leg1_long", None)
        leg2_filter = getattr(strategy_filter, "leg2_short", None)
        leg3_filter = getattr(strategy_filter, "leg3_long", None)

        trades = []
        for i, (strike1, leg1) in enumerate(ladder):
            if not leg_passes_min_delta(leg1_filter, leg1):
                continue

            for j in range(i + 1, len(ladder)):
                strike2, leg2 = ladder[j]
                if not leg_passes_max_delta(leg2_filter, leg2):
                    continue

                for k in range(j + 1, len(ladder)):
                    strike3, leg3 = ladder[k]
                    if not leg_passes_delta(leg3_filter, leg3):
                        continue

                    total_debit = (leg1.ask + leg3.ask - 2 * leg2.bid) * CONTRACT_MULTIPLIER
                    if not strategy_filter.passes_debit_limit(total_debit):
                        continue

                    lower_wing = (strike2 - strike1) * CONTRACT_MULTIPLIER
                    upper_wing = (strike3 - strike2) * CONTRACT_MULTIPLIER
                    max_loss_upside = (upper_wing - lower_wing) + total_debit
                    max_loss_downside = total_debit
                    max_loss = max(max_loss_upside, max_loss_downside)
                    if not strategy_filter.passes_max_loss(max_loss):
                        continue

                    max_profit = lower_wing - total_debit
                    if max_profit > 0 and max_loss > 0:
                        return_on_risk = max_profit / max_loss * 100
                    else:
                        return_on_risk = 0.0

                    break_even = strike1 + total_debit / CONTRACT_MULTIPLIER
                    trades.append(BrokenWingButterfly(
                        symbol=chain.symbol,
                        expiry_date=expiry_date,
                        dte=leg1.dte,
                        current_price=price,
                        net_credit=-total_debit,
                        max_loss=max_loss,
                        return_on_risk=return_on_risk,
                        break_even_price=break_even,
                        break_even_percent=(break_even - price) / price * 100 if price else 0.0,
                        leg1=leg1,
                        leg2=leg2,
                        leg3=leg3,
                        total_debit=total_debit,
                        lower_wing_width=lower_wing,
                        upper_wing_width=upper_wing,
                        max_loss_upside=max_loss_upside,
                        max_loss_downside=max_loss_downside,
                    ))

        logger.debug(f"[{chain.symbol}] {len(trades)} broken-wing butterflies at {expiry_date}")
        return trades
