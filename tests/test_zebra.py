"""Tests for ZEBRA enumeration."""

import pytest

from options_scanner.models.filters import LegFilter, ZebraFilter
from options_scanner.models.trades import LegAction
from options_scanner.strategies.zebra import ZebraStrategy

from helpers import EXPIRY

DEEP_ITM_LONG = LegFilter(min_delta=0.85)
ATM_SHORT = LegFilter(min_delta=0.45, max_delta=0.55)


@pytest.fixture
def strategy():
    return ZebraStrategy()


class TestZebraStrategy:
    """Test suite for ZebraStrategy."""

    def test_every_ascending_pair(self, strategy, call_ladder_chain):
        trades = strategy.find_valid_trades(call_ladder_chain, EXPIRY, ZebraFilter())
        assert len(trades) == 10
        assert all(t.long_call.strike < t.short_call.strike for t in trades)

    def test_economics(self, strategy, call_ladder_chain):
        f = ZebraFilter(long_call=DEEP_ITM_LONG, short_call=ATM_SHORT)
        trades = strategy.find_valid_trades(call_ladder_chain, EXPIRY, f)

        assert len(trades) == 1
        trade = trades[0]
        # (2 * 21.5 - 5.0) * 100
        assert trade.net_debit == pytest.approx(3800.0)
        assert trade.max_loss == pytest.approx(3800.0)
        assert trade.net_credit == pytest.approx(-3800.0)
        assert trade.net_extrinsic_value == pytest.approx(2 * 1.5 - 5.2)
        assert trade.break_even_price == pytest.approx(118.0)
        assert trade.break_even_percent == pytest.approx(18.0)
        assert trade.return_on_risk == 0.0

    def test_legs_are_two_long_one_short(self, strategy, call_ladder_chain):
        f = ZebraFilter(long_call=DEEP_ITM_LONG, short_call=ATM_SHORT)
        short, long = strategy.find_valid_trades(call_ladder_chain, EXPIRY, f)[0].legs
        assert (short.action, short.quantity, short.strike) == (LegAction.SELL, 1, 100.0)
        assert (long.action, long.quantity, long.strike) == (LegAction.BUY, 2, 80.0)

    def test_extrinsic_cap(self, strategy, call_ladder_chain):
        base = dict(long_call=DEEP_ITM_LONG, short_call=ATM_SHORT)
        assert len(strategy.find_valid_trades(
            call_ladder_chain, EXPIRY, ZebraFilter(max_net_extrinsic_value=0.0, **base)
        )) == 1
        assert strategy.find_valid_trades(
            call_ladder_chain, EXPIRY, ZebraFilter(max_net_extrinsic_value=-3.0, **base)
        ) == []

    def test_max_loss_limit(self, strategy, call_ladder_chain):
        f = ZebraFilter(long_call=DEEP_ITM_LONG, short_call=ATM_SHORT, max_loss_limit=3000)
        assert strategy.find_valid_trades(call_ladder_chain, EXPIRY, f) == []

    def test_min_return_on_risk_does_not_constrain(self, strategy, call_ladder_chain):
        f = ZebraFilter(long_call=DEEP_ITM_LONG, short_call=ATM_SHORT, min_return_on_risk=50)
        assert len(strategy.find_valid_trades(call_ladder_chain, EXPIRY, f)) == 1

    def test_leg_filters_use_full_bounds(self, strategy, call_ladder_chain):
        f = ZebraFilter(long_call=LegFilter(min_delta=0.85, min_open_interest=1))
        assert strategy.find_valid_trades(call_ladder_chain, EXPIRY, f) == []
