"""Tests for trade candidate models."""

import pytest

from options_scanner.models.trades import LegAction, PutCreditSpread, TradeCandidate

from helpers import EXPIRY, build_quote


class TestTradeCandidate:
    """Tests for the TradeCandidate base class."""

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            TradeCandidate(
                symbol="TEST",
                expiry_date=EXPIRY,
                dte=30,
                current_price=100.0,
                net_credit=140.0,
                max_loss=360.0,
                return_on_risk=38.9,
                break_even_price=93.6,
                break_even_percent=6.4,
            )

    def test_subclass_supplies_legs(self):
        trade = PutCreditSpread(
            symbol="TEST",
            expiry_date=EXPIRY,
            dte=30,
            current_price=100.0,
            net_credit=140.0,
            max_loss=360.0,
            return_on_risk=38.89,
            break_even_price=93.6,
            break_even_percent=6.4,
            short_put=build_quote(95.0, bid=2.5, ask=2.6, delta=-0.30),
            long_put=build_quote(90.0, bid=1.0, ask=1.1, delta=-0.15),
        )

        assert [leg.action for leg in trade.legs] == [LegAction.SELL, LegAction.BUY]
        data = trade.to_dict()
        assert data["strategy"] == "Put Credit Spread"
        assert [leg["strike"] for leg in data["legs"]] == [95.0, 90.0]
        assert data["legs"][0]["premium"] == 2.5
