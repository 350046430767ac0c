"""Tests for the strategy registry."""

import pytest

from options_scanner.models.filters import (
    BrokenWingButterflyFilter,
    CreditSpreadFilter,
    IronCondorFilter,
    LongCallLeapFilter,
    ZebraFilter,
)
from options_scanner.strategies import (
    EarningsGuard,
    LongCallLeapStrategy,
    LongCallLeapTopNStrategy,
    PutCreditSpreadStrategy,
    StrategyKind,
    create_strategy,
    filter_class_for,
)


class TestStrategyKind:
    """Tests for StrategyKind lookup."""

    def test_eleven_kinds(self):
        assert len(StrategyKind) == 11

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("PUT_CREDIT_SPREAD", StrategyKind.PUT_CREDIT_SPREAD),
            ("put_credit_spread", StrategyKind.PUT_CREDIT_SPREAD),
            ("Bullish ZEBRA", StrategyKind.BULLISH_ZEBRA),
            (" long call leap top n ", StrategyKind.LONG_CALL_LEAP_TOP_N),
        ],
    )
    def test_from_name(self, name, expected):
        assert StrategyKind.from_name(name) is expected

    def test_from_name_unknown(self):
        with pytest.raises(ValueError, match="Unknown strategy type"):
            StrategyKind.from_name("COVERED_CALL")

    def test_display_names_unique(self):
        names = [kind.display_name for kind in StrategyKind]
        assert len(set(names)) == len(names)


class TestCreateStrategy:
    """Tests for create_strategy and filter_class_for."""

    @pytest.mark.parametrize("kind", list(StrategyKind))
    def test_every_kind_builds(self, kind):
        strategy = create_strategy(kind)
        assert strategy.name == kind.display_name
        assert hasattr(strategy, "find_trades")

    def test_expiry_strategies_are_guarded(self):
        earnings = object()
        strategy = create_strategy(StrategyKind.TECH_PUT_CREDIT_SPREAD, earnings=earnings)

        assert isinstance(strategy, EarningsGuard)
        assert isinstance(strategy.strategy, PutCreditSpreadStrategy)
        assert strategy.earnings is earnings
        assert strategy.name == "Technical Put Credit Spread"

    def test_leap_strategies_not_guarded(self):
        volatility = object()
        leap = create_strategy(StrategyKind.LONG_CALL_LEAP, volatility=volatility)
        top_n = create_strategy(StrategyKind.LONG_CALL_LEAP_TOP_N)

        assert type(leap) is LongCallLeapStrategy
        assert leap.volatility is volatility
        assert isinstance(top_n, LongCallLeapTopNStrategy)

    @pytest.mark.parametrize(
        "kind,filter_class",
        [
            (StrategyKind.PUT_CREDIT_SPREAD, CreditSpreadFilter),
            (StrategyKind.TECH_CALL_CREDIT_SPREAD, CreditSpreadFilter),
            (StrategyKind.BULLISH_LONG_IRON_CONDOR, IronCondorFilter),
            (StrategyKind.BULLISH_BROKEN_WING_BUTTERFLY, BrokenWingButterflyFilter),
            (StrategyKind.BULLISH_ZEBRA, ZebraFilter),
            (StrategyKind.LONG_CALL_LEAP_TOP_N, LongCallLeapFilter),
        ],
    )
    def test_filter_class_for(self, kind, filter_class):
        assert filter_class_for(kind) is filter_class
