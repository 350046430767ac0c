"""Tests for YAML strategy configuration loading."""

import pytest

from options_scanner.exceptions import ConfigurationError
from options_scanner.models.filters import CreditSpreadFilter, LongCallLeapFilter
from options_scanner.strategies import StrategyKind
from options_scanner.strategy_config import (
    load_securities,
    load_strategy_configs,
    parse_strategy_config,
)

STRATEGIES_YAML = """
strategies:
  - name: Portfolio Put Spreads
    strategy_type: PUT_CREDIT_SPREAD
    securities: [aapl, msft]
    max_trades_to_send: 5
    filter:
      target_dte: 30
      max_loss_limit: 1000
      min_return_on_risk: 20
      short_leg:
        max_delta: 0.20
  - strategy_type: Long Call LEAP Top N
    securities: securities/leaps.yaml
    technical_filter:
      rsi_max: 40
    filter:
      min_dte: 300
      top_trades_count: 5
  - strategy_type: IRON_CONDOR
    enabled: false
    securities: [SPY]
"""


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "securities").mkdir()
    (tmp_path / "securities" / "leaps.yaml").write_text("securities:\n  - googl\n  - ' nvda '\n")
    (tmp_path / "strategies.yaml").write_text(STRATEGIES_YAML)
    return tmp_path


class TestLoadSecurities:
    """Tests for load_securities."""

    def test_normalizes_symbols(self, config_dir):
        assert load_securities(config_dir / "securities" / "leaps.yaml") == ["GOOGL", "NVDA"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_securities(tmp_path / "missing.yaml")

    def test_missing_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("symbols: [AAPL]\n")
        with pytest.raises(ConfigurationError, match="securities"):
            load_securities(path)


class TestParseStrategyConfig:
    """Tests for parse_strategy_config."""

    def test_inline_entry(self):
        config = parse_strategy_config({
            "strategy_type": "CALL_CREDIT_SPREAD",
            "securities": ["qqq"],
            "filter": {"long_leg": {"min_delta": 0.05}},
        })
        assert config.kind is StrategyKind.CALL_CREDIT_SPREAD
        assert config.name == "Call Credit Spread"
        assert config.securities == ["QQQ"]
        assert config.filter.long_leg.min_delta == 0.05
        assert config.max_trades_to_send == 30

    def test_missing_strategy_type(self):
        with pytest.raises(ConfigurationError, match="strategy_type is required"):
            parse_strategy_config({"securities": ["AAPL"]})

    def test_unknown_strategy_type(self):
        with pytest.raises(ConfigurationError, match="Unknown strategy type"):
            parse_strategy_config({"strategy_type": "STRADDLE"})

    def test_unknown_filter_field(self):
        with pytest.raises(ConfigurationError, match="max_extrinsic"):
            parse_strategy_config({
                "strategy_type": "PUT_CREDIT_SPREAD",
                "filter": {"max_extrinsic": 1.0},
            })

    def test_invalid_dte_window(self):
        with pytest.raises(ConfigurationError, match="max_dte"):
            parse_strategy_config({
                "strategy_type": "PUT_CREDIT_SPREAD",
                "filter": {"min_dte": 40, "max_dte": 20},
            })

    def test_invalid_securities(self):
        with pytest.raises(ConfigurationError, match="securities must be"):
            parse_strategy_config({"strategy_type": "PUT_CREDIT_SPREAD", "securities": 42})

    def test_invalid_max_trades(self):
        with pytest.raises(ConfigurationError, match="max_trades_to_send"):
            parse_strategy_config({"strategy_type": "PUT_CREDIT_SPREAD", "max_trades_to_send": 0})


class TestLoadStrategyConfigs:
    """Tests for load_strategy_configs."""

    def test_loads_enabled_strategies(self, config_dir):
        configs = load_strategy_configs(config_dir / "strategies.yaml")

        assert [c.kind for c in configs] == [
            StrategyKind.PUT_CREDIT_SPREAD,
            StrategyKind.LONG_CALL_LEAP_TOP_N,
        ]
        spreads, leaps = configs
        assert spreads.name == "Portfolio Put Spreads"
        assert spreads.securities == ["AAPL", "MSFT"]
        assert spreads.max_trades_to_send == 5
        assert isinstance(spreads.filter, CreditSpreadFilter)
        assert spreads.filter.short_leg.max_delta == 0.20

        assert leaps.securities == ["GOOGL", "NVDA"]
        assert leaps.technical_filter == {"rsi_max": 40}
        assert isinstance(leaps.filter, LongCallLeapFilter)
        assert leaps.filter.top_trades_count == 5

    def test_bad_entry_skipped(self, tmp_path):
        path = tmp_path / "strategies.yaml"
        path.write_text(
            "strategies:\n"
            "  - strategy_type: BULLISH_ZEBRA\n"
            "    filter: {bogus: 1}\n"
            "  - strategy_type: BULLISH_ZEBRA\n"
            "    securities: [IWM]\n"
        )
        configs = load_strategy_configs(path)
        assert len(configs) == 1
        assert configs[0].securities == ["IWM"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_strategy_configs(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("strategies: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_strategy_configs(path)

    def test_missing_strategies_list(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("other: 1\n")
        with pytest.raises(ConfigurationError, match="'strategies' list"):
            load_strategy_configs(path)
