"""Tests for the options-scanner CLI."""

import json
from datetime import datetime
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from options_scanner.cli import cli
from options_scanner.earnings_calendar import EarningsCalendar
from options_scanner.scanning import ExecutionResult, StrategyResult
from options_scanner.strategies import StrategyKind

CONFIG_YAML = """
strategies:
  - name: Weekly Puts
    strategy_type: PUT_CREDIT_SPREAD
    securities: [AAPL, MSFT]
  - strategy_type: BULLISH_ZEBRA
    securities: [SPY]
    max_trades_to_send: 3
    technical_filter: {rsi_max: 40}
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def config_file(tmp_path) -> str:
    path = tmp_path / "strategies.yaml"
    path.write_text(CONFIG_YAML)
    return str(path)


@pytest.fixture
def schwab_env(monkeypatch):
    monkeypatch.setenv("SCHWAB_CLIENT_ID", "id")
    monkeypatch.setenv("SCHWAB_CLIENT_SECRET", "secret")
    monkeypatch.setenv("SCHWAB_REFRESH_TOKEN", "rt")
    monkeypatch.delenv("FINNHUB_API_KEY", raising=False)


def _execution():
    result = StrategyResult(strategy_name="Weekly Puts", kind=StrategyKind.PUT_CREDIT_SPREAD)
    result.errors["MSFT"] = "HTTP 500"
    return ExecutionResult(
        execution_id="exec_1", timestamp=datetime(2026, 10, 19, 9, 30), results=[result]
    )


class TestStrategiesCommand:
    """Tests for 'options-scanner strategies'."""

    def test_lists_enabled_strategies(self, runner, config_file):
        """strategies should print one block per configured strategy."""
        result = runner.invoke(cli, ["strategies", config_file])

        assert result.exit_code == 0
        assert "=== Weekly Puts ===" in result.output
        assert "=== Bullish ZEBRA ===" in result.output
        assert "Securities: 2 (AAPL, MSFT)" in result.output
        assert "Max trades: 3" in result.output
        assert "Technical filter: configured" in result.output

    def test_no_enabled_strategies(self, runner, tmp_path):
        path = tmp_path / "off.yaml"
        path.write_text("strategies:\n  - strategy_type: IRON_CONDOR\n    enabled: false\n")

        result = runner.invoke(cli, ["strategies", str(path)])
        assert result.exit_code == 0
        assert "No enabled strategies configured." in result.output

    def test_invalid_config(self, runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("strategy: []\n")

        result = runner.invoke(cli, ["strategies", str(path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(cli, ["strategies", str(tmp_path / "missing.yaml")])
        assert result.exit_code != 0


class TestScanCommand:
    """Tests for 'options-scanner scan'."""

    def test_missing_credentials(self, runner, config_file, monkeypatch):
        """scan should exit 1 when Schwab credentials are not set."""
        for var in ("SCHWAB_CLIENT_ID", "SCHWAB_CLIENT_SECRET", "SCHWAB_REFRESH_TOKEN"):
            monkeypatch.delenv(var, raising=False)

        result = runner.invoke(cli, ["scan", config_file])
        assert result.exit_code == 1
        assert "Schwab client initialization failed" in result.output

    def test_no_matching_strategy(self, runner, config_file, schwab_env):
        result = runner.invoke(cli, ["scan", config_file, "--strategy", "Iron Condor"])
        assert result.exit_code == 1
        assert "No matching strategies to run" in result.output

    def test_json_output(self, runner, config_file, schwab_env):
        """scan --json should print the execution result as JSON."""
        with patch("options_scanner.cli.SchwabClient") as client_cls, patch(
            "options_scanner.cli.OptionsScanner"
        ) as scanner_cls:
            scanner_cls.return_value.run.return_value = _execution()
            result = runner.invoke(cli, ["scan", config_file, "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["execution_id"] == "exec_1"
        assert data["results"][0]["errors"] == {"MSFT": "HTTP 500"}
        client_cls.return_value.close.assert_called_once()

    def test_strategy_and_symbol_selection(self, runner, config_file, schwab_env):
        """--strategy and --symbol should narrow what is scanned."""
        with patch("options_scanner.cli.SchwabClient"), patch(
            "options_scanner.cli.OptionsScanner"
        ) as scanner_cls:
            scanner_cls.return_value.run.return_value = _execution()
            result = runner.invoke(
                cli, ["scan", config_file, "-s", "weekly puts", "--symbol", "nvda"]
            )

        assert result.exit_code == 0
        configs = scanner_cls.return_value.run.call_args.args[0]
        assert [c.name for c in configs] == ["Weekly Puts"]
        assert configs[0].securities == ["NVDA"]
        assert "No trades found" in result.output

    def test_select_by_strategy_type(self, runner, config_file, schwab_env):
        with patch("options_scanner.cli.SchwabClient"), patch(
            "options_scanner.cli.OptionsScanner"
        ) as scanner_cls:
            scanner_cls.return_value.run.return_value = _execution()
            runner.invoke(cli, ["scan", config_file, "-s", "BULLISH_ZEBRA"])

        configs = scanner_cls.return_value.run.call_args.args[0]
        assert [c.kind for c in configs] == [StrategyKind.BULLISH_ZEBRA]

    def test_client_closed_on_failure(self, runner, config_file, schwab_env):
        with patch("options_scanner.cli.SchwabClient") as client_cls, patch(
            "options_scanner.cli.OptionsScanner"
        ) as scanner_cls:
            scanner_cls.return_value.run.side_effect = RuntimeError("boom")
            result = runner.invoke(cli, ["scan", config_file])

        assert result.exit_code != 0
        client_cls.return_value.close.assert_called_once()

    def test_earnings_calendar_built_when_configured(
        self, runner, config_file, schwab_env, monkeypatch
    ):
        monkeypatch.setenv("FINNHUB_API_KEY", "fh_key")
        with patch("options_scanner.cli.SchwabClient"), patch(
            "options_scanner.cli.OptionsScanner"
        ) as scanner_cls:
            scanner_cls.return_value.run.return_value = _execution()
            runner.invoke(cli, ["scan", config_file])

        earnings = scanner_cls.call_args.kwargs["earnings"]
        assert isinstance(earnings, EarningsCalendar)
        assert earnings._client.config.api_key == "fh_key"
