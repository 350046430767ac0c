"""
Click CLI for the options strategy scanner.

Commands:
    options-scanner strategies CONFIG      List configured strategies
    options-scanner scan CONFIG            Run the configured strategies
"""

import logging
import os
import sys
from typing import Optional

import click

from .config import FinnhubConfig, SchwabConfig
from .earnings_calendar import EarningsCalendar
from .exceptions import ConfigurationError
from .market_data.finnhub_client import FinnhubClient
from .scanning.formatters import execution_to_json, format_execution_result
from .scanning.scanner import OptionsScanner, StrategyConfig
from .schwab.client import SchwabClient
from .strategy_config import load_strategy_configs
from .volatility import HistoricalVolatilityProvider

logger = logging.getLogger(__name__)


def _print_error(message: str) -> None:
    """Print error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def _print_success(message: str) -> None:
    """Print success message."""
    click.secho(message, fg="green")


def _print_warning(message: str) -> None:
    """Print warning message."""
    click.secho(f"Warning: {message}", fg="yellow")


def _load_configs(path: str) -> list[StrategyConfig]:
    try:
        return load_strategy_configs(path)
    except ConfigurationError as e:
        _print_error(str(e))
        sys.exit(1)


def _select(
    configs: list[StrategyConfig], names: tuple[str, ...], symbols: tuple[str, ...]
) -> list[StrategyConfig]:
    """Narrow configs to the named strategies and override their securities."""
    if names:
        wanted = {n.strip().lower() for n in names}
        configs = [
            c for c in configs if c.name.lower() in wanted or c.kind.value.lower() in wanted
        ]
    if symbols:
        override = [s.strip().upper() for s in symbols]
        for config in configs:
            config.securities = list(override)
    return configs


def _build_earnings(verbose: bool) -> Optional[EarningsCalendar]:
    """Earnings calendar if FINNHUB_API_KEY is set, otherwise None."""
    if not os.getenv("FINNHUB_API_KEY"):
        if verbose:
            click.echo("! Finnhub not configured, earnings checks disabled", err=True)
        return None

    try:
        calendar = EarningsCalendar(FinnhubClient(FinnhubConfig.from_env()))
    except ConfigurationError as e:
        _print_warning(f"Finnhub not configured: {e}")
        return None
    if verbose:
        click.echo("+ Finnhub client configured (earnings calendar)")
    return calendar


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """
    Options Strategy Scanner - Find multi-leg option trades.

    Scans option chains for credit spreads, iron condors, broken-wing
    butterflies, ZEBRAs and long call LEAPs.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("strategies")
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
def list_strategies(config_file: str) -> None:
    """List the enabled strategies in CONFIG_FILE."""
    configs = _load_configs(config_file)
    if not configs:
        click.echo("No enabled strategies configured.")
        return

    for config in configs:
        click.echo()
        click.secho(f"=== {config.name} ===", bold=True)
        click.echo(f"Type:       {config.kind.value}")
        click.echo(f"Securities: {len(config.securities)} ({', '.join(config.securities[:10])})")
        click.echo(f"Max trades: {config.max_trades_to_send}")
        if config.technical_filter is not None:
            click.echo("Technical filter: configured")


@cli.command()
@click.argument("config_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--strategy", "-s", "strategy_names", multiple=True, help="Run only this strategy")
@click.option("--symbol", "symbols", multiple=True, help="Scan only this symbol")
@click.option("--json", "output_json", is_flag=True, help="JSON output")
@click.pass_context
def scan(
    ctx: click.Context,
    config_file: str,
    strategy_names: tuple[str, ...],
    symbols: tuple[str, ...],
    output_json: bool,
) -> None:
    """Run the strategies in CONFIG_FILE and print the trades found."""
    verbose = ctx.obj.get("verbose", False)

    configs = _select(_load_configs(config_file), strategy_names, symbols)
    if not configs:
        _print_error("No matching strategies to run")
        sys.exit(1)

    try:
        schwab_client = SchwabClient(SchwabConfig.from_env())
    except ConfigurationError as e:
        _print_error(f"Schwab client initialization failed: {e}")
        sys.exit(1)

    earnings = _build_earnings(verbose)
    if earnings is None and any(not c.filter.ignore_earnings for c in configs):
        _print_warning("Earnings checks requested but Finnhub is not configured")

    scanner = OptionsScanner(
        schwab_client,
        earnings=earnings,
        volatility=HistoricalVolatilityProvider(schwab_client),
    )

    try:
        execution = scanner.run(configs)
    finally:
        schwab_client.close()

    if output_json:
        click.echo(execution_to_json(execution))
        return

    click.echo(format_execution_result(execution))
    if execution.total_trades_found:
        _print_success(f"Found {execution.total_trades_found} trades")
    else:
        _print_warning("No trades found")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
