"""Strategy configuration loading.

Strategies are configured in a YAML file:

    strategies:
      - name: Portfolio Put Spreads
        strategy_type: PUT_CREDIT_SPREAD
        securities: securities/portfolio.yaml   # or an inline list
        max_trades_to_send: 20
        filter:
          target_dte: 30
          max_loss_limit: 1000
          min_return_on_risk: 20
          short_leg:
            max_delta: 0.20

A securities file holds a `securities:` list. Relative paths resolve
against the directory of the strategies file. Each entry's filter is
parsed into the filter class registered for its strategy type, so
unknown filter keys are reported at load time.
"""

import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .constants import DEFAULT_MAX_TRADES_TO_SEND
from .exceptions import ConfigurationError
from .scanning.scanner import StrategyConfig
from .strategies.registry import StrategyKind, filter_class_for

logger = logging.getLogger(__name__)


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


def load_securities(path: Union[str, Path]) -> list[str]:
    """
    Load a securities list from a YAML file with a `securities:` key.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path)
    data = _read_yaml(path)
    if not isinstance(data, dict) or not isinstance(data.get("securities"), list):
        raise ConfigurationError(f"{path} must contain a 'securities' list")

    securities = [str(s).strip().upper() for s in data["securities"] if str(s).strip()]
    logger.info(f"Loading securities from: {path} - Found {len(securities)} symbols")
    return securities


def _resolve_securities(value: Any, base_dir: Path) -> list[str]:
    if isinstance(value, list):
        return [str(s).strip().upper() for s in value if str(s).strip()]
    if isinstance(value, str):
        path = Path(value)
        if not path.is_absolute():
            path = base_dir / path
        return load_securities(path)
    raise ConfigurationError("securities must be a list of symbols or a path to a securities file")


def parse_strategy_config(entry: dict[str, Any], base_dir: Path = Path(".")) -> StrategyConfig:
    """
    Parse one strategy entry.

    Args:
        entry: Mapping from the `strategies` list
        base_dir: Directory used to resolve relative securities paths

    Returns:
        StrategyConfig with a filter of the kind's registered class

    Raises:
        ConfigurationError: If the entry is invalid
    """
    if not isinstance(entry, dict):
        raise ConfigurationError("Strategy entry must be a mapping")

    strategy_type = entry.get("strategy_type")
    if not strategy_type:
        raise ConfigurationError("strategy_type is required")

    try:
        kind = StrategyKind.from_name(str(strategy_type))
    except ValueError as e:
        raise ConfigurationError(str(e)) from e

    filter_data = entry.get("filter") or {}
    if not isinstance(filter_data, dict):
        raise ConfigurationError("filter must be a mapping")

    try:
        strategy_filter = filter_class_for(kind).from_dict(filter_data)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid filter for {kind.value}: {e}") from e

    securities = _resolve_securities(entry.get("securities", []), base_dir)

    try:
        return StrategyConfig(
            kind=kind,
            filter=strategy_filter,
            securities=securities,
            name=entry.get("name"),
            technical_filter=entry.get("technical_filter"),
            max_trades_to_send=int(entry.get("max_trades_to_send", DEFAULT_MAX_TRADES_TO_SEND)),
        )
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid strategy {kind.value}: {e}") from e


def load_strategy_configs(path: Union[str, Path]) -> list[StrategyConfig]:
    """
    Load all enabled strategies from a YAML file.

    Entries with `enabled: false` are skipped. An invalid entry is logged
    and skipped so one bad strategy does not block the others.

    Args:
        path: Path to the strategies file

    Returns:
        Parsed strategy configs in file order

    Raises:
        ConfigurationError: If the file is missing, not valid YAML or has
            no `strategies` list
    """
    path = Path(path)
    data = _read_yaml(path)
    if not isinstance(data, dict) or not isinstance(data.get("strategies"), list):
        raise ConfigurationError(f"{path} must contain a 'strategies' list")

    configs = []
    for i, entry in enumerate(data["strategies"]):
        if isinstance(entry, dict) and not entry.get("enabled", True):
            logger.debug(f"Skipping disabled strategy #{i + 1}")
            continue
        try:
            configs.append(parse_strategy_config(entry, base_dir=path.parent))
        except ConfigurationError as e:
            logger.error(f"Skipping strategy #{i + 1}: {e}")

    logger.info(f"Loaded {len(configs)} strategies from {path}")
    return configs
