"""
Schwab API response parsers.

Converts raw Schwab market data responses into the scanner's models.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List

from ..models.chain import ExpirationKey, ExpiryMap, OptionChainSnapshot, OptionQuote
from ..volatility import PriceData
from .exceptions import SchwabAPIError

logger = logging.getLogger(__name__)

UNPRICED_DELTA = -999.0


def parse_option_chain(symbol: str, data: Dict[str, Any]) -> OptionChainSnapshot:
    """
    Parse a Schwab option chain response.

    Schwab keys each expiration as "YYYY-MM-DD:DTE" and each strike as a
    string ("95.0") mapping to a list of contracts.

    Args:
        symbol: Underlying symbol
        data: Raw Schwab API response

    Returns:
        OptionChainSnapshot (not yet scrubbed)

    Raises:
        SchwabAPIError: If Schwab reports a failed chain request
    """
    status = data.get("status", "SUCCESS")
    if status == "FAILED":
        raise SchwabAPIError(f"Option chain request failed for {symbol}")

    underlying = data.get("underlying") or {}
    underlying_price = data.get("underlyingPrice")
    if underlying_price is None:
        underlying_price = underlying.get("last") or 0.0

    dividend_yield = data.get("dividendYield")
    if dividend_yield is None:
        dividend_yield = underlying.get("dividendYield", 0.0)

    snapshot = OptionChainSnapshot(
        symbol=data.get("symbol", symbol),
        underlying_price=float(underlying_price),
        calls_by_expiry=parse_expiration_map(data.get("callExpDateMap", {})),
        puts_by_expiry=parse_expiration_map(data.get("putExpDateMap", {})),
        dividend_yield=float(dividend_yield or 0.0),
        interest_rate=data.get("interestRate"),
        volatility=data.get("volatility"),
        status=status,
    )

    logger.debug(
        f"Parsed {snapshot.quote_count} quotes across "
        f"{len(snapshot.expiry_keys())} expirations for {symbol}"
    )
    return snapshot


def parse_expiration_map(exp_map: Dict[str, Dict[str, List[Dict[str, Any]]]]) -> ExpiryMap:
    """Parse one side (callExpDateMap or putExpDateMap) of a chain."""
    parsed: ExpiryMap = {}
    for exp_key, strikes in exp_map.items():
        key = ExpirationKey.parse(exp_key)
        parsed[key] = {
            strike: [parse_option_quote(key, float(strike), contract) for contract in contracts]
            for strike, contracts in strikes.items()
        }
    return parsed


def _number(data: Dict[str, Any], field: str, default: float = 0.0) -> float:
    """Numeric field where an explicit null counts as missing."""
    value = data.get(field)
    return float(value) if value is not None else default


def parse_option_quote(key: ExpirationKey, strike: float, data: Dict[str, Any]) -> OptionQuote:
    """
    Parse a single Schwab contract.

    Schwab reports volatility in percent and uses -999 for Greeks it cannot
    compute. A null or missing delta is given the same value, so the chain
    scrub removes the quote. Other null fields default to 0.
    """
    return OptionQuote(
        strike=_number(data, "strikePrice", strike),
        bid=_number(data, "bid"),
        ask=_number(data, "ask"),
        mark=_number(data, "mark"),
        last=_number(data, "last"),
        delta=_number(data, "delta", UNPRICED_DELTA),
        gamma=_number(data, "gamma"),
        theta=_number(data, "theta"),
        vega=_number(data, "vega"),
        volatility=_number(data, "volatility"),
        open_interest=int(data.get("openInterest") or 0),
        volume=int(data.get("totalVolume") or 0),
        intrinsic_value=_number(data, "intrinsicValue"),
        extrinsic_value=_number(data, "extrinsicValue"),
        expiration_date=key.date,
        dte=int(_number(data, "daysToExpiration", key.dte)),
        put_call=data.get("putCall") or "",
        symbol=data.get("symbol") or "",
        description=data.get("description") or "",
    )


def parse_price_history(symbol: str, data: Dict[str, Any]) -> PriceData:
    """
    Parse a Schwab price history response.

    Schwab returns candles in format:
    {
        "candles": [
            {"open": 150.0, "high": 152.5, "low": 149.0, "close": 151.0,
             "volume": 1000000, "datetime": 1704067200000},
            ...
        ],
        "symbol": "AAPL",
        "empty": false
    }

    Raises:
        SchwabAPIError: If no candles were returned
    """
    candles = data.get("candles", [])
    if not candles:
        raise SchwabAPIError(f"No price data returned for {symbol}")

    dates: List[str] = []
    closes: List[float] = []
    volumes: List[int] = []
    for candle in candles:
        timestamp_ms = candle.get("datetime") or 0
        dates.append(datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d"))
        closes.append(_number(candle, "close"))
        volumes.append(int(candle.get("volume") or 0))

    logger.debug(f"Parsed {len(candles)} candles for {symbol}")
    return PriceData(dates=dates, closes=closes, volumes=volumes)
