"""Synthetic option chain builders shared by the strategy tests."""

from typing import Optional, Union

from options_scanner.models.chain import ExpirationKey, OptionChainSnapshot, OptionQuote

EXPIRY = "2026-11-20"
EXPIRY_KEY = f"{EXPIRY}:30"

LEAP_NEAR = "2027-12-17"
LEAP_FAR = "2028-06-16"


def build_quote(
    strike: float,
    bid: float = 0.0,
    ask: float = 0.0,
    delta: float = 0.0,
    dte: int = 30,
    expiration_date: str = EXPIRY,
    **kwargs,
) -> OptionQuote:
    """Quote with mark defaulting to the bid/ask midpoint."""
    kwargs.setdefault("mark", round((bid + ask) / 2, 4))
    return OptionQuote(
        strike=strike,
        bid=bid,
        ask=ask,
        delta=delta,
        dte=dte,
        expiration_date=expiration_date,
        **kwargs,
    )


def _side(side: Optional[dict]) -> dict:
    expiries = {}
    for key, strikes in (side or {}).items():
        if not isinstance(key, ExpirationKey):
            key = ExpirationKey.parse(key)
        expiries[key] = {
            strike: quotes if isinstance(quotes, list) else [quotes]
            for strike, quotes in strikes.items()
        }
    return expiries


def build_chain(
    symbol: str = "TEST",
    price: float = 100.0,
    calls: Optional[dict[Union[str, ExpirationKey], dict]] = None,
    puts: Optional[dict[Union[str, ExpirationKey], dict]] = None,
    dividend_yield: float = 0.0,
) -> OptionChainSnapshot:
    """
    Chain from {"date:dte": {"strike": quote_or_list}} side maps.

    A single quote is wrapped into a one-element strike bucket.
    """
    return OptionChainSnapshot(
        symbol=symbol,
        underlying_price=price,
        calls_by_expiry=_side(calls),
        puts_by_expiry=_side(puts),
        dividend_yield=dividend_yield,
    )
