"""Shared fixtures for building synthetic option chains."""

import pytest

from helpers import EXPIRY_KEY, LEAP_FAR, LEAP_NEAR, build_chain, build_quote


@pytest.fixture
def quote_factory():
    return build_quote


@pytest.fixture
def chain_factory():
    return build_chain


@pytest.fixture
def put_spread_chain():
    """Price 100 with 90 and 95 puts: selling 95 / buying 90 nets $140."""
    return build_chain(
        price=100.0,
        puts={
            EXPIRY_KEY: {
                "90.0": build_quote(90.0, bid=1.00, ask=1.10, delta=-0.15),
                "95.0": build_quote(95.0, bid=2.50, ask=2.60, delta=-0.30),
            }
        },
    )


@pytest.fixture
def call_ladder_chain():
    """Price 100 with calls 80-120 in 10 point steps at one expiry."""
    calls = {
        "80.0": build_quote(80.0, bid=21.0, ask=21.5, delta=0.90, extrinsic_value=1.5),
        "90.0": build_quote(90.0, bid=12.0, ask=12.4, delta=0.75, extrinsic_value=2.4),
        "100.0": build_quote(100.0, bid=5.0, ask=5.2, delta=0.50, extrinsic_value=5.2),
        "110.0": build_quote(110.0, bid=1.8, ask=2.0, delta=0.25, extrinsic_value=2.0),
        "120.0": build_quote(120.0, bid=0.5, ask=0.6, delta=0.10, extrinsic_value=0.6),
    }
    return build_chain(price=100.0, calls={EXPIRY_KEY: calls})


@pytest.fixture
def leap_chain():
    """
    Price 100 with deep ITM calls at 425 and 605 DTE plus a 30 DTE expiry.

    At 425 DTE the 60 call passes every default check, the 80 call has a
    higher break-even CAGR and lower cost savings, and the 100 call fails
    cost efficiency.
    """
    def call(strike, ask, delta, dte, expiry):
        return build_quote(
            strike, bid=ask - 0.2, ask=ask, delta=delta, dte=dte, expiration_date=expiry
        )

    return build_chain(
        price=100.0,
        calls={
            "2026-11-20:30": {"60.0": call(60.0, 40.5, 0.95, 30, "2026-11-20")},
            f"{LEAP_NEAR}:425": {
                "60.0": call(60.0, 42.0, 0.92, 425, LEAP_NEAR),
                "80.0": call(80.0, 24.0, 0.78, 425, LEAP_NEAR),
                "100.0": call(100.0, 12.0, 0.55, 425, LEAP_NEAR),
            },
            f"{LEAP_FAR}:605": {"60.0": call(60.0, 43.0, 0.90, 605, LEAP_FAR)},
        },
    )
