"""
Shared constants for strategy scanning.

This module centralizes the numeric assumptions used across the chain
model, the strategy enumerators and the scanner, so the economics of
every strategy are tuned from one place.
"""

# =============================================================================
# Contract Economics
# =============================================================================

CONTRACT_MULTIPLIER = 100
"""Shares controlled by one equity option contract."""

DAYS_PER_YEAR = 365.0
"""Calendar days used to annualize carrying costs and break-even CAGR."""


# =============================================================================
# Quote Scrubbing
# =============================================================================

INVALID_DELTA_THRESHOLD = 10.0
"""Quotes with |delta| above this are upstream sentinel values (e.g. -999)."""


# =============================================================================
# LEAP Cost-of-Carry Defaults
# =============================================================================

DEFAULT_MARGIN_INTEREST_RATE = 6.0
"""Annual margin interest rate (percent) for the stock-on-margin comparison."""

DEFAULT_SAVINGS_INTEREST_RATE = 10.0
"""Annual return (percent) assumed on cash freed up by buying the option."""

MARGIN_REQUIREMENT = 0.5
"""Fraction of the stock price financed when buying on margin."""

DEFAULT_COST_EFFICIENCY_PERCENT = 90.0
"""Option carrying cost must be at most this percent of the stock carrying cost."""


# =============================================================================
# Ranking
# =============================================================================

DEFAULT_TOP_TRADES_COUNT = 3
"""Candidates returned per symbol by the Top-N LEAP strategy."""

RELAXATION_LEVELS: tuple[tuple[str, ...], ...] = (
    ("max_cagr_for_break_even",),
    ("max_cagr_for_break_even", "max_option_price_percent"),
    ("max_cagr_for_break_even", "max_option_price_percent", "min_cost_savings_percent"),
)
"""Quality constraints cleared at each progressive relaxation level, in order."""

DEFAULT_MAX_TRADES_TO_SEND = 30
"""Per-symbol cap on candidates forwarded after ranking."""
