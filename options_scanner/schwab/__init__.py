"""
Schwab market data integration.

- SchwabClient: chain provider and price history source
- SchwabTokenProvider: refresh-token based bearer tokens
- parse_option_chain: raw chain response -> OptionChainSnapshot
"""

from .auth import SchwabTokenProvider
from .client import SchwabClient
from .exceptions import (
    SchwabAPIError,
    SchwabAuthenticationError,
    SchwabInvalidSymbolError,
    SchwabRateLimitError,
)
from .parsers import parse_option_chain

__all__ = [
    "SchwabClient",
    "SchwabTokenProvider",
    "SchwabAPIError",
    "SchwabAuthenticationError",
    "SchwabInvalidSymbolError",
    "SchwabRateLimitError",
    "parse_option_chain",
]
