"""Exceptions raised by the strategy scanner."""


class ScannerError(Exception):
    """Base exception for scanner errors."""

    pass


class NoExpiryFoundError(ScannerError):
    """
    No expiration matches the requested DTE.

    Raised by the chain model when a chain has no expirations at all.
    Strategies treat this as an empty result, never as a failure.
    """

    pass


class ChainFetchError(ScannerError):
    """Option chain could not be fetched for a symbol."""

    def __init__(self, symbol: str, message: str):
        self.symbol = symbol
        super().__init__(f"[{symbol}] {message}")


class EarningsCheckError(ScannerError):
    """Earnings calendar lookup failed."""

    pass


class ConfigurationError(ScannerError):
    """Invalid scanner or strategy configuration."""

    pass
