"""Exceptions for the Schwab market data client."""


class SchwabAPIError(Exception):
    """Base exception for Schwab API errors."""

    pass


class SchwabAuthenticationError(SchwabAPIError):
    """
    Authentication failure with Schwab API.

    The refresh token is invalid, expired or revoked. Schwab refresh tokens
    expire after seven days; obtain a new one and update
    SCHWAB_REFRESH_TOKEN.
    """

    pass


class SchwabRateLimitError(SchwabAPIError):
    """API rate limit exceeded."""

    pass


class SchwabInvalidSymbolError(SchwabAPIError):
    """Invalid or unknown symbol."""

    pass
