"""Market data providers used alongside the broker chain feed."""

from .finnhub_client import FinnhubAPIError, FinnhubClient

__all__ = ["FinnhubAPIError", "FinnhubClient"]
