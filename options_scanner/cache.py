"""In-memory option chain cache scoped to one scan run.

Every strategy in a run reads chains through the same OptionChainCache, so
a symbol scanned by five strategies is fetched from the broker once. The
cache is created by the scanner at the start of a run and discarded at the
end; it is never shared across runs.

Features:
- At most one fetch per symbol, even with concurrent callers
- Per-symbol in-flight locks, so a slow fetch never blocks other symbols
- Invalid quotes are scrubbed before a chain is published
- Fetch counter and hit counter for run statistics
"""

import logging
import threading
from typing import Any

from .models.chain import OptionChainSnapshot

logger = logging.getLogger(__name__)


class OptionChainCache:
    """
    Lazy, fetch-once-per-symbol chain cache.

    Attributes:
        provider: Chain provider exposing fetch_chain(symbol) -> OptionChainSnapshot
            and raising ChainFetchError on failure
    """

    def __init__(self, provider: Any):
        """
        Initialize the cache.

        Args:
            provider: Chain provider (e.g. SchwabClient)
        """
        self.provider = provider
        self._chains: dict[str, OptionChainSnapshot] = {}
        self._inflight: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._fetch_count = 0
        self._hit_count = 0

    @property
    def fetch_count(self) -> int:
        """Number of underlying provider fetches made by this cache."""
        return self._fetch_count

    @property
    def hit_count(self) -> int:
        return self._hit_count

    def get(self, symbol: str) -> OptionChainSnapshot:
        """
        Get the chain for a symbol, fetching it on first access.

        Args:
            symbol: Underlying ticker symbol

        Returns:
            Scrubbed OptionChainSnapshot

        Raises:
            ChainFetchError: If the provider fails; failures are not cached
        """
        symbol = symbol.upper()

        with self._lock:
            chain = self._chains.get(symbol)
            if chain is not None:
                self._hit_count += 1
                logger.debug(f"Cache hit for {symbol} option chain")
                return chain
            symbol_lock = self._inflight.setdefault(symbol, threading.Lock())

        # Only callers for the same symbol wait here
        with symbol_lock:
            with self._lock:
                chain = self._chains.get(symbol)
                if chain is not None:
                    self._hit_count += 1
                    return chain
                self._fetch_count += 1

            logger.info(f"[{symbol}] Fetching option chain")
            chain = self.provider.fetch_chain(symbol)
            removed = chain.scrub_invalid_quotes()
            if removed:
                logger.info(f"[{symbol}] Removed {removed} quotes with invalid delta")

            with self._lock:
                self._chains[symbol] = chain
                self._inflight.pop(symbol, None)
            return chain

    def get_all(self, symbols: list[str]) -> dict[str, OptionChainSnapshot]:
        """
        Get chains for several symbols, skipping the ones that fail.

        Args:
            symbols: Underlying ticker symbols

        Returns:
            Mapping of symbol -> chain for every successful fetch
        """
        chains = {}
        for symbol in symbols:
            try:
                chains[symbol.upper()] = self.get(symbol)
            except Exception as e:
                logger.error(f"[{symbol}] Failed to get option chain: {e}")
        return chains

    def is_cached(self, symbol: str) -> bool:
        with self._lock:
            return symbol.upper() in self._chains

    def __len__(self) -> int:
        with self._lock:
            return len(self._chains)

    def clear(self) -> None:
        """Drop all cached chains and reset counters."""
        with self._lock:
            self._chains.clear()
            self._inflight.clear()
            self._fetch_count = 0
            self._hit_count = 0
        logger.debug("Option chain cache cleared")

    def stats(self) -> dict[str, int]:
        """Cache statistics for run reporting."""
        with self._lock:
            return {
                "cached_symbols": len(self._chains),
                "fetches": self._fetch_count,
                "hits": self._hit_count,
            }

    def log_stats(self) -> None:
        stats = self.stats()
        logger.info(
            f"Option chain cache: {stats['cached_symbols']} symbols, "
            f"{stats['fetches']} fetches, {stats['hits']} hits"
        )
