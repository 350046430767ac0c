"""
Options strategy scanner.

Enumerates multi-leg option trades (credit spreads, iron condors,
broken-wing butterflies, ZEBRAs and long call LEAPs) from option chain
snapshots, filters and ranks them, and groups them per symbol and expiry.
"""

__version__ = "0.1.0"
