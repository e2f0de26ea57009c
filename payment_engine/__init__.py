"""
Payment Engine

Replays an ordered stream of client transactions (deposits, withdrawals,
disputes, resolves and chargebacks) and produces final per-client balances.
All amounts are fixed-point with four fractional digits; floats are never used.
"""

__version__ = "1.0.0"
