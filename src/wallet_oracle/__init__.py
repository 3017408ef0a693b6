"""USD valuation of tracked crypto wallets with provider fallback and caching."""

__version__ = "0.1.0"
