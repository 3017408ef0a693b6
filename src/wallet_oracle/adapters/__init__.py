from __future__ import annotations

from .balance_adapters import BALANCE_ADAPTER_REGISTRY, build_balance_adapters
from .base import AdapterError, BalanceRecord
from .price_adapters import PRICE_ADAPTERS, RATE_ADAPTER_REGISTRY, PriceQuote

__all__ = [
    "AdapterError",
    "BALANCE_ADAPTER_REGISTRY",
    "BalanceRecord",
    "PRICE_ADAPTERS",
    "PriceQuote",
    "RATE_ADAPTER_REGISTRY",
    "build_balance_adapters",
]
