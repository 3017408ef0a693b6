from __future__ import annotations

from .exchange_value import ExchangeRateAverager, WalletExchangeValue, average_rate
from .valuation import (
    ValuationAggregator,
    ValuationEntry,
    ValuationResult,
    aggregate_valuation,
)

__all__ = [
    "ExchangeRateAverager",
    "ValuationAggregator",
    "ValuationEntry",
    "ValuationResult",
    "WalletExchangeValue",
    "aggregate_valuation",
    "average_rate",
]
