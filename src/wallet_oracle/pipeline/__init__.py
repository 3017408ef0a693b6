from __future__ import annotations

from .context import PipelineContext
from .run import (
    run_balances,
    run_exchange_value,
    run_prices,
    run_refresh,
    run_valuation,
)

__all__ = [
    "PipelineContext",
    "run_balances",
    "run_exchange_value",
    "run_prices",
    "run_refresh",
    "run_valuation",
]
