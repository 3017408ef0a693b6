from __future__ import annotations

from .base import BasePriceAdapter, BaseRateAdapter, ExchangeRateSample, PriceQuote
from .coinmarketcap import CoinMarketCapAdapter
from .exchanges import BinanceRateAdapter, CoinbaseRateAdapter

PRICE_ADAPTERS: list[type[BasePriceAdapter]] = [
    CoinMarketCapAdapter,
]

RATE_ADAPTER_REGISTRY: dict[str, type[BaseRateAdapter]] = {
    "binance": BinanceRateAdapter,
    "coinbase": CoinbaseRateAdapter,
}


def get_rate_adapter_class(exchange_name: str) -> type[BaseRateAdapter]:
    """Get exchange-rate adapter class by exchange name.

    Args:
        exchange_name: Name of the exchange (case-insensitive)

    Returns:
        Adapter class

    Raises:
        ValueError: If exchange_name is not recognized
    """
    name_normalized = exchange_name.lower()
    if name_normalized not in RATE_ADAPTER_REGISTRY:
        raise ValueError(
            f"Unsupported exchange '{exchange_name}'. "
            f"Available: {', '.join(RATE_ADAPTER_REGISTRY.keys())}"
        )
    return RATE_ADAPTER_REGISTRY[name_normalized]


__all__ = [
    "PRICE_ADAPTERS",
    "RATE_ADAPTER_REGISTRY",
    "BasePriceAdapter",
    "BaseRateAdapter",
    "BinanceRateAdapter",
    "CoinMarketCapAdapter",
    "CoinbaseRateAdapter",
    "ExchangeRateSample",
    "PriceQuote",
    "get_rate_adapter_class",
]
