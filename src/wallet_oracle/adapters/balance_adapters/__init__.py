from __future__ import annotations

from collections.abc import Callable

from ...settings import WalletSettings
from ..base import BaseBalanceAdapter
from .bitcoin import (
    BlockchainInfoAdapter,
    BlockCypherAdapter,
    BlockstreamAdapter,
    MempoolAdapter,
)
from .cardano import BlockfrostAdapter, CardanoScanAdapter, KoiosAdapter
from .evm import EtherscanAdapter, EvmRpcAdapter, SnowtraceAdapter
from .solana import SolanaRpcAdapter, SolscanAdapter


def _btc(config: WalletSettings) -> list[BaseBalanceAdapter]:
    return [
        BlockCypherAdapter(config),
        BlockstreamAdapter(config),
        MempoolAdapter(config),
        BlockchainInfoAdapter(config),
    ]


def _eth(config: WalletSettings) -> list[BaseBalanceAdapter]:
    return [
        EtherscanAdapter(config),
        *(EvmRpcAdapter(config, url, "ETH") for url in config.eth_rpc_urls),
    ]


def _sol(config: WalletSettings) -> list[BaseBalanceAdapter]:
    return [
        *(SolanaRpcAdapter(config, url) for url in config.solana_rpc_urls),
        SolscanAdapter(config),
    ]


def _ada(config: WalletSettings) -> list[BaseBalanceAdapter]:
    return [
        CardanoScanAdapter(config),
        BlockfrostAdapter(config),
        KoiosAdapter(config),
    ]


def _avax(config: WalletSettings) -> list[BaseBalanceAdapter]:
    return [
        SnowtraceAdapter(config),
        *(EvmRpcAdapter(config, url, "AVAX") for url in config.avax_rpc_urls),
    ]


BALANCE_ADAPTER_REGISTRY: dict[
    str, Callable[[WalletSettings], list[BaseBalanceAdapter]]
] = {
    "BTC": _btc,
    "ETH": _eth,
    "SOL": _sol,
    "ADA": _ada,
    "AVAX": _avax,
}


def build_balance_adapters(
    symbol: str, config: WalletSettings
) -> list[BaseBalanceAdapter]:
    """Build the ordered provider list for one asset.

    Args:
        symbol: Asset symbol (case-insensitive)
        config: Settings supplying endpoints and credentials

    Returns:
        Adapters in fallback order, primary first

    Raises:
        ValueError: If symbol is not recognized
    """
    symbol_normalized = symbol.upper()
    if symbol_normalized not in BALANCE_ADAPTER_REGISTRY:
        raise ValueError(
            f"Unknown asset '{symbol}'. "
            f"Available: {', '.join(BALANCE_ADAPTER_REGISTRY.keys())}"
        )
    return BALANCE_ADAPTER_REGISTRY[symbol_normalized](config)


__all__ = [
    "BALANCE_ADAPTER_REGISTRY",
    "BlockCypherAdapter",
    "BlockchainInfoAdapter",
    "BlockfrostAdapter",
    "BlockstreamAdapter",
    "CardanoScanAdapter",
    "EtherscanAdapter",
    "EvmRpcAdapter",
    "KoiosAdapter",
    "MempoolAdapter",
    "SnowtraceAdapter",
    "SolanaRpcAdapter",
    "SolscanAdapter",
    "build_balance_adapters",
]
