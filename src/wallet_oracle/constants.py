"""Asset, endpoint and cache-key constants."""

from dataclasses import dataclass
from typing import TypedDict


@dataclass(frozen=True)
class AssetConfig:
    """A tracked wallet: symbol, address and native decimal exponent."""

    symbol: str
    address: str
    decimals: int


class DefaultWallets(TypedDict):
    BTC: str
    ETH: str
    SOL: str
    ADA: str
    AVAX: str


ASSET_DECIMALS: dict[str, int] = {
    "BTC": 8,  # satoshi
    "ETH": 18,  # wei
    "SOL": 9,  # lamport
    "ADA": 6,  # lovelace
    "AVAX": 18,  # wei
}

SUPPORTED_SYMBOLS: tuple[str, ...] = tuple(ASSET_DECIMALS)

DEFAULT_WALLETS: DefaultWallets = {
    "BTC": "34xp4vRoCGJym3xR7yCVPFHoCNxv4Twseo",
    "ETH": "0x2bf916f8169Ed2a77324d3E168284FC252aE4087",
    "SOL": "8BxX8691h5pffmdhfRTLaQeiHJkdgQiyKvNrrEdM8ri6",
    "ADA": "addr1qxcmjnryz57hw08pj8dwrrw7sx7c83dfrzf3kk5p0lp9qjttashgj43n6fy5uwxsdahrsdge6y04hadhgrmhlt2r2rhs2u72cx",
    "AVAX": "0xD417b9DADa43143fEBc1adF28D12170303999c24",
}

DEFAULT_REQUEST_TIMEOUT = 5.0  # seconds, per adapter call

# Bitcoin explorers
BLOCKCYPHER_API_URL = "https://api.blockcypher.com/v1/btc/main"
BLOCKSTREAM_API_URL = "https://blockstream.info/api"
MEMPOOL_API_URL = "https://mempool.space/api"
BLOCKCHAIN_INFO_API_URL = "https://blockchain.info"

# EVM explorers and RPCs
ETHERSCAN_API_URL = "https://api.etherscan.io/api"
SNOWTRACE_API_URL = "https://api.snowtrace.io/api"
DEFAULT_ETH_RPC_URLS = [
    "https://eth.llamarpc.com",
    "https://ethereum.publicnode.com",
    "https://rpc.ankr.com/eth",
    "https://cloudflare-eth.com",
]
DEFAULT_AVAX_RPC_URLS = ["https://api.avax.network/ext/bc/C/rpc"]

# Solana
DEFAULT_SOLANA_RPC_URLS = ["https://api.mainnet-beta.solana.com"]
SOLSCAN_API_URL = "https://api.solscan.io"

# Cardano
CARDANOSCAN_API_URL = "https://api.cardanoscan.io/api/v1"
BLOCKFROST_API_URL = "https://cardano-mainnet.blockfrost.io/api/v0"
KOIOS_API_URL = "https://api.koios.rest/api/v1"

# Quotes and exchange rates
COINMARKETCAP_API_URL = "https://pro-api.coinmarketcap.com/v1"
BINANCE_API_URL = "https://api.binance.com/api/v3"
COINBASE_API_URL = "https://api.coinbase.com/v2"
DEFAULT_EXCHANGES = ["binance", "coinbase"]

# Cache keys
PRICE_CACHE_KEY = "price_data"


def balance_cache_key(symbol: str, address: str) -> str:
    """Return the cache key holding the last good balance of a wallet."""
    return f"{symbol.lower()}_balance_{address}"
