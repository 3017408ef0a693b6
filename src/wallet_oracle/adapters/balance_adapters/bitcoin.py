"""Bitcoin explorer adapters. Balances arrive in satoshi."""

from __future__ import annotations

from pydantic import BaseModel

from ...constants import (
    BLOCKCHAIN_INFO_API_URL,
    BLOCKCYPHER_API_URL,
    BLOCKSTREAM_API_URL,
    MEMPOOL_API_URL,
)
from ...settings import WalletSettings
from ..base import AdapterError, BalanceRecord, BaseBalanceAdapter


class _BlockCypherBalance(BaseModel):
    final_balance: int


class _EsploraChainStats(BaseModel):
    funded_txo_sum: int
    spent_txo_sum: int


class _EsploraAddress(BaseModel):
    chain_stats: _EsploraChainStats


class _BlockchainInfoAddress(BaseModel):
    final_balance: int


class BlockCypherAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "BTC")

    @property
    def adapter_name(self) -> str:
        return "blockcypher"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET", f"{BLOCKCYPHER_API_URL}/addrs/{address}/balance"
        )
        payload = self._parse(_BlockCypherBalance, data)
        return self._record(address, payload.final_balance)


class EsploraAdapter(BaseBalanceAdapter):
    """Esplora-compatible explorer (Blockstream, mempool.space).

    The confirmed balance is ``funded_txo_sum - spent_txo_sum``; the
    difference is taken in satoshi before scaling.
    """

    api_url: str = BLOCKSTREAM_API_URL
    name: str = "blockstream"

    def __init__(self, config: WalletSettings):
        super().__init__(config, "BTC")

    @property
    def adapter_name(self) -> str:
        return self.name

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json("GET", f"{self.api_url}/address/{address}")
        stats = self._parse(_EsploraAddress, data).chain_stats
        balance_sat = stats.funded_txo_sum - stats.spent_txo_sum
        if balance_sat < 0:
            raise AdapterError(
                self.adapter_name,
                f"spent ({stats.spent_txo_sum}) exceeds funded ({stats.funded_txo_sum})",
            )
        return self._record(address, balance_sat)


class BlockstreamAdapter(EsploraAdapter):
    api_url = BLOCKSTREAM_API_URL
    name = "blockstream"


class MempoolAdapter(EsploraAdapter):
    api_url = MEMPOOL_API_URL
    name = "mempool"


class BlockchainInfoAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "BTC")

    @property
    def adapter_name(self) -> str:
        return "blockchain_info"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET",
            f"{BLOCKCHAIN_INFO_API_URL}/rawaddr/{address}",
            params={"limit": 0},
        )
        payload = self._parse(_BlockchainInfoAddress, data)
        return self._record(address, payload.final_balance)
