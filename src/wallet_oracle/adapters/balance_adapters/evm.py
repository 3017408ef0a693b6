"""EVM balance adapters: Etherscan-style explorers and raw JSON-RPC."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel

from ...constants import ETHERSCAN_API_URL, SNOWTRACE_API_URL
from ...settings import WalletSettings
from ...units import hex_to_int
from ..base import AdapterError, BalanceRecord, BaseBalanceAdapter


class _ExplorerBalance(BaseModel):
    status: str
    message: str = ""
    result: str


class _RpcResponse(BaseModel):
    result: Any = None
    error: Any = None


class ExplorerBalanceAdapter(BaseBalanceAdapter):
    """Etherscan-compatible ``module=account&action=balance`` endpoint.

    A payload with ``status != "1"`` is a provider failure even on HTTP 200.
    """

    api_url: str = ETHERSCAN_API_URL
    api_key_setting: str = "etherscan_api_key"
    name: str = "etherscan"
    chain_symbol: str = "ETH"

    def __init__(self, config: WalletSettings):
        super().__init__(config, self.chain_symbol)

    @property
    def adapter_name(self) -> str:
        return self.name

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET",
            self.api_url,
            params={
                "module": "account",
                "action": "balance",
                "address": address,
                "tag": "latest",
                "apikey": self.config.secret(self.api_key_setting),
            },
        )
        payload = self._parse(_ExplorerBalance, data)
        if payload.status != "1":
            raise AdapterError(
                self.adapter_name, f"API error: {payload.message or payload.result}"
            )
        return self._record(address, payload.result)


class EtherscanAdapter(ExplorerBalanceAdapter):
    api_url = ETHERSCAN_API_URL
    api_key_setting = "etherscan_api_key"
    name = "etherscan"
    chain_symbol = "ETH"


class SnowtraceAdapter(ExplorerBalanceAdapter):
    api_url = SNOWTRACE_API_URL
    api_key_setting = "snowtrace_api_key"
    name = "snowtrace"
    chain_symbol = "AVAX"


class EvmRpcAdapter(BaseBalanceAdapter):
    """``eth_getBalance`` against a single JSON-RPC endpoint."""

    def __init__(self, config: WalletSettings, rpc_url: str, symbol: str = "ETH"):
        super().__init__(config, symbol)
        self.rpc_url = rpc_url

    @property
    def adapter_name(self) -> str:
        return f"{self.symbol.lower()}_rpc({urlparse(self.rpc_url).netloc})"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "POST",
            self.rpc_url,
            json_body={
                "jsonrpc": "2.0",
                "id": 1,
                "method": "eth_getBalance",
                "params": [address, "latest"],
            },
            headers={"Content-Type": "application/json"},
        )
        payload = self._parse(_RpcResponse, data)
        if payload.error is not None:
            raise AdapterError(self.adapter_name, f"RPC error: {payload.error}")
        if payload.result is None:
            raise AdapterError(self.adapter_name, "Invalid response: missing result field")
        try:
            balance_wei = hex_to_int(payload.result)
        except ValueError as e:
            raise AdapterError(self.adapter_name, e) from e
        return self._record(address, balance_wei)
