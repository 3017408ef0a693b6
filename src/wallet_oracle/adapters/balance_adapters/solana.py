"""Solana balance adapters. Balances arrive in lamports."""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel

from ...constants import SOLSCAN_API_URL
from ...settings import WalletSettings
from ..base import AdapterError, BalanceRecord, BaseBalanceAdapter


class _SolanaBalanceResult(BaseModel):
    value: int


class _SolanaRpcResponse(BaseModel):
    result: _SolanaBalanceResult | None = None
    error: Any = None


class _SolscanAccount(BaseModel):
    lamports: int


class SolanaRpcAdapter(BaseBalanceAdapter):
    """``getBalance`` against a Solana JSON-RPC endpoint."""

    def __init__(self, config: WalletSettings, rpc_url: str):
        super().__init__(config, "SOL")
        self.rpc_url = rpc_url

    @property
    def adapter_name(self) -> str:
        return f"sol_rpc({urlparse(self.rpc_url).netloc})"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "POST",
            self.rpc_url,
            json_body={
                "jsonrpc": "2.0",
                "id": 1,
                "method": "getBalance",
                "params": [address],
            },
            headers={"Content-Type": "application/json"},
        )
        payload = self._parse(_SolanaRpcResponse, data)
        if payload.error is not None:
            raise AdapterError(self.adapter_name, f"RPC error: {payload.error}")
        if payload.result is None:
            raise AdapterError(self.adapter_name, "Invalid response: missing result field")
        return self._record(address, payload.result.value)


class SolscanAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "SOL")

    @property
    def adapter_name(self) -> str:
        return "solscan"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET", f"{SOLSCAN_API_URL}/account", params={"address": address}
        )
        payload = self._parse(_SolscanAccount, data)
        return self._record(address, payload.lamports)
