"""Cardano balance adapters. Balances arrive in lovelace."""

from __future__ import annotations

from pydantic import BaseModel, RootModel

from ...constants import BLOCKFROST_API_URL, CARDANOSCAN_API_URL, KOIOS_API_URL
from ...settings import WalletSettings
from ..base import AdapterError, BalanceRecord, BaseBalanceAdapter


class _CardanoScanBalance(BaseModel):
    balance: int


class _BlockfrostAmount(BaseModel):
    unit: str
    quantity: int


class _BlockfrostAddress(BaseModel):
    amount: list[_BlockfrostAmount]


class _KoiosAddressInfo(BaseModel):
    balance: int


class _KoiosAddressInfoList(RootModel[list[_KoiosAddressInfo]]):
    pass


class CardanoScanAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "ADA")

    @property
    def adapter_name(self) -> str:
        return "cardanoscan"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET",
            f"{CARDANOSCAN_API_URL}/address/balance",
            params={"address": address},
            headers={"apiKey": self.config.secret("cardanoscan_api_key")},
        )
        payload = self._parse(_CardanoScanBalance, data)
        return self._record(address, payload.balance)


class BlockfrostAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "ADA")

    @property
    def adapter_name(self) -> str:
        return "blockfrost"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET",
            f"{BLOCKFROST_API_URL}/addresses/{address}",
            headers={"project_id": self.config.secret("blockfrost_project_id")},
        )
        payload = self._parse(_BlockfrostAddress, data)
        lovelace = next(
            (item.quantity for item in payload.amount if item.unit == "lovelace"),
            None,
        )
        if lovelace is None:
            raise AdapterError(
                self.adapter_name, "No lovelace balance found in response"
            )
        return self._record(address, lovelace)


class KoiosAdapter(BaseBalanceAdapter):
    def __init__(self, config: WalletSettings):
        super().__init__(config, "ADA")

    @property
    def adapter_name(self) -> str:
        return "koios"

    async def fetch_balance(self, address: str) -> BalanceRecord:
        data = await self._request_json(
            "GET", f"{KOIOS_API_URL}/address_info", params={"_address": address}
        )
        entries = self._parse(_KoiosAddressInfoList, data).root
        if not entries:
            raise AdapterError(self.adapter_name, "Address not found")
        return self._record(address, entries[0].balance)
