from __future__ import annotations

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ..constants import ASSET_DECIMALS
from ..logger import get_logger
from ..settings import WalletSettings
from ..units import from_base_units

logger = get_logger(__name__)

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")
SchemaT = TypeVar("SchemaT", bound=BaseModel)


class AdapterError(Exception):
    """A single provider call failed (HTTP status, network, or payload shape)."""

    def __init__(self, provider: str, cause: BaseException | str):
        self.provider = provider
        self.cause = cause
        detail = cause if isinstance(cause, str) else f"{type(cause).__name__}: {cause}"
        super().__init__(f"{provider}: {detail}")


@dataclass(frozen=True)
class BalanceRecord:
    """Normalized wallet balance in whole-asset units."""

    address: str
    balance: float

    def __post_init__(self) -> None:
        if self.balance < 0:
            raise ValueError(f"Balance must be non-negative, got {self.balance}")

    def to_json(self) -> str:
        return json.dumps({"address": self.address, "balance": self.balance})

    @classmethod
    def from_json(cls, raw: str) -> BalanceRecord:
        data = json.loads(raw)
        return cls(address=str(data["address"]), balance=float(data["balance"]))


class BaseAdapter(ABC, Generic[RequestT, ResultT]):
    """Abstract base class for every upstream provider.

    One ``fetch`` performs exactly one network request bounded by
    ``config.request_timeout`` and returns a normalized result, or raises
    ``AdapterError``. Adapters never read or write the cache.
    """

    def __init__(self, config: WalletSettings):
        """Initialize the adapter with configuration."""
        self.config = config
        self.timeout = config.request_timeout

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def fetch(self, request: RequestT) -> ResultT:
        """Fetch and normalize one result from the provider."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.adapter_name}>"

    async def _request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Perform the HTTP call and decode the JSON body.

        Raises:
            AdapterError: On non-2xx status, timeout, connection failure or
                an undecodable body.
        """
        logger.debug("%s: %s %s", self.adapter_name, method, url)
        try:
            response = await asyncio.to_thread(
                requests.request,
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise AdapterError(self.adapter_name, e) from e

        if not response.ok:
            raise AdapterError(
                self.adapter_name,
                f"HTTP {response.status_code} - {response.text[:200]}",
            )

        try:
            return response.json()
        except ValueError as e:
            raise AdapterError(self.adapter_name, "Invalid JSON in response") from e

    def _parse(self, schema: type[SchemaT], data: Any) -> SchemaT:
        """Validate a provider payload against its schema."""
        try:
            return schema.model_validate(data)
        except ValidationError as e:
            raise AdapterError(
                self.adapter_name, f"Unexpected response shape: {e.error_count()} error(s)"
            ) from e


class BaseBalanceAdapter(BaseAdapter[str, BalanceRecord]):
    """Adapter returning the balance of one wallet address."""

    def __init__(self, config: WalletSettings, symbol: str):
        super().__init__(config)
        self.symbol = symbol.upper()
        self.decimals = ASSET_DECIMALS[self.symbol]

    async def fetch(self, request: str) -> BalanceRecord:
        return await self.fetch_balance(request)

    @abstractmethod
    async def fetch_balance(self, address: str) -> BalanceRecord:
        """Fetch the balance of ``address`` in whole-asset units."""
        ...

    def _record(self, address: str, base_units: Any) -> BalanceRecord:
        """Scale a base-unit amount into a BalanceRecord."""
        try:
            balance = from_base_units(base_units, self.decimals)
        except (TypeError, ValueError) as e:
            raise AdapterError(self.adapter_name, e) from e
        return BalanceRecord(address=address, balance=balance)
