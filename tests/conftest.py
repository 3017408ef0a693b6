from __future__ import annotations

import logging
from typing import Any
from unittest.mock import Mock

import pytest

from wallet_oracle.adapters.base import AdapterError, BaseAdapter
from wallet_oracle.cache import MemoryCacheStore
from wallet_oracle.settings import WalletSettings
from wallet_oracle.state import AppState


class FakeAdapter(BaseAdapter[Any, Any]):
    """Adapter returning a canned result, or raising AdapterError."""

    def __init__(self, config: WalletSettings, name: str, result: Any = None, error: str | None = None):
        super().__init__(config)
        self.name = name
        self.result = result
        self.error = error
        self.calls: list[Any] = []

    @property
    def adapter_name(self) -> str:
        return self.name

    async def fetch(self, request: Any) -> Any:
        self.calls.append(request)
        if self.error is not None:
            raise AdapterError(self.name, self.error)
        return self.result


@pytest.fixture
def make_response():
    """Build a stand-in for a requests.Response."""

    def _make(payload: Any = None, status_code: int = 200, text: str = "") -> Mock:
        response = Mock()
        response.ok = 200 <= status_code < 300
        response.status_code = status_code
        response.text = text
        response.json = Mock(return_value=payload)
        return response

    return _make


@pytest.fixture
def settings(tmp_path, monkeypatch) -> WalletSettings:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WALLET_ORACLE_CONFIG", raising=False)
    return WalletSettings(
        wallets={"BTC": "bc1-wallet", "ETH": "0xeth-wallet"},
        request_timeout=5.0,
    )


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def app_state(settings, cache) -> AppState:
    return AppState(settings=settings, logger=logging.getLogger("test"), cache=cache)


@pytest.fixture
def fake_adapter(settings):
    def _make(name: str, result: Any = None, error: str | None = None) -> FakeAdapter:
        return FakeAdapter(settings, name, result=result, error=error)

    return _make
