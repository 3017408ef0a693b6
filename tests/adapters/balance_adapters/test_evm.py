from unittest.mock import patch
from urllib.parse import urlparse

import pytest

from wallet_oracle.adapters.base import AdapterError
from wallet_oracle.adapters.balance_adapters import build_balance_adapters
from wallet_oracle.adapters.balance_adapters.evm import (
    EtherscanAdapter,
    EvmRpcAdapter,
    SnowtraceAdapter,
)

ADDRESS = "0x2bf916f8169Ed2a77324d3E168284FC252aE4087"


@pytest.mark.asyncio
async def test_etherscan_scales_wei(settings, make_response):
    payload = {"status": "1", "message": "OK", "result": "1500000000000000000"}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ) as request:
        record = await EtherscanAdapter(settings).fetch_balance(ADDRESS)

    assert record.balance == 1.5
    params = request.call_args.kwargs["params"]
    assert params["module"] == "account"
    assert params["action"] == "balance"
    assert params["address"] == ADDRESS
    assert params["apikey"] == ""


@pytest.mark.asyncio
async def test_explorer_status_zero_is_failure(settings, make_response):
    payload = {"status": "0", "message": "NOTOK", "result": "Invalid API Key"}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        with pytest.raises(AdapterError, match="snowtrace: API error: NOTOK"):
            await SnowtraceAdapter(settings).fetch_balance(ADDRESS)


@pytest.mark.asyncio
async def test_rpc_parses_hex_quantity(settings, make_response):
    adapter = EvmRpcAdapter(settings, "https://eth.llamarpc.com")
    payload = {"jsonrpc": "2.0", "id": 1, "result": "0x1bc16d674ec80000"}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ) as request:
        record = await adapter.fetch_balance(ADDRESS)

    assert record.balance == 2.0
    assert adapter.adapter_name == "eth_rpc(eth.llamarpc.com)"
    body = request.call_args.kwargs["json"]
    assert body["method"] == "eth_getBalance"
    assert body["params"] == [ADDRESS, "latest"]


@pytest.mark.asyncio
async def test_rpc_error_object_is_failure(settings, make_response):
    adapter = EvmRpcAdapter(settings, "https://rpc.example", "AVAX")
    payload = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "boom"}}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        with pytest.raises(AdapterError, match="RPC error"):
            await adapter.fetch_balance(ADDRESS)


@pytest.mark.asyncio
async def test_rpc_missing_result_is_failure(settings, make_response):
    adapter = EvmRpcAdapter(settings, "https://rpc.example")
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"jsonrpc": "2.0", "id": 1}),
    ):
        with pytest.raises(AdapterError, match="missing result"):
            await adapter.fetch_balance(ADDRESS)


def test_eth_chain_order(settings):
    names = [a.adapter_name for a in build_balance_adapters("eth", settings)]

    assert names[0] == "etherscan"
    assert names[1:] == [
        f"eth_rpc({urlparse(url).netloc})" for url in settings.eth_rpc_urls
    ]


def test_unknown_asset_rejected(settings):
    with pytest.raises(ValueError, match="Unknown asset"):
        build_balance_adapters("DOGE", settings)
