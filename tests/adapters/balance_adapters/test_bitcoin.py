from unittest.mock import patch

import pytest
import requests

from wallet_oracle.adapters.base import AdapterError, BalanceRecord
from wallet_oracle.adapters.balance_adapters.bitcoin import (
    BlockchainInfoAdapter,
    BlockCypherAdapter,
    BlockstreamAdapter,
    MempoolAdapter,
)

ADDRESS = "34xp4vRoCGJym3xR7yCVPFHoCNxv4Twseo"


@pytest.mark.asyncio
async def test_blockcypher_scales_final_balance(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"final_balance": 250_000_000}),
    ) as request:
        record = await BlockCypherAdapter(settings).fetch_balance(ADDRESS)

    assert record == BalanceRecord(address=ADDRESS, balance=2.5)
    method, url = request.call_args.args
    assert method == "GET"
    assert url.endswith(f"/addrs/{ADDRESS}/balance")
    assert request.call_args.kwargs["timeout"] == settings.request_timeout


@pytest.mark.asyncio
@pytest.mark.parametrize("adapter_cls", [BlockstreamAdapter, MempoolAdapter])
async def test_esplora_subtracts_before_scaling(settings, make_response, adapter_cls):
    payload = {
        "chain_stats": {"funded_txo_sum": 300_000_000, "spent_txo_sum": 100_000_000}
    }
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        record = await adapter_cls(settings).fetch_balance(ADDRESS)

    assert record.balance == 2.0


@pytest.mark.asyncio
async def test_esplora_rejects_overspent_address(settings, make_response):
    payload = {"chain_stats": {"funded_txo_sum": 1, "spent_txo_sum": 2}}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        with pytest.raises(AdapterError, match="exceeds funded"):
            await MempoolAdapter(settings).fetch_balance(ADDRESS)


@pytest.mark.asyncio
async def test_blockchain_info_requests_no_transactions(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"final_balance": 12_345}),
    ) as request:
        record = await BlockchainInfoAdapter(settings).fetch_balance(ADDRESS)

    assert record.balance == pytest.approx(0.00012345)
    assert request.call_args.kwargs["params"] == {"limit": 0}


@pytest.mark.asyncio
async def test_http_error_becomes_adapter_error(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(status_code=429, text="Too Many Requests"),
    ):
        with pytest.raises(AdapterError) as exc_info:
            await BlockCypherAdapter(settings).fetch_balance(ADDRESS)

    assert exc_info.value.provider == "blockcypher"
    assert "HTTP 429 - Too Many Requests" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_becomes_adapter_error(settings):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        side_effect=requests.exceptions.Timeout("read timed out"),
    ):
        with pytest.raises(AdapterError, match="Timeout"):
            await BlockstreamAdapter(settings).fetch_balance(ADDRESS)


@pytest.mark.asyncio
async def test_malformed_payload_becomes_adapter_error(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"unexpected": True}),
    ):
        with pytest.raises(AdapterError, match="Unexpected response shape"):
            await BlockCypherAdapter(settings).fetch_balance(ADDRESS)


@pytest.mark.asyncio
async def test_invalid_json_becomes_adapter_error(settings, make_response):
    response = make_response()
    response.json.side_effect = ValueError("Expecting value")
    with patch("wallet_oracle.adapters.base.requests.request", return_value=response):
        with pytest.raises(AdapterError, match="Invalid JSON"):
            await BlockCypherAdapter(settings).fetch_balance(ADDRESS)
