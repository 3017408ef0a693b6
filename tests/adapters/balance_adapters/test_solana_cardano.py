from unittest.mock import patch

import pytest

from wallet_oracle.adapters.base import AdapterError
from wallet_oracle.adapters.balance_adapters.cardano import (
    BlockfrostAdapter,
    CardanoScanAdapter,
    KoiosAdapter,
)
from wallet_oracle.adapters.balance_adapters.solana import (
    SolanaRpcAdapter,
    SolscanAdapter,
)

SOL_ADDRESS = "8BxX8691h5pffmdhfRTLaQeiHJkdgQiyKvNrrEdM8ri6"
ADA_ADDRESS = "addr1qxcmjnryz57hw08pj8dwrrw7sx7c83dfrzf3kk5p0lp9qj"


@pytest.mark.asyncio
async def test_solana_rpc_reads_lamports(settings, make_response):
    adapter = SolanaRpcAdapter(settings, "https://api.mainnet-beta.solana.com")
    payload = {"jsonrpc": "2.0", "result": {"context": {"slot": 1}, "value": 2_500_000_000}}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ) as request:
        record = await adapter.fetch_balance(SOL_ADDRESS)

    assert record.balance == 2.5
    assert request.call_args.kwargs["json"]["method"] == "getBalance"


@pytest.mark.asyncio
async def test_solana_rpc_error_is_failure(settings, make_response):
    adapter = SolanaRpcAdapter(settings, "https://api.mainnet-beta.solana.com")
    payload = {"jsonrpc": "2.0", "error": {"code": -32602, "message": "Invalid param"}}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        with pytest.raises(AdapterError, match="RPC error"):
            await adapter.fetch_balance(SOL_ADDRESS)


@pytest.mark.asyncio
async def test_solscan_reads_lamports(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"lamports": 1_000_000_000}),
    ) as request:
        record = await SolscanAdapter(settings).fetch_balance(SOL_ADDRESS)

    assert record.balance == 1.0
    assert request.call_args.kwargs["params"] == {"address": SOL_ADDRESS}


@pytest.mark.asyncio
async def test_cardanoscan_reads_lovelace(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response({"balance": "12500000"}),
    ):
        record = await CardanoScanAdapter(settings).fetch_balance(ADA_ADDRESS)

    assert record.balance == 12.5


@pytest.mark.asyncio
async def test_blockfrost_picks_lovelace_entry(settings, make_response):
    payload = {
        "amount": [
            {"unit": "asset1token", "quantity": "7"},
            {"unit": "lovelace", "quantity": "3000000"},
        ]
    }
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        record = await BlockfrostAdapter(settings).fetch_balance(ADA_ADDRESS)

    assert record.balance == 3.0


@pytest.mark.asyncio
async def test_blockfrost_without_lovelace_is_failure(settings, make_response):
    payload = {"amount": [{"unit": "asset1token", "quantity": "7"}]}
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response(payload),
    ):
        with pytest.raises(AdapterError, match="No lovelace"):
            await BlockfrostAdapter(settings).fetch_balance(ADA_ADDRESS)


@pytest.mark.asyncio
async def test_koios_reads_first_entry(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response([{"address": ADA_ADDRESS, "balance": "1000000"}]),
    ) as request:
        record = await KoiosAdapter(settings).fetch_balance(ADA_ADDRESS)

    assert record.balance == 1.0
    assert request.call_args.kwargs["params"] == {"_address": ADA_ADDRESS}


@pytest.mark.asyncio
async def test_koios_unknown_address_is_failure(settings, make_response):
    with patch(
        "wallet_oracle.adapters.base.requests.request",
        return_value=make_response([]),
    ):
        with pytest.raises(AdapterError, match="Address not found"):
            await KoiosAdapter(settings).fetch_balance(ADA_ADDRESS)
