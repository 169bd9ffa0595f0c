import json

import httpx
import pytest

from ruggy.integrations.evm import EvmRpcClient, EvmRpcError, EvmRpcSettings, TransactionTimeoutError
from ruggy.integrations.oogabooga import AggregatorError, OogaBoogaClient, OogaBoogaSettings
from tests.fakes import HONEY, ROUTER, USDC, WALLET


def ooga(handler) -> OogaBoogaClient:
    settings = OogaBoogaSettings(
        base_url="https://ooga.test",
        api_key="secret",
        router_address=ROUTER,
        max_attempts=2,
    )
    return OogaBoogaClient(settings, transport=httpx.MockTransport(handler))


def rpc(handler) -> EvmRpcClient:
    settings = EvmRpcSettings(
        rpc_url="https://rpc.test",
        wallet_address=WALLET,
        chain_id=80094,
        poll_interval=0,
    )
    return EvmRpcClient(settings, transport=httpx.MockTransport(handler))


# ---- aggregator ----------------------------------------------------------------
@pytest.mark.asyncio
async def test_swap_request_parameters_and_auth():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"status": "Success", "tx": {"to": ROUTER, "data": "0x01"}})

    async with ooga(handler) as client:
        route = await client.get_swap(token_in=USDC, token_out=HONEY, amount=5 * 10**6, to=WALLET, slippage="0.05")

    assert route["tx"]["to"] == ROUTER
    request = seen[0]
    assert request.url.path == "/v1/swap"
    assert request.url.params["amount"] == "5000000"
    assert request.url.params["tokenIn"] == USDC
    assert request.headers["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_no_route_raises_liquidity_error():
    def handler(request):
        return httpx.Response(200, json={"status": "NoWay"})

    async with ooga(handler) as client:
        with pytest.raises(AggregatorError, match="insufficient liquidity"):
            await client.get_swap(token_in=USDC, token_out=HONEY, amount=1, to=WALLET, slippage="0.05")


@pytest.mark.asyncio
async def test_http_errors_carry_status():
    def handler(request):
        return httpx.Response(503, json={"message": "busy"})

    async with ooga(handler) as client:
        with pytest.raises(AggregatorError) as excinfo:
            await client.list_tokens()

    assert excinfo.value.status_code == 503
    assert excinfo.value.payload == {"message": "busy"}


@pytest.mark.asyncio
async def test_transport_errors_are_retried():
    attempts = []

    def handler(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[{"address": USDC, "price": 1.0}])

    async with ooga(handler) as client:
        prices = await client.get_prices()

    assert len(attempts) == 2
    assert attempts[1].url.params["currency"] == "USD"
    assert prices == [{"address": USDC, "price": 1.0}]


# ---- chain ---------------------------------------------------------------------
@pytest.mark.asyncio
async def test_token_balances_use_one_batch():
    bodies = []

    def handler(request):
        body = json.loads(request.content)
        bodies.append(body)
        replies = [{"jsonrpc": "2.0", "id": item["id"], "result": hex(index + 1)} for index, item in enumerate(body)]
        return httpx.Response(200, json=list(reversed(replies)))

    async with rpc(handler) as client:
        balances = await client.get_token_balances([USDC, HONEY])

    assert balances == [1, 2]
    assert len(bodies) == 1
    assert bodies[0][0]["params"][0]["to"] == USDC
    assert bodies[0][0]["params"][0]["data"].endswith(WALLET.lower()[2:])


@pytest.mark.asyncio
async def test_approve_encodes_call_and_sends_from_wallet():
    sent = []

    def handler(request):
        body = json.loads(request.content)
        sent.append(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": "0xabc"})

    async with rpc(handler) as client:
        tx_hash = await client.approve(USDC, ROUTER, 255)

    assert tx_hash == "0xabc"
    tx = sent[0]["params"][0]
    assert sent[0]["method"] == "eth_sendTransaction"
    assert tx["from"] == WALLET
    assert tx["to"] == USDC
    assert tx["chainId"] == hex(80094)
    assert tx["data"] == "0x095ea7b3" + ROUTER[2:].rjust(64, "0") + format(255, "064x")


@pytest.mark.asyncio
async def test_receipt_polling():
    replies = iter([None, {"transactionHash": "0xabc", "status": "0x1"}])

    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": next(replies)})

    async with rpc(handler) as client:
        receipt = await client.wait_for_receipt("0xabc", timeout=5)

    assert receipt["status"] == "0x1"


@pytest.mark.asyncio
async def test_reverted_and_missing_receipts_raise():
    def reverted(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": {"status": "0x0"}})

    async with rpc(reverted) as client:
        with pytest.raises(EvmRpcError, match="reverted"):
            await client.wait_for_receipt("0xabc")

    def pending(request):
        body = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": None})

    async with rpc(pending) as client:
        with pytest.raises(TransactionTimeoutError) as excinfo:
            await client.wait_for_receipt("0xabc", timeout=0)

    assert excinfo.value.tx_hash == "0xabc"


@pytest.mark.asyncio
async def test_rpc_error_object_raises():
    def handler(request):
        body = json.loads(request.content)
        return httpx.Response(
            200,
            json={"jsonrpc": "2.0", "id": body["id"], "error": {"code": -32000, "message": "insufficient funds"}},
        )

    async with rpc(handler) as client:
        with pytest.raises(EvmRpcError) as excinfo:
            await client.get_native_balance()

    assert excinfo.value.code == -32000
