import asyncio

import pytest

from ruggy.agents.swap import (
    SWAP_CONFIRMATION_TEMPLATE,
    SWAP_EXTRACTION_TEMPLATE,
    SwapAgent,
    SwapExecutor,
)
from ruggy.conversation import (
    ConfirmationGate,
    ConversationStateStore,
    ConversationStatus,
    Extractor,
    InvalidAmountError,
    SlotFillingEvaluator,
)
from ruggy.integrations.evm import TransactionTimeoutError
from ruggy.integrations.oogabooga import AggregatorError
from ruggy.intents import SwapIntent
from tests.fakes import HONEY, ROUTER, USDC, WALLET, YieldingGenerator, user_message

COMPLETE = {"from_token": "USDC", "to_token": "HONEY", "amount": "50"}


def build_agent(cache, generator, responder, wallet, executor=True):
    evaluator = SlotFillingEvaluator(
        agent_name="Ruggy",
        kind="swap",
        store=ConversationStateStore(cache),
        extractor=Extractor(generator),
        gate=ConfirmationGate(generator),
        extraction_template=SWAP_EXTRACTION_TEMPLATE,
        confirmation_template=SWAP_CONFIRMATION_TEMPLATE,
    )
    return SwapAgent(
        evaluator=evaluator,
        responder=responder,
        executor=SwapExecutor(wallet, slippage="0.05") if executor else None,
        wallet=wallet,
    )


@pytest.fixture
def agent(cache, generator, responder, wallet):
    return build_agent(cache, generator, responder, wallet)


async def preview(agent, generator, data=COMPLETE):
    generator.queue(dict(data))
    return await agent.handle("user-1", [user_message("swap 50 usdc for honey")])


@pytest.mark.asyncio
async def test_incomplete_request_asks_for_missing_fields(agent, generator, chain):
    generator.queue({"from_token": "USDC", "to_token": "HONEY", "amount": None})

    responses = await agent.handle("user-1", [user_message("ape into honey with usdc")])

    assert len(responses) == 1
    content = responses[0].content
    assert content["success"] is False
    assert content["error"] == "Incomplete swap details"
    assert content["missing_fields"] == ["amount"]
    assert content["guidance"][0]["examples"] == ["50", "100", "10.5"]
    assert responses[0].text.startswith("Need more details for swap:")
    assert responses[0].action == "SWAP_TOKEN"
    assert chain.writes == []


@pytest.mark.asyncio
async def test_preview_shows_balance_and_waits(agent, generator, chain):
    responses = await preview(agent, generator)

    content = responses[0].content
    assert content["status"] == "preview"
    assert content["awaiting_confirmation"] is True
    assert content["balance"] == "100"
    assert content["amount"] == "50"
    assert "Preparing to swap 50 USDC for HONEY" in responses[0].text
    assert "Current balance: 100 USDC" in responses[0].text
    assert chain.writes == []


@pytest.mark.asyncio
async def test_confirmed_swap_approves_routes_and_clears_state(agent, generator, chain, aggregator, cache):
    await preview(agent, generator)
    generator.queue({"type": "confirm"})
    seen = []

    async def callback(response):
        seen.append(response)

    responses = await agent.handle("user-1", [user_message("yes")], callback)

    assert seen == responses
    assert [r.content.get("status") for r in responses[:3]] == ["preparing", "approving", "approved"]
    final = responses[-1]
    assert final.content["success"] is True
    assert final.content["amount_out"] == "48"
    swap_hash = "0x" + format(2, "064x")
    assert final.content["tx_hash"] == swap_hash
    assert swap_hash in final.text

    assert chain.calls[chain.calls.index(("get_allowance", USDC, ROUTER)) + 1][0] == "approve"
    assert ("approve", USDC, ROUTER, 50 * 10**6) in chain.calls
    assert ("get_swap", USDC, HONEY, 50 * 10**6, WALLET, "0.05") in aggregator.calls
    assert chain.writes[-1] == ("send_transaction", ROUTER, 0, "0xdeadbeef")

    assert await agent.evaluator.current("user-1") is None
    assert await cache.get(f"ruggy/pouch/{WALLET.lower()}") is None


@pytest.mark.asyncio
async def test_existing_allowance_skips_approval(agent, generator, chain):
    chain.allowances[USDC] = 10**12
    await preview(agent, generator)
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("do it")])

    assert [call[0] for call in chain.writes] == ["send_transaction"]
    assert "approving" not in [r.content.get("status") for r in responses]


@pytest.mark.asyncio
async def test_cancel_discards_request(agent, generator, chain):
    await preview(agent, generator)
    generator.queue({"type": "deny"})

    responses = await agent.handle("user-1", [user_message("nah")])

    assert responses[0].content == {"success": True, "status": "cancelled"}
    assert await agent.evaluator.current("user-1") is None
    assert chain.writes == []


@pytest.mark.asyncio
async def test_insufficient_balance_keeps_state_for_retry(agent, generator, chain):
    await preview(agent, generator, {**COMPLETE, "amount": "500"})
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    content = responses[-1].content
    assert content["error"] == "Insufficient balance"
    assert content["available"] == "100"
    assert content["required"] == "500"
    assert chain.writes == []
    assert (await agent.evaluator.current("user-1")).status is ConversationStatus.CONFIRMED

    generator.queue({"from_token": None, "to_token": None, "amount": "20"})
    retry = await agent.handle("user-1", [user_message("ok make it 20")])

    assert retry[0].content["status"] == "preview"
    assert retry[0].content["amount"] == "20"
    assert retry[0].content["to_token"] == "HONEY"


@pytest.mark.asyncio
async def test_unknown_token_lists_available(agent, generator, chain):
    await preview(agent, generator, {**COMPLETE, "to_token": "MOON"})
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    content = responses[-1].content
    assert content["error"] == "Invalid token"
    assert "BERA" in content["available_tokens"]
    assert "MOON" in responses[-1].text
    assert chain.writes == []


@pytest.mark.asyncio
async def test_no_route_is_reported_as_liquidity(agent, generator, aggregator):
    aggregator.swap_error = AggregatorError("No way to swap these tokens: insufficient liquidity")
    await preview(agent, generator)
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    assert responses[-1].content["error"] == "Insufficient liquidity"
    assert responses[-1].content["category"] == "insufficient_liquidity"
    assert await agent.evaluator.current("user-1") is not None


@pytest.mark.asyncio
async def test_receipt_timeout_reports_hash(agent, generator, chain):
    chain.allowances[USDC] = 10**12
    pending = "0x" + format(1, "064x")
    chain.fail("wait_for_receipt", TransactionTimeoutError(pending, 60))
    await preview(agent, generator)
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    content = responses[-1].content
    assert content["error"] == "Transaction timeout"
    assert content["tx_hash"] == pending


@pytest.mark.asyncio
async def test_without_wallet_confirmation_reports_unavailable(cache, generator, responder):
    agent = build_agent(cache, generator, responder, wallet=None, executor=False)
    await preview(agent, generator)
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    assert responses[-1].content["error"] == "Wallet client not initialized"
    assert responses[-1].text == "Wallet not initialized or accessible"


@pytest.mark.asyncio
async def test_amount_below_token_precision_is_rejected(agent, generator, chain, aggregator):
    await preview(agent, generator, {**COMPLETE, "amount": "0.0000001"})
    generator.queue({"type": "confirm"})

    responses = await agent.handle("user-1", [user_message("yes")])

    assert len(responses) == 1
    content = responses[0].content
    assert content["error"] == "Invalid amount"
    assert content["decimals"] == 6
    assert "6 decimal places" in responses[0].text
    assert chain.writes == []
    assert not [call for call in aggregator.calls if call[0] == "get_swap"]
    assert await agent.evaluator.current("user-1") is not None


@pytest.mark.asyncio
async def test_executor_refuses_zero_unit_amount(wallet, chain, aggregator):
    statuses = []

    async def on_status(status, data):
        statuses.append(status)

    with pytest.raises(InvalidAmountError) as excinfo:
        await SwapExecutor(wallet).execute(
            SwapIntent(from_token="USDC", to_token="HONEY", amount="0.0000001"), on_status
        )

    assert excinfo.value.token == "USDC"
    assert statuses == []
    assert chain.writes == []
    assert not [call for call in chain.calls if call[0] == "get_allowance"]
    assert not [call for call in aggregator.calls if call[0] == "get_swap"]


@pytest.mark.asyncio
async def test_concurrent_confirmations_execute_once(cache, responder, wallet, chain):
    generator = YieldingGenerator()
    agent = build_agent(cache, generator, responder, wallet)
    chain.allowances[USDC] = 10**12
    await preview(agent, generator)
    generator.queue({"type": "confirm"}, {"from_token": None, "to_token": None, "amount": None})

    first, second = await asyncio.gather(
        agent.handle("user-1", [user_message("yes")]),
        agent.handle("user-1", [user_message("yes yes")]),
    )

    assert first[-1].content["success"] is True
    assert [call for call in chain.writes if call[0] == "send_transaction"] == [
        ("send_transaction", ROUTER, 0, "0xdeadbeef")
    ]
    assert second[0].content["error"] == "Incomplete swap details"
    assert second[0].content["missing_fields"] == ["from_token", "to_token", "amount"]


@pytest.mark.asyncio
async def test_concurrent_collecting_turns_keep_both_fields(cache, responder, wallet, chain):
    generator = YieldingGenerator()
    agent = build_agent(cache, generator, responder, wallet)
    generator.queue(
        {"from_token": "USDC", "to_token": "HONEY", "amount": None},
        {"from_token": None, "to_token": None, "amount": "20"},
    )

    first, second = await asyncio.gather(
        agent.handle("user-1", [user_message("usdc to honey")]),
        agent.handle("user-1", [user_message("20 of them")]),
    )

    assert first[0].content["missing_fields"] == ["amount"]
    assert second[0].content["status"] == "preview"
    state = await agent.evaluator.current("user-1")
    assert state.content.from_token == "USDC"
    assert state.content.to_token == "HONEY"
    assert state.content.amount == "20"
    assert state.status is ConversationStatus.AWAITING_CONFIRMATION
    assert chain.writes == []
