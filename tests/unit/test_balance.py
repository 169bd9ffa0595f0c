import pytest

from ruggy.agents.balance import BalanceAgent, BalanceQuery, summarize_pouch
from ruggy.wallet import PricedTokenBalance, PricedWalletSnapshot
from tests.fakes import USDC, YEET, WALLET, user_message


@pytest.fixture
def pouch():
    return PricedWalletSnapshot(
        address=WALLET,
        native=2 * 10**18,
        tokens=[
            PricedTokenBalance(address=USDC, symbol="USDC", decimals=6, balance=25 * 10**6, price_usd=1.0, value_usd=25.0),
            PricedTokenBalance(address=YEET, symbol="YEET", decimals=18, balance=0),
        ],
        native_price_usd=3.0,
        native_value_usd=6.0,
        total_value_usd=31.0,
    )


def test_general_summary_lists_held_tokens(pouch):
    text, data, error = summarize_pouch(pouch, None)

    assert error is None
    assert text.startswith("BERA: 2 ($6.00) Total: $31.00")
    assert "USDC: 25 ($25.00)" in text
    assert "YEET" not in text
    assert data["tokens"] == [{"token": "USDC", "balance": "25", "value_usd": 25.0}]


def test_single_token_and_native(pouch):
    text, data, _ = summarize_pouch(pouch, "usdc")
    assert text == "USDC: 25 ($25.00)"
    assert data["decimals"] == 6

    text, data, _ = summarize_pouch(pouch, "BERA")
    assert text == "Current BERA: 2 ($6.00)"
    assert data["balance"] == "2"


def test_unknown_token(pouch):
    text, data, error = summarize_pouch(pouch, "moon")
    assert text == "Token MOON not found in wallet"
    assert error == "Token not found"


@pytest.mark.asyncio
async def test_agent_reports_requested_token(generator, responder, wallet):
    generator.queue(BalanceQuery(token="yeet"))
    agent = BalanceAgent(generator=generator, responder=responder, wallet=wallet)

    responses = await agent.handle("user-1", [user_message("how much yeet do you have")])

    assert responses[0].action == "CHECK_BALANCE"
    assert responses[0].content["token"] == "YEET"
    assert responses[0].content["balance"] == "3"
    assert responses[0].text == "YEET: 3 ($0.00)"


@pytest.mark.asyncio
async def test_extraction_failure_falls_back_to_full_pouch(generator, responder, wallet):
    generator.queue(RuntimeError("model offline"))
    agent = BalanceAgent(generator=generator, responder=responder, wallet=wallet)

    responses = await agent.handle("user-1", [user_message("balance?")])

    assert responses[0].content["success"] is True
    assert responses[0].content["native"] == "5"


@pytest.mark.asyncio
async def test_agent_without_wallet(generator, responder):
    agent = BalanceAgent(generator=generator, responder=responder)

    responses = await agent.handle("user-1", [user_message("balance?")])

    assert responses[0].content == {"success": False, "error": "Wallet client not initialized"}
    assert generator.calls == []
