import httpx
import pytest

from ruggy.app import app_factory, create_app
from ruggy.config import RuggySettings
from ruggy.llm import LLMFactory
from ruggy.llm.exceptions import LLMProviderError
from ruggy.models.chat import InboundMessage, MessageRole
from ruggy.runtime import AgentRuntime
from tests.fakes import EchoChatModel


@pytest.fixture
def runtime(generator, cache, wallet):
    return AgentRuntime(llm=EchoChatModel(), generator=generator, cache=cache, wallet=wallet)


@pytest.fixture
async def client(runtime):
    transport = httpx.ASGITransport(app=create_app(runtime))
    async with httpx.AsyncClient(transport=transport, base_url="http://ruggy.test") as client:
        yield client


def message(text: str, user_id: str = "u1") -> dict:
    return {"text": text, "user_id": user_id, "user_name": "degen"}


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_unknown_agent_is_404(client):
    response = await client.post("/zico/message", json=message("gm"))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_empty_text_is_rejected(client):
    response = await client.post("/ruggy/message", json=message(""))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_swap_across_turns(client, generator, chain):
    generator.queue({"from_token": "USDC", "to_token": "HONEY", "amount": None})
    first = await client.post("/Ruggy/message", json=message("ape into honey with usdc"))
    assert first.status_code == 200
    assert first.json()[0]["content"]["missing_fields"] == ["amount"]

    generator.queue({"from_token": None, "to_token": None, "amount": "50"})
    second = await client.post("/Ruggy/message", json=message("50"))
    assert second.json()[0]["content"]["status"] == "preview"

    summary = (await client.get("/conversations/u1")).json()
    assert summary == [
        {
            "kind": "swap",
            "status": "awaiting_confirmation",
            "content": {"from_token": "USDC", "to_token": "HONEY", "amount": "50"},
            "missing_fields": [],
            "timestamp": summary[0]["timestamp"],
        }
    ]

    # "send it" would route to the send agent without the pending swap
    generator.queue({"type": "confirm"})
    third = await client.post("/Ruggy/message", json=message("send it"))
    replies = third.json()
    assert replies[-1]["action"] == "SWAP_TOKEN"
    assert replies[-1]["content"]["success"] is True
    assert replies[-1]["content"]["tx_hash"]
    assert (await client.get("/conversations/u1")).json() == []


@pytest.mark.asyncio
async def test_general_reply_without_keywords(client, generator):
    response = await client.post("/Ruggy/message", json=message("gm"))

    assert response.json() == [{"text": "gm ser *happy bear noises*", "content": {"success": True}, "action": None}]
    assert generator.calls == []


@pytest.mark.asyncio
async def test_balance_route(client, generator):
    generator.queue({"token": "USDC"})

    response = await client.post("/Ruggy/message", json=message("what's your USDC balance"))

    body = response.json()[0]
    assert body["action"] == "CHECK_BALANCE"
    assert body["content"]["balance"] == "100"


@pytest.mark.asyncio
async def test_history_records_both_sides(runtime, generator):
    generator.queue({"token": "BERA", "amount": None, "address": None, "include_fee": None})
    seen = []

    async def callback(response):
        seen.append(response)

    responses = await runtime.process_message(InboundMessage(text="send some bera", user_id="u2"), callback)

    assert seen == responses
    history = runtime.history.recent("u2")
    assert [entry.role for entry in history] == [MessageRole.USER, MessageRole.AGENT]
    assert history[1].content["missing_fields"] == ["amount", "address"]
    assert history[1].user_name == "Ruggy"


@pytest.mark.asyncio
async def test_users_are_isolated(runtime, generator):
    generator.queue({"from_token": "USDC", "to_token": "HONEY", "amount": "5"})
    await runtime.process_message(InboundMessage(text="swap 5 usdc to honey", user_id="alice"))

    assert [summary.kind for summary in await runtime.conversations("alice")] == ["swap"]
    assert await runtime.conversations("bob") == []


def test_app_factory_builds_runtime_once_at_startup(monkeypatch, runtime):
    built = []

    def from_settings():
        built.append(runtime)
        return runtime

    monkeypatch.setattr(AgentRuntime, "from_settings", from_settings)
    monkeypatch.setattr("ruggy.app.setup_logging", lambda: None)

    app = app_factory()

    assert built == [runtime]
    assert app.state.runtime is runtime


def test_app_factory_fails_without_model_credentials(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setattr("ruggy.app.setup_logging", lambda: None)
    monkeypatch.setattr(LLMFactory, "_instances", {})
    monkeypatch.setattr("ruggy.runtime.get_settings", lambda: RuggySettings(llm_model="gemini-2.5-flash"))

    with pytest.raises(LLMProviderError, match="GEMINI_API_KEY"):
        app_factory()
