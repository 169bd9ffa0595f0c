import pytest

from ruggy.agents.responses import ResponseGenerator
from ruggy.cache import InMemoryCacheManager
from ruggy.character import DEFAULT_CHARACTER
from ruggy.wallet import WalletProvider
from tests.fakes import (
    HONEY,
    USDC,
    YEET,
    EchoChatModel,
    FakeAggregator,
    FakeChain,
    ScriptedGenerator,
)


@pytest.fixture
def cache():
    return InMemoryCacheManager()


@pytest.fixture
def chain():
    return FakeChain(
        balances={USDC: 100 * 10**6, HONEY: 0, YEET: 3 * 10**18},
        native=5 * 10**18,
    )


@pytest.fixture
def aggregator():
    return FakeAggregator()


@pytest.fixture
def wallet(cache, chain, aggregator):
    return WalletProvider(cache=cache, chain=chain, aggregator=aggregator)


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def responder():
    return ResponseGenerator(EchoChatModel(), DEFAULT_CHARACTER)
