import pytest

from ruggy.agents.router import route


@pytest.mark.parametrize(
    "text,expected",
    [
        ("swap 50 usdc for honey", "swap"),
        ("ape into honey", "swap"),
        ("send it into yeet ser", "swap"),
        ("get me some BERA", "swap"),
        ("send 5 honey to 0x1234", "send"),
        ("transfer 1 bera pls", "send"),
        ("what's in your pouch?", "balance"),
        ("check HONEY balance", "balance"),
        ("gm ruggy", None),
        ("50", None),
    ],
)
def test_route(text, expected):
    assert route(text) == expected


def test_route_respects_available_agents():
    assert route("swap 5 bera", ["send", "balance"]) is None
    assert route("send it into honey", ["send"]) == "send"
