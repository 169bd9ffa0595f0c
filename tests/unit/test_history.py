from ruggy.memory import RoomHistory, format_recent_messages
from tests.fakes import user_message


def test_recent_window_is_bounded_and_ordered():
    history = RoomHistory(max_recent=2, max_stored=3)
    for text in ["one", "two", "three", "four"]:
        history.append("room", user_message(text))

    assert [message.text for message in history.recent("room")] == ["three", "four"]
    assert [message.text for message in history.recent("room", limit=5)] == ["two", "three", "four"]
    assert history.recent("elsewhere") == []


def test_format_uses_display_name():
    rendered = format_recent_messages([user_message("  swap 5 bera  "), user_message("ok")])
    assert rendered == "degen: swap 5 bera\ndegen: ok"


def test_clear_room():
    history = RoomHistory()
    history.extend("room", [user_message("a"), user_message("b")])
    history.clear("room")
    assert history.recent("room") == []
