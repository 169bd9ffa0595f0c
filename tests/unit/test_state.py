import pytest

from ruggy.conversation import ConversationState, ConversationStatus, InvalidTransitionError
from ruggy.conversation.state import check_transition
from ruggy.intents import SendIntent, SwapIntent


def test_start_picks_status_from_completeness():
    partial = ConversationState.start(SwapIntent(to_token="HONEY"))
    assert partial.status is ConversationStatus.COLLECTING
    assert partial.guidance.missing_fields == ["from_token", "amount"]

    complete = ConversationState.start(SwapIntent(from_token="USDC", to_token="HONEY", amount="50"))
    assert complete.awaiting_confirmation
    assert complete.guidance.missing_fields == []


def test_with_content_recomputes_guidance():
    state = ConversationState.start(SendIntent(token="BERA"))
    updated = state.with_content(SendIntent(token="BERA", amount="1", address="0xabc"))

    assert updated.awaiting_confirmation
    assert updated.guidance.guidance == []
    assert updated.timestamp >= state.timestamp
    assert state.status is ConversationStatus.COLLECTING


@pytest.mark.parametrize(
    "current,target",
    [
        (ConversationStatus.COLLECTING, ConversationStatus.CONFIRMED),
        (ConversationStatus.COLLECTING, ConversationStatus.DONE),
        (ConversationStatus.AWAITING_CONFIRMATION, ConversationStatus.COLLECTING),
        (ConversationStatus.DONE, ConversationStatus.COLLECTING),
        (None, ConversationStatus.CONFIRMED),
    ],
)
def test_illegal_transitions_raise(current, target):
    with pytest.raises(InvalidTransitionError):
        check_transition(current, target)


def test_confirmation_path():
    state = ConversationState.start(SwapIntent(from_token="USDC", to_token="HONEY", amount="50"))
    confirmed = state.advance(ConversationStatus.CONFIRMED)
    assert confirmed.confirmed
    assert confirmed.advance(ConversationStatus.DONE).status is ConversationStatus.DONE

    with pytest.raises(InvalidTransitionError) as excinfo:
        state.advance(ConversationStatus.COLLECTING)
    assert excinfo.value.current == "awaiting_confirmation"


def test_state_round_trips_through_json():
    state = ConversationState.start(SendIntent(token="HONEY", include_fee=True))
    restored = ConversationState.model_validate(state.model_dump(mode="json"))

    assert isinstance(restored.content, SendIntent)
    assert restored == state
