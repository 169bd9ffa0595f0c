"""Persisted conversation state and its lifecycle."""
from __future__ import annotations

import time
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, Field

from ruggy.conversation.exceptions import InvalidTransitionError
from ruggy.conversation.guidance import Guidance, generate_guidance
from ruggy.intents import Intent
from ruggy.intents.base import SlotIntent


class ConversationStatus(str, Enum):
    COLLECTING = "collecting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    DONE = "done"


_TRANSITIONS: Dict[Optional[ConversationStatus], FrozenSet[ConversationStatus]] = {
    None: frozenset({ConversationStatus.COLLECTING, ConversationStatus.AWAITING_CONFIRMATION}),
    ConversationStatus.COLLECTING: frozenset(
        {ConversationStatus.COLLECTING, ConversationStatus.AWAITING_CONFIRMATION}
    ),
    ConversationStatus.AWAITING_CONFIRMATION: frozenset(
        {ConversationStatus.CONFIRMED, ConversationStatus.DONE}
    ),
    # Failed execution keeps CONFIRMED; the next turn re-merges from there.
    ConversationStatus.CONFIRMED: frozenset(
        {
            ConversationStatus.DONE,
            ConversationStatus.COLLECTING,
            ConversationStatus.AWAITING_CONFIRMATION,
        }
    ),
    ConversationStatus.DONE: frozenset(),
}


def check_transition(
    current: Optional[ConversationStatus], target: ConversationStatus
) -> ConversationStatus:
    if target not in _TRANSITIONS[current]:
        raise InvalidTransitionError(
            current.value if current is not None else "absent", target.value
        )
    return target


def status_for(intent: SlotIntent) -> ConversationStatus:
    if intent.is_complete():
        return ConversationStatus.AWAITING_CONFIRMATION
    return ConversationStatus.COLLECTING


class ConversationState(BaseModel):
    """Cached slot-filling progress for one user and one intent kind."""

    kind: str
    content: Intent
    guidance: Guidance = Field(default_factory=Guidance)
    status: ConversationStatus = ConversationStatus.COLLECTING
    timestamp: float = Field(default_factory=time.time)

    @classmethod
    def start(cls, intent: SlotIntent) -> "ConversationState":
        status = check_transition(None, status_for(intent))
        return cls(
            kind=intent.kind,
            content=intent,
            guidance=generate_guidance(intent),
            status=status,
        )

    @property
    def awaiting_confirmation(self) -> bool:
        return self.status is ConversationStatus.AWAITING_CONFIRMATION

    @property
    def confirmed(self) -> bool:
        return self.status is ConversationStatus.CONFIRMED

    def advance(self, target: ConversationStatus) -> "ConversationState":
        status = check_transition(self.status, target)
        return self.model_copy(update={"status": status, "timestamp": time.time()})

    def with_content(self, intent: SlotIntent) -> "ConversationState":
        """Replace the content after a merge and recompute guidance and status."""
        status = check_transition(self.status, status_for(intent))
        return self.model_copy(
            update={
                "content": intent,
                "guidance": generate_guidance(intent),
                "status": status,
                "timestamp": time.time(),
            }
        )
