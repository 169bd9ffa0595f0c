"""One turn of the slot-filling and confirmation protocol."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ruggy.conversation.confirmation import ConfirmationGate
from ruggy.conversation.exceptions import ExtractionError
from ruggy.conversation.extraction import Extractor
from ruggy.conversation.merge import merge
from ruggy.conversation.state import ConversationState, ConversationStatus
from ruggy.conversation.store import ConversationStateStore, conversation_key
from ruggy.intents import empty_intent
from ruggy.intents.base import SlotIntent
from ruggy.models.chat import ChatMessage

logger = logging.getLogger(__name__)


class TurnEvent(str, Enum):
    COLLECTING = "collecting"
    PREVIEW = "preview"
    CONFIRMED = "confirmed"
    DENIED = "denied"


@dataclass(frozen=True)
class Evaluation:
    event: TurnEvent
    state: ConversationState
    key: str

    @property
    def intent(self) -> SlotIntent:
        return self.state.content


class SlotFillingEvaluator:
    """Drives a single intent kind through collection and confirmation.

    A stored state awaiting confirmation sends the turn to the confirmation
    gate; any other turn extracts fields from the recent messages and merges
    them into whatever is cached. Callers that act on the result should hold
    :meth:`lock` for the whole turn.
    """

    def __init__(
        self,
        *,
        agent_name: str,
        kind: str,
        store: ConversationStateStore,
        extractor: Extractor,
        gate: ConfirmationGate,
        extraction_template: str,
        confirmation_template: str,
    ) -> None:
        self.agent_name = agent_name
        self.kind = kind
        self._store = store
        self._extractor = extractor
        self._gate = gate
        self._extraction_template = extraction_template
        self._confirmation_template = confirmation_template

    def key_for(self, user_id: str) -> str:
        return conversation_key(self.agent_name, self.kind, user_id)

    def lock(self, user_id: str) -> asyncio.Lock:
        return self._store.lock(self.key_for(user_id))

    async def current(self, user_id: str) -> ConversationState | None:
        return await self._store.get(self.key_for(user_id))

    async def evaluate(self, user_id: str, history: Sequence[ChatMessage]) -> Evaluation:
        key = self.key_for(user_id)
        cached = await self._store.get(key)

        if cached is not None and cached.awaiting_confirmation:
            decision = await self._gate.classify(history, self._confirmation_template)
            if decision.confirmed:
                state = cached.advance(ConversationStatus.CONFIRMED)
                await self._store.set(key, state)
                logger.info("%s confirmed for %s", self.kind, user_id)
                return Evaluation(TurnEvent.CONFIRMED, state, key)
            state = cached.advance(ConversationStatus.DONE)
            await self._store.delete(key)
            logger.info("%s cancelled by %s", self.kind, user_id)
            return Evaluation(TurnEvent.DENIED, state, key)

        try:
            extracted = await self._extractor.extract(history, self._extraction_template, self.kind)
        except ExtractionError as exc:
            logger.warning("No new %s fields this turn: %s", self.kind, exc)
            extracted = empty_intent(self.kind)

        if cached is None:
            state = ConversationState.start(extracted)
        else:
            state = cached.with_content(merge(extracted, cached.content))
        await self._store.set(key, state)

        if state.awaiting_confirmation:
            return Evaluation(TurnEvent.PREVIEW, state, key)
        return Evaluation(TurnEvent.COLLECTING, state, key)

    async def complete(self, evaluation: Evaluation) -> None:
        """Close a conversation after its action succeeded."""
        evaluation.state.advance(ConversationStatus.DONE)
        await self._store.delete(evaluation.key)
