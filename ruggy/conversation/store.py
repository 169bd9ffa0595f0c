"""Cache-backed storage for conversation states."""
from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Dict, Optional

from pydantic import ValidationError

from ruggy.cache import CacheManager
from ruggy.conversation.state import ConversationState
from ruggy.intents import INTENT_MODELS

logger = logging.getLogger(__name__)


def conversation_key(agent_name: str, kind: str, user_id: str) -> str:
    return f"{agent_name}/{kind}/{user_id}"


class ConversationStateStore:
    """Reads and writes :class:`ConversationState` through the cache manager.

    Values are stored as JSON-compatible dicts. A per-key ``asyncio.Lock``
    lets callers serialise every turn for the same user and intent kind.
    """

    def __init__(self, cache: CacheManager) -> None:
        self._cache = cache
        # Entries disappear once no turn holds or waits on the lock.
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def lock(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def get(self, key: str) -> Optional[ConversationState]:
        raw = await self._cache.get(key)
        if raw is None:
            return None
        try:
            return ConversationState.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding unreadable conversation state at %s", key, exc_info=True)
            await self._cache.delete(key)
            return None

    async def set(self, key: str, state: ConversationState) -> None:
        await self._cache.set(key, state.model_dump(mode="json"))

    async def delete(self, key: str) -> None:
        await self._cache.delete(key)

    async def active(self, agent_name: str, user_id: str) -> Dict[str, ConversationState]:
        """Return the user's open conversations keyed by intent kind."""
        states: Dict[str, ConversationState] = {}
        for kind in INTENT_MODELS:
            state = await self.get(conversation_key(agent_name, kind, user_id))
            if state is not None:
                states[kind] = state
        return states
