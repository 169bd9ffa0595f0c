"""
Per-room message history with a bounded recent window.

The window feeds the ``{recent_messages}`` variable of every extraction,
confirmation and response prompt.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from threading import Lock
from typing import Deque, Dict, Iterable, List, Sequence

from ruggy.models.chat import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECENT = 20
DEFAULT_MAX_STORED = 200


def format_recent_messages(messages: Iterable[ChatMessage]) -> str:
    """Render messages as ``speaker: text`` lines, oldest first."""
    lines = [f"{message.speaker}: {message.text.strip()}" for message in messages]
    return "\n".join(lines)


class RoomHistory:
    """Keeps the last messages of each room in memory."""

    def __init__(
        self,
        *,
        max_recent: int = DEFAULT_MAX_RECENT,
        max_stored: int = DEFAULT_MAX_STORED,
    ) -> None:
        if max_recent < 1:
            raise ValueError("max_recent must be at least 1.")
        self._max_recent = max_recent
        self._rooms: Dict[str, Deque[ChatMessage]] = defaultdict(
            lambda: deque(maxlen=max(max_stored, max_recent))
        )
        self._lock = Lock()

    def append(self, room_id: str, message: ChatMessage) -> None:
        with self._lock:
            self._rooms[room_id].append(message)

    def extend(self, room_id: str, messages: Sequence[ChatMessage]) -> None:
        with self._lock:
            self._rooms[room_id].extend(messages)

    def recent(self, room_id: str, limit: int | None = None) -> List[ChatMessage]:
        size = limit or self._max_recent
        with self._lock:
            messages = list(self._rooms.get(room_id, ()))
        return messages[-size:]

    def clear(self, room_id: str) -> None:
        with self._lock:
            self._rooms.pop(room_id, None)
        logger.debug("Cleared history for room %s", room_id)
