"""
Flat key/value cache used for conversation state and wallet data.

Keys are forward-slash-delimited strings and values must be
JSON-compatible. Entries may carry an optional expiry in seconds;
without one they live until deleted.
"""

from __future__ import annotations

import copy
import logging
import time
from threading import Lock
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class CacheManager(Protocol):
    """Async cache collaborator injected into the runtime."""

    async def get(self, key: str) -> Optional[Any]:
        ...

    async def set(self, key: str, value: Any, expires: Optional[float] = None) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class InMemoryCacheManager:
    """Thread-safe in-memory cache with optional per-entry TTL."""

    def __init__(self, default_ttl: Optional[float] = None) -> None:
        self._store: dict[str, tuple[Any, Optional[float]]] = {}
        self._lock = Lock()
        self._default_ttl = default_ttl
        self._hits = 0
        self._misses = 0

    async def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if expires_at is not None and time.time() >= expires_at:
                del self._store[key]
                self._misses += 1
                return None
            self._hits += 1
            return copy.deepcopy(value)

    async def set(self, key: str, value: Any, expires: Optional[float] = None) -> None:
        ttl = expires if expires is not None else self._default_ttl
        expires_at = time.time() + ttl if ttl is not None else None
        with self._lock:
            self._store[key] = (copy.deepcopy(value), expires_at)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            return sorted(key for key in self._store if key.startswith(prefix))

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0

    @property
    def hit_rate(self) -> float:
        total = self._hits + self._misses
        return self._hits / total if total > 0 else 0.0

    @property
    def stats(self) -> dict[str, Any]:
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self.hit_rate, 4),
            "size": len(self._store),
        }
