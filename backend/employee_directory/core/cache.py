"""In-process cache store for query results."""

from __future__ import annotations

import logging
import time
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class CacheStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def reset(self) -> None: ...


class MemoryCache:
    """Dict-backed cache with optional per-entry TTL.

    ``ttl_seconds <= 0`` keeps entries until ``reset()``.
    """

    def __init__(self, ttl_seconds: float = 300, clock=time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float | None, Any]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            self.misses += 1
            return None

        expires_at, value = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            self.misses += 1
            return None

        self.hits += 1
        return value

    def set(self, key: str, value: Any) -> None:
        expires_at = self._clock() + self.ttl_seconds if self.ttl_seconds > 0 else None
        self._entries[key] = (expires_at, value)

    def reset(self) -> None:
        dropped = len(self._entries)
        self._entries.clear()
        logger.debug("Cache reset (%d entries dropped)", dropped)

    @property
    def stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def __len__(self) -> int:
        return len(self._entries)
