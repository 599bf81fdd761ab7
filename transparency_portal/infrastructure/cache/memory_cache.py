"""In-process TTL cache: an expiring map of key -> (value, expires_at).

Used when Redis is disabled. Entries are evicted lazily on read and swept
on write; there are no per-entry timers. Values are stored JSON-encoded so
callers get fresh copies and the same serialization rules as Redis.

Safe for concurrent coroutines on one event loop: no await happens while
the map is being mutated. Last write wins.
"""

from __future__ import annotations

import fnmatch
import json
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class MemoryCache:
    """Unbounded expiring map. Suitable for small key spaces (category ids, user ids)."""

    # Sweep expired entries at most this often (seconds) on writes
    SWEEP_INTERVAL = 60.0

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty cache.

        Args:
            clock: Monotonic time source in seconds; injectable for tests.
        """
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._last_sweep = clock()

    def is_available(self) -> bool:
        return True

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache MISS: %s", key)
            return None
        payload, expires_at = entry
        if expires_at <= self._clock():
            del self._entries[key]
            logger.debug("Cache EXPIRED: %s", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return json.loads(payload)

    async def set(self, key: str, value: Any, ttl: int = 300) -> bool:
        """Store value for ttl seconds (overwrites). ttl <= 0 stores nothing."""
        if ttl <= 0:
            self._entries.pop(key, None)
            return False
        now = self._clock()
        self._entries[key] = (json.dumps(value), now + ttl)
        if now - self._last_sweep >= self.SWEEP_INTERVAL:
            self._sweep(now)
        logger.debug("Cache SET: %s (TTL: %ss)", key, ttl)
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        """Delete keys matching a glob pattern (same syntax as Redis SCAN MATCH)."""
        matched = [k for k in self._entries if fnmatch.fnmatchcase(k, pattern)]
        for key in matched:
            del self._entries[key]
        if matched:
            logger.info("Cache INVALIDATE: %s (%s keys)", pattern, len(matched))
        return len(matched)

    async def clear(self) -> None:
        self._entries.clear()

    def _sweep(self, now: float) -> None:
        expired = [k for k, (_, exp) in self._entries.items() if exp <= now]
        for key in expired:
            del self._entries[key]
        self._last_sweep = now
