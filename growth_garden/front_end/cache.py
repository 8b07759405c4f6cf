# growth_garden/front_end/cache.py

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Hashable, ...]

_MISSING = object()


class ResponseCache:
    """
    Small in-memory cache for API reads.

    Keys are tuples whose first element names the resource family,
    e.g. ("goals",) or ("daily-habits", "2024-05-01"). invalidate(family)
    drops every key in that family. Entries older than ttl_seconds are
    treated as absent.
    """

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[CacheKey, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            stored_at, value = entry
            if self._clock() - stored_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return default
            return value

    def contains(self, key: CacheKey) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def set(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def invalidate(self, resource: str, *identity: Hashable) -> int:
        """
        Drops every entry in a resource family, or only those whose key
        starts with (resource, *identity) when identity is given.
        Returns the number of entries removed.
        """
        prefix = (resource, *identity)
        with self._lock:
            stale = [key for key in self._entries if key[:len(prefix)] == prefix]
            for key in stale:
                del self._entries[key]
        if stale:
            logger.debug("Invalidated %d cache entries for %s", len(stale), prefix)
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
