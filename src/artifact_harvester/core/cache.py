"""
Time-bound in-memory cache for upstream responses.

Entries are evicted lazily: only a `get` past the freshness window removes
them. Stale entries stay readable through `peek` so fetchers can fall back
to them when GitHub is unreachable.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

TAGS_CACHE_TTL_MS = 3_600_000  # 1 hour
ISSUES_CACHE_TTL_MS = 1_800_000  # 30 minutes


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class CacheEntry:
    """Cached payload plus the write timestamp in milliseconds since epoch."""

    data: Any
    timestamp: int
    ttl_ms: int


class TTLCache:
    """
    Key/value store with a freshness window.

    `set` records the TTL requested by the writer, but `get` checks every entry
    against the single `max_age_ms` window (the tag TTL by default). Entries
    written with the shorter issue TTL therefore stay fresh for the full hour.
    """

    def __init__(self, max_age_ms: int = TAGS_CACHE_TTL_MS, clock: Callable[[], int] = _now_ms):
        self.max_age_ms = max_age_ms
        self.clock = clock
        self.entries: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def get(self, key: str) -> Any | None:
        """Return the value if still fresh, evicting it otherwise."""
        with self._lock:
            entry = self.entries.get(key)
            if entry is None:
                return None

            if self.clock() - entry.timestamp < self.max_age_ms:
                return entry.data

            del self.entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None

    def peek(self, key: str) -> Any | None:
        """Return the value regardless of age, without evicting."""
        with self._lock:
            entry = self.entries.get(key)
            return entry.data if entry is not None else None

    def peek_entry(self, key: str) -> CacheEntry | None:
        with self._lock:
            return self.entries.get(key)

    def restore(self, key: str, entry: CacheEntry) -> None:
        """Put back an evicted entry with its original timestamp, unless a newer one was written."""
        with self._lock:
            self.entries.setdefault(key, entry)

    def set(self, key: str, data: Any, ttl_ms: int) -> None:
        """Store a value stamped with the current time."""
        with self._lock:
            self.entries[key] = CacheEntry(data=data, timestamp=self.clock(), ttl_ms=ttl_ms)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self.entries

    def clear(self) -> None:
        with self._lock:
            self.entries.clear()
