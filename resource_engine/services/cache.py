"""
Recommendation cache.

Entries are keyed by user:{user_id}:analysis:{analysis_id|none} and expire after
a fixed TTL. Expiry is checked lazily on read; there is no eviction thread.
Interaction writes elsewhere do not invalidate entries, so results may be up
to one TTL stale unless the write path calls invalidate(user_id).
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


def cache_key(user_id: int, analysis_id: Optional[int] = None) -> str:
    """Cache key for a (user, analysis) pair."""
    return f"user:{user_id}:analysis:{analysis_id if analysis_id is not None else 'none'}"


def user_prefix(user_id: int) -> str:
    """Prefix shared by every cache key of one user."""
    return f"user:{user_id}:"


class RecommendationCache(Protocol):
    """Protocol for the recommendation cache backend."""

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store value under key, resetting its age."""
        ...

    def delete_prefix(self, prefix: str) -> int:
        """Delete every entry whose key starts with prefix; return how many."""
        ...

    def clear(self) -> None:
        """Delete every entry."""
        ...


class InMemoryRecommendationCache:
    """
    Mutex-guarded in-process map of key -> (value, stored_at).

    Safe for concurrent readers/writers from threads or tasks; a lost update
    between two writers of the same key only means one recompute is discarded.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, stored_at = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                logger.debug("[cache] EXPIRED key=%s", key)
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for k in keys:
                del self._entries[k]
            return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
