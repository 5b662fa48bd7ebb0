"""
In-process cache of learners' set listings
"""

import logging
import threading
import time
from typing import Any

logger = logging.getLogger(__name__)


class CacheEntry:
    """Cached value with its storage time"""

    def __init__(self, value: Any, stored_at: float | None = None):
        self.value = value
        self.stored_at = stored_at if stored_at is not None else time.monotonic()


class SetListingCache:
    """TTL cache keyed by learner id; invalidated after graded submissions"""

    def __init__(self, ttl_seconds: int = 600):
        self.ttl_seconds = ttl_seconds
        self._entries: dict[int, CacheEntry] = {}
        self._guard = threading.Lock()

    def get(self, learner_id: int) -> Any | None:
        """Cached listing for a learner, or None when missing or expired"""
        with self._guard:
            entry = self._entries.get(learner_id)
            if entry is None:
                return None
            if self._is_expired(entry):
                del self._entries[learner_id]
                logger.debug(f"Set listing cache expired for learner {learner_id}")
                return None
            return entry.value

    def set(self, learner_id: int, value: Any) -> None:
        with self._guard:
            self._entries[learner_id] = CacheEntry(value)

    def invalidate(self, learner_id: int) -> bool:
        """Drop a learner's cached listing, returning True if one was present"""
        with self._guard:
            removed = self._entries.pop(learner_id, None) is not None
        if removed:
            logger.debug(f"Invalidated set listing cache for learner {learner_id}")
        return removed

    def clear(self) -> None:
        with self._guard:
            self._entries.clear()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _is_expired(self, entry: CacheEntry) -> bool:
        return time.monotonic() - entry.stored_at > self.ttl_seconds
