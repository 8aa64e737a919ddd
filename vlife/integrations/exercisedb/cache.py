"""In-memory TTL cache for ExerciseDB responses.

ExerciseDB terms allow caching for at most one hour and forbid persistent
storage, so entries live in process memory only.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from loguru import logger


class TTLCache:
    """Bounded least-recently-used cache whose entries expire after a TTL.

    Expired entries are dropped lazily on read; sweep() removes the rest.
    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self,
        max_entries: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("[EXERCISEDB] Cache evicted least recently used entry", key=evicted)

    def sweep(self) -> int:
        """Remove expired entries and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl_seconds]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("[EXERCISEDB] Cache sweep removed expired entries", removed=len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
