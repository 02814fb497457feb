"""Best-effort in-memory deduplication for queue deliveries."""

import threading

from cachetools import LRUCache


class DeduplicationRecord:
    """Bounded LRU set of identifiers already handled in this process.

    Holds physical message ids and logical ``user:timestamp`` keys. It lives as
    long as the warm execution environment and is empty after a cold start.
    Oldest identifiers are evicted once ``capacity`` is reached.
    """

    def __init__(self, capacity: int = 1024):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._keys: LRUCache = LRUCache(maxsize=capacity)
        self._lock = threading.Lock()

    def seen(self, key: str) -> bool:
        with self._lock:
            # get() goes through __getitem__, which refreshes recency
            return self._keys.get(key) is not None

    def add(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._keys[key] = True

    def __contains__(self, key: str) -> bool:
        return self.seen(key)

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)
