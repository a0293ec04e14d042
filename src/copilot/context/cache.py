"""Bounded TTL cache used by the context manager."""

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 1000
DEFAULT_TTL = 5 * 60.0  # seconds


class ContextCache:
    """Key-value cache with lazy TTL expiry and insertion-order eviction.

    Entries are stamped when set. Reads past ``ttl`` delete the entry and
    miss. When full, inserting a new key evicts the entry with the oldest
    stamp; reads never refresh a stamp. A ``max_size`` below 1 disables
    storage.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl: float = DEFAULT_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize cache.

        Args:
            max_size: Maximum number of entries
            ttl: Entry lifetime in seconds
            clock: Monotonic time source, injectable for tests
        """
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stamp, value = entry
            if self._clock() - stamp > self.ttl:
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        if self.max_size <= 0:
            return
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted: %s", evicted)
            self._entries[key] = (self._clock(), value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
