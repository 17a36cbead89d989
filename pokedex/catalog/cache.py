"""
Bounded, time-expiring in-memory cache for upstream responses.

The full catalogue index is refetched on every list request. When a
TTL is configured, ``TTLCache`` keeps the last result per upstream
query shape and makes sure only one thread loads a given key at a time:
concurrent callers wait for the load in progress and reuse its value.
Failed loads are never stored.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 16,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max(1, max_entries)
        self._clock = clock
        self._store: "OrderedDict[Hashable, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()
        self._key_locks: Dict[Hashable, threading.Lock] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                self._store.pop(key, None)
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._store[key] = (self._clock() + self.ttl_seconds, value)
            self._store.move_to_end(key)
            while len(self._store) > self.max_entries:
                evicted, _ = self._store.popitem(last=False)
                logger.debug("Evicted cache entry %r", evicted)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached value for ``key`` or load and store it.

        Exceptions raised by ``loader`` propagate to every caller that
        triggered a load; nothing is cached for them.
        """
        if not self.enabled:
            return loader()

        value = self.get(key)
        if value is not None:
            return value

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        with key_lock:
            # Another thread may have finished loading while we waited.
            value = self.get(key)
            if value is not None:
                return value
            value = loader()
            self.set(key, value)
            return value
