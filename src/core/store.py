"""Thread-safe ordered entry store with a pluggable eviction policy.

EntryStore is the shared foundation of the bounded caches and the job
registry. Every operation runs under one lock per store, so operations
are linearizable with respect to each other. Ordering of the backing
OrderedDict doubles as recency order (oldest first).
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import replace
from typing import Callable, Generic, List, Optional, TypeVar

from core.interfaces import EvictionPolicy
from core.models import Entry

V = TypeVar("V")

Clock = Callable[[], float]


class EntryStore(Generic[V]):
    def __init__(self, *, policy: EvictionPolicy, clock: Optional[Clock] = None) -> None:
        self._policy = policy
        self._clock = clock or time.monotonic
        self._lock = threading.RLock()
        self._entries: "OrderedDict[str, Entry[V]]" = OrderedDict()
        self._expired = 0

    @property
    def policy(self) -> EvictionPolicy:
        return self._policy

    def now(self) -> float:
        return self._clock()

    @property
    def expired_count(self) -> int:
        # Entries dropped by lazy expiry or remove_expired since creation
        with self._lock:
            return self._expired

    def get(self, key: str) -> Optional[Entry[V]]:
        # Returns a copy; expired entries are dropped on the way out
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None

            if self._policy.touch_on_read:
                entry.last_accessed_at = self._clock()
                self._entries.move_to_end(key, last=True)
            return replace(entry)

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def put(self, key: str, value: V) -> List[str]:
        """Insert or overwrite key and evict from the LRU end while over capacity.

        Returns the evicted keys (oldest first).
        """
        with self._lock:
            now = self._clock()
            self._entries[key] = Entry(key=key, value=value, created_at=now, last_accessed_at=now)
            self._entries.move_to_end(key, last=True)

            evicted: List[str] = []
            while self._policy.over_capacity(len(self._entries)):
                old_key, _ = self._entries.popitem(last=False)
                evicted.append(old_key)
            return evicted

    def update(self, key: str, fn: Callable[[Entry[V], float], None]) -> bool:
        # Mutate the live entry in place; fn must not call back into the store
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            fn(entry, self._clock())
            return True

    def remove(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def remove_by_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def remove_expired(self) -> int:
        with self._lock:
            now = self._clock()
            doomed = [k for k, e in self._entries.items() if self._policy.is_expired(e, now)]
            for k in doomed:
                del self._entries[k]
            self._expired += len(doomed)
            return len(doomed)

    def clear(self) -> int:
        with self._lock:
            n = len(self._entries)
            self._entries.clear()
            return n

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def _live_entry(self, key: str) -> Optional[Entry[V]]:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._policy.is_expired(entry, self._clock()):
            del self._entries[key]
            self._expired += 1
            return None
        return entry
