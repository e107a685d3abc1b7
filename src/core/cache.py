"""Bounded in-memory cache with LRU eviction and an optional TTL.

Memoizes expensive lookups behind sanitized string keys. Entries leave
the cache by explicit removal (single key or prefix), by LRU eviction
when max_capacity is exceeded, or once older than ttl_seconds (checked
lazily on read and by purge_expired from the sweeper).
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Generic, Optional, TypeVar

from core.errors import ValidationError
from core.keys import sanitize_key
from core.log import get_logger
from core.policies import LruTtlPolicy
from core.store import Clock, EntryStore

T = TypeVar("T")

logger = get_logger(__name__)


class BoundedTTLCache(Generic[T]):
    def __init__(
        self,
        *,
        max_capacity: int,
        ttl_seconds: Optional[float] = None,
        name: str = "cache",
        clock: Optional[Clock] = None,
    ) -> None:
        self._name = name
        self._policy = LruTtlPolicy(max_capacity=int(max_capacity), ttl_seconds=ttl_seconds)
        self._store: EntryStore[T] = EntryStore(policy=self._policy, clock=clock)

        # Diagnostics only; guarded separately from the store
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def name(self) -> str:
        return self._name

    def put(self, key: str, value: T) -> None:
        k = sanitize_key(key)
        evicted = self._store.put(k, value)
        logger.debug("cache %s: put key=%s", self._name, k)

        if evicted:
            with self._stats_lock:
                self._evictions += len(evicted)
            for old in evicted:
                logger.info("cache %s: evicted key=%s reason=capacity", self._name, old)

    def get(self, key: str) -> Optional[T]:
        k = sanitize_key(key)
        entry = self._store.get(k)

        with self._stats_lock:
            if entry is None:
                self._misses += 1
            else:
                self._hits += 1

        if entry is None:
            logger.debug("cache %s: miss key=%s", self._name, k)
            return None
        logger.debug("cache %s: hit key=%s", self._name, k)
        return entry.value

    def contains(self, key: str) -> bool:
        return self._store.contains(sanitize_key(key))

    def remove(self, key: str) -> None:
        k = sanitize_key(key)
        if self._store.remove(k):
            logger.info("cache %s: removed key=%s", self._name, k)
        else:
            logger.debug("cache %s: remove of absent key=%s", self._name, k)

    def remove_by_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix and return how many went.

        Used to invalidate all entries derived from one upstream entity
        without tracking the exact dependent keys.
        """
        if prefix is None or (isinstance(prefix, str) and not prefix.strip()):
            raise ValidationError("Prefix is empty; use remove_all() to flush the cache")
        p = sanitize_key(prefix)

        removed = self._store.remove_by_prefix(p)
        logger.info("cache %s: removed %d entries with prefix=%s", self._name, removed, p)
        return removed

    def remove_all(self) -> None:
        removed = self._store.clear()
        logger.info("cache %s: cleared (%d entries)", self._name, removed)

    def purge_expired(self) -> int:
        removed = self._store.remove_expired()
        if removed:
            logger.info("cache %s: purged %d expired entries", self._name, removed)
        return removed

    def size(self) -> int:
        return self._store.size()

    def __len__(self) -> int:
        return self.size()

    def stats(self) -> Dict[str, Any]:
        with self._stats_lock:
            hits, misses, evictions = self._hits, self._misses, self._evictions
        return {
            "name": self._name,
            "size": self._store.size(),
            "max_capacity": self._policy.max_capacity,
            "ttl_seconds": self._policy.ttl_seconds,
            "hits": hits,
            "misses": misses,
            "evictions": evictions,
            "expirations": self._store.expired_count,
        }
