"""Eviction policies for EntryStore.

LruTtlPolicy backs the bounded caches (capacity + optional age limit),
CompletionTtlPolicy backs the job registry (entries expire a fixed time
after they complete, never while running).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from core.errors import ValidationError
from core.models import Entry


@dataclass(frozen=True)
class LruTtlPolicy:
    max_capacity: Optional[int] = None
    ttl_seconds: Optional[float] = None
    touch_on_read: bool = True

    def __post_init__(self) -> None:
        if self.max_capacity is not None and self.max_capacity < 1:
            raise ValidationError("max_capacity must be at least 1")
        if self.ttl_seconds is not None and self.ttl_seconds <= 0:
            raise ValidationError("ttl_seconds must be positive (use None to disable)")

    def is_expired(self, entry: Entry[Any], now: float) -> bool:
        if self.ttl_seconds is None:
            return False
        return now - entry.created_at > self.ttl_seconds

    def over_capacity(self, size: int) -> bool:
        return self.max_capacity is not None and size > self.max_capacity


@dataclass(frozen=True)
class CompletionTtlPolicy:
    # expires_at is stamped on the entry at completion time
    touch_on_read: bool = False

    def is_expired(self, entry: Entry[Any], now: float) -> bool:
        return entry.expires_at is not None and now > entry.expires_at

    def over_capacity(self, size: int) -> bool:
        return False
