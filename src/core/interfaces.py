"""Core protocol and interface definitions.

Defines the EvictionPolicy protocol consulted by EntryStore, the Producer
callable accepted by AsyncJobRegistry and the LineSource contract used by
the log tools.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, List, Optional, Protocol, TypeVar

from core.models import Entry

V = TypeVar("V")

Producer = Callable[[], V]


class EvictionPolicy(Protocol):
    """Decides when an entry stops being visible in an EntryStore."""

    # Promote entries to most-recently-used on successful reads
    touch_on_read: bool

    def is_expired(self, entry: Entry[Any], now: float) -> bool:
        ...

    def over_capacity(self, size: int) -> bool:
        ...


class LineSource(Protocol):
    """Contract for anything that can gather log lines for a date."""

    def lines_for(
        self,
        date_str: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[str]:
        ...
