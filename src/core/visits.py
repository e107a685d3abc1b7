"""Concurrent per-name visit counter (one increment per tool call)."""

from __future__ import annotations

import threading
from typing import Dict


class VisitCounter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = {}

    def record_visit(self, name: str) -> int:
        with self._lock:
            count = self._counts.get(name, 0) + 1
            self._counts[name] = count
            return count

    def visit_count(self, name: str) -> int:
        with self._lock:
            return self._counts.get(name, 0)

    def all_stats(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)
