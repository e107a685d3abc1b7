"""
Periodic background pruning.

Wraps an APScheduler BackgroundScheduler that calls registered sweep
targets (e.g. AsyncJobRegistry.sweep, BoundedTTLCache.purge_expired) on a
fixed interval. Lazy expiry on read already hides expired entries; the
sweep only reclaims their memory.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from core.errors import ValidationError
from core.log import get_logger

logger = get_logger(__name__)

SweepTarget = Callable[[], int]


class Sweeper:
    def __init__(self, *, interval_seconds: float, name: str = "sweeper") -> None:
        interval = float(interval_seconds)
        if interval <= 0:
            raise ValidationError("Sweep interval must be positive")

        self._interval = interval
        self._name = name
        self._targets: Dict[str, SweepTarget] = {}

        # Lock keeps start/stop/register consistent across threads
        self._lock = threading.Lock()
        self._scheduler = BackgroundScheduler(daemon=True)
        self._started = False

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        with self._lock:
            return self._started

    def register(self, name: str, target: SweepTarget) -> None:
        with self._lock:
            self._targets[name] = target

    def run_once(self) -> Dict[str, int]:
        """Run every target once; a failing target is logged and skipped."""
        with self._lock:
            targets = dict(self._targets)

        removed: Dict[str, int] = {}
        for name, target in targets.items():
            try:
                removed[name] = int(target())
            except Exception:
                logger.exception("%s: sweep target %s failed", self._name, name)
                continue
            if removed[name]:
                logger.info("%s: %s removed %d expired entries", self._name, name, removed[name])
        return removed

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._scheduler.add_job(
                self.run_once,
                trigger=IntervalTrigger(seconds=self._interval),
                id=f"{self._name}_sweep",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            self._scheduler.start()
            self._started = True
        logger.info("%s started (interval=%ss)", self._name, self._interval)

    def stop(self, *, wait: bool = False) -> None:
        with self._lock:
            if not self._started:
                return
            self._scheduler.shutdown(wait=wait)
            self._started = False
        logger.info("%s stopped", self._name)
