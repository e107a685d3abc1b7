"""Application log LineSource implementation.

Gathers the lines logged on a given date from the rotated gzip archive
(<log_file>.<date>.0.gz) and, for today only, from the live log file.
Lines from the excluded diagnostic category are dropped. The result can
be packaged as a named LogArtifact for the async export jobs.
"""

from __future__ import annotations

import gzip
import re
import threading
import time
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from core.cache import BoundedTTLCache
from core.errors import JobCancelledError, ValidationError
from core.keys import make_key
from core.log import get_logger
from core.models import LogArtifact

logger = get_logger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_log_date(date_str: str) -> date:
    """Validate a yyyy-mm-dd string and return the matching date."""
    s = (date_str or "").strip()
    if not _DATE_RE.match(s):
        raise ValidationError("Date must be in format yyyy-MM-dd")
    try:
        return date.fromisoformat(s)
    except ValueError as e:
        raise ValidationError(f"Invalid date: {s}") from e


def _check_cancelled(cancel_event: Optional[threading.Event], date_str: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise JobCancelledError(f"Log processing was interrupted for date: {date_str}")


class LogSource:
    # Local filesystem implementation of LineSource.

    def __init__(
        self,
        *,
        log_file: Path,
        excluded_marker: str = "",
        archive_cache: Optional[BoundedTTLCache[Tuple[str, ...]]] = None,
        today: Callable[[], date] = date.today,
        delay_seconds: float = 0.0,
    ) -> None:
        self._log_file = Path(log_file)
        self._excluded_marker = excluded_marker
        self._archive_cache = archive_cache
        self._today = today
        self._delay = max(0.0, float(delay_seconds))

    def archive_path(self, date_str: str) -> Path:
        return self._log_file.with_name(f"{self._log_file.name}.{date_str}.0.gz")

    def lines_for(
        self,
        date_str: str,
        *,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[str]:
        target = parse_log_date(date_str)
        ds = target.isoformat()

        lines: List[str] = list(self._archive_lines(ds))
        _check_cancelled(cancel_event, ds)

        if target == self._today() and self._log_file.is_file():
            lines.extend(self._read_text_lines(self._log_file))
            _check_cancelled(cancel_event, ds)

        return [
            line
            for line in lines
            if line.startswith(ds) and not (self._excluded_marker and self._excluded_marker in line)
        ]

    def export(self, date_str: str, *, cancel_event: Optional[threading.Event] = None) -> LogArtifact:
        """Build the logs_<date>.log artifact; may be slow, runs on a worker."""
        ds = parse_log_date(date_str).isoformat()

        # Artificial processing latency; wakes early on cancellation
        if self._delay > 0:
            if cancel_event is None:
                time.sleep(self._delay)
            elif cancel_event.wait(self._delay):
                _check_cancelled(cancel_event, ds)

        lines = self.lines_for(ds, cancel_event=cancel_event)
        content = "\n".join(lines).encode("utf-8")

        logger.info("log export for %s: %d lines", ds, len(lines))
        return LogArtifact(filename=f"logs_{ds}.log", content=content, line_count=len(lines))

    def _archive_lines(self, ds: str) -> Tuple[str, ...]:
        key = make_key("archive", ds)
        if self._archive_cache is not None:
            cached = self._archive_cache.get(key)
            if cached is not None:
                return cached

        path = self.archive_path(ds)
        if not path.is_file():
            return ()

        # Rotated archives never change, so decoded lines are safe to memoize
        with gzip.open(path, "rt", encoding="utf-8", errors="replace") as fh:
            lines = tuple(line.rstrip("\r\n") for line in fh)

        if self._archive_cache is not None:
            self._archive_cache.put(key, lines)
        return lines

    def _read_text_lines(self, path: Path) -> List[str]:
        # Read text with replacement to avoid decode errors on partial writes
        return path.read_text(encoding="utf-8", errors="replace").splitlines()
