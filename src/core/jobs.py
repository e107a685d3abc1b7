"""Asynchronous job registry with poll-based completion.

submit() schedules a producer on a worker pool and returns a job id at
once; callers poll status()/result(), which never block. A job's expiry
is stamped exactly once, when it leaves PENDING, and completed jobs are
hidden immediately after expiry (lazy) and reclaimed by the sweeper.

    PENDING -> {SUCCEEDED, FAILED, CANCELLED} -> reaped (indistinguishable
    from an unknown job id)
"""

from __future__ import annotations

import math
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Generic, Optional, Sized, TypeVar

from core.errors import (
    EmptyResultError,
    JobCancelledError,
    NotFoundError,
    NotReadyError,
    ProducerFailureError,
    RegistryClosedError,
    ValidationError,
)
from core.interfaces import Producer
from core.log import get_logger
from core.models import Entry, JobRecord, JobState, JobStatus
from core.policies import CompletionTtlPolicy
from core.store import Clock, EntryStore
from core.sweeper import Sweeper

V = TypeVar("V")

logger = get_logger(__name__)


def default_is_empty(value: Any) -> bool:
    # None and zero-length values count as "nothing to return"
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0


class AsyncJobRegistry(Generic[V]):
    def __init__(
        self,
        *,
        result_ttl_seconds: float = 300.0,
        sweep_interval_seconds: float = 60.0,
        max_workers: int = 2,
        is_empty: Callable[[V], bool] = default_is_empty,
        clock: Optional[Clock] = None,
        start_sweeper: bool = True,
    ) -> None:
        if result_ttl_seconds < 0:
            raise ValidationError("result_ttl_seconds must not be negative")

        self._result_ttl = float(result_ttl_seconds)
        self._is_empty = is_empty
        self._jobs: EntryStore[JobRecord[V]] = EntryStore(policy=CompletionTtlPolicy(), clock=clock)

        self._executor = ThreadPoolExecutor(
            max_workers=max(1, int(max_workers)),
            thread_name_prefix="job-worker",
        )
        self._cancel_event = threading.Event()

        # Guards the closed flag against concurrent submit/shutdown
        self._lifecycle_lock = threading.Lock()
        self._closed = False

        self._sweeper = Sweeper(interval_seconds=sweep_interval_seconds, name="job-sweeper")
        self._sweeper.register("jobs", self.sweep)
        if start_sweeper:
            self._sweeper.start()

    @property
    def cancel_event(self) -> threading.Event:
        """Set on shutdown; long-running producers should poll it."""
        return self._cancel_event

    @property
    def closed(self) -> bool:
        with self._lifecycle_lock:
            return self._closed

    def submit(self, producer: Producer[V]) -> str:
        job_id = uuid.uuid4().hex

        with self._lifecycle_lock:
            if self._closed:
                raise RegistryClosedError("Registry is shut down; no new jobs are accepted")

            # Record must exist before the worker can complete it
            self._jobs.put(job_id, JobRecord(state=JobState.PENDING))
            try:
                future = self._executor.submit(producer)
            except Exception:
                # A pending record with no future would never complete or expire
                self._jobs.remove(job_id)
                raise

        future.add_done_callback(lambda f: self._on_done(job_id, f))
        logger.info("job %s submitted", job_id)
        return job_id

    def status(self, job_id: str) -> JobStatus:
        jid = self._normalize_id(job_id)
        entry = self._lookup(jid)
        record = entry.value

        if record is None or record.state is JobState.PENDING or entry.expires_at is None:
            return JobStatus(job_id=jid, state=JobState.PENDING)

        remaining = max(0, math.floor(entry.expires_at - self._jobs.now()))
        return JobStatus(job_id=jid, state=record.state, expires_in_seconds=remaining)

    def result(self, job_id: str) -> V:
        """Return the produced value of a completed job.

        Raises NotFoundError (unknown or expired), NotReadyError (still
        running), ProducerFailureError (failed or cancelled, original
        error chained) or EmptyResultError (completed with no content).
        """
        jid = self._normalize_id(job_id)
        record = self._lookup(jid).value

        if record is None or record.state is JobState.PENDING:
            raise NotReadyError(f"Job {jid} has not completed yet")

        if record.state is JobState.CANCELLED:
            raise ProducerFailureError(f"Job {jid} was cancelled") from record.error
        if record.state is JobState.FAILED:
            raise ProducerFailureError(f"Job {jid} failed") from record.error

        if self._is_empty(record.result):
            raise EmptyResultError(f"Job {jid} produced no content")
        return record.result  # type: ignore[return-value]

    def sweep(self) -> int:
        return self._jobs.remove_expired()

    def job_count(self) -> int:
        return self._jobs.size()

    def shutdown(self, *, wait: bool = True, cancel_pending: bool = True) -> None:
        with self._lifecycle_lock:
            if self._closed:
                return
            self._closed = True

        self._cancel_event.set()
        self._sweeper.stop()
        self._executor.shutdown(wait=wait, cancel_futures=cancel_pending)
        logger.info("job registry shut down")

    def __enter__(self) -> "AsyncJobRegistry[V]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _lookup(self, jid: str) -> Entry[JobRecord[V]]:
        entry = self._jobs.get(jid)
        if entry is None:
            raise NotFoundError(f"Job {jid} was not found or has expired")
        return entry

    def _normalize_id(self, job_id: str) -> str:
        if job_id is None or not isinstance(job_id, str) or not job_id.strip():
            raise NotFoundError("Job id is empty")
        return job_id.strip()

    def _on_done(self, job_id: str, future: "Future[V]") -> None:
        # Runs on the worker thread, or on the cancelling thread for queued jobs
        if future.cancelled():
            record: JobRecord[V] = JobRecord(
                state=JobState.CANCELLED,
                error=JobCancelledError("Job cancelled before it started"),
            )
        else:
            error = future.exception()
            if error is None:
                record = JobRecord(state=JobState.SUCCEEDED, result=future.result())
            elif isinstance(error, JobCancelledError):
                record = JobRecord(state=JobState.CANCELLED, error=error)
            else:
                record = JobRecord(state=JobState.FAILED, error=error)

        def _complete(entry: Entry[JobRecord[V]], now: float) -> None:
            if entry.completed_at is not None:
                return
            entry.value = record
            entry.completed_at = now
            entry.expires_at = now + self._result_ttl

        if not self._jobs.update(job_id, _complete):
            return

        if record.state is JobState.FAILED:
            logger.warning("job %s failed", job_id, exc_info=record.error)
        else:
            logger.info("job %s %s", job_id, record.state.value)
