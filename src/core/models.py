"""Dataclasses and enums shared by the stores and the MCP tools.

Includes the generic store Entry, the job state machine values
(JobState, JobStatus) and the LogArtifact produced by log exports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass(slots=True)
class Entry(Generic[V]):
    """One slot of an EntryStore.

    Field groups:
    - Common: key, value, created_at
    - Cache: last_accessed_at
    - Jobs: completed_at, expires_at (both absent while the job is running)
    """

    key: str
    value: Optional[V]
    created_at: float
    last_accessed_at: float
    completed_at: Optional[float] = None
    expires_at: Optional[float] = None


class JobState(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class JobRecord(Generic[V]):
    # Outcome of a job; error is set for FAILED and CANCELLED
    state: JobState
    result: Optional[V] = None
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class JobStatus:
    """Caller-facing view of a job.

    expires_in_seconds is None while the job is pending, since expiry is
    only scheduled once the job completes.
    """

    job_id: str
    state: JobState
    expires_in_seconds: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.state is not JobState.PENDING


@dataclass(frozen=True)
class LogArtifact:
    """A named log export; content is UTF-8 text joined by newlines."""

    filename: str
    content: bytes
    line_count: int

    @property
    def length(self) -> int:
        return len(self.content)

    def __len__(self) -> int:
        return self.line_count
