"""In-memory registry of transcription jobs.

Jobs live only as long as the process: nothing here is persisted, and a
restart forgets every job (finished transcripts survive only through the
interview review row they were saved to).

Concurrency contract: each job id has exactly one writer, the background task
running that job. A job is stored as an immutable :class:`JobSnapshot`; the
writer publishes changes by swapping in a new snapshot, so readers on the
status endpoint always see a whole, consistent record without locking.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterator

from .metrics import JobMetrics


class JobPhase(str, Enum):
    """Lifecycle phases of a transcription job."""

    RECEIVED = "received"
    CONVERTED = "converted"
    TRANSCRIBING = "transcribing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobPhase.COMPLETED, JobPhase.FAILED)


STATUS_CAPTIONS: dict[JobPhase, str] = {
    JobPhase.RECEIVED: "Recebido",
    JobPhase.CONVERTED: "Convertido",
    JobPhase.TRANSCRIBING: "Transcrevendo",
    JobPhase.COMPLETED: "Concluído",
    JobPhase.FAILED: "Falhou",
}


def segment_caption(current: int, total: int) -> str:
    return f"Transcrevendo parte {current}/{total}"


class JobNotFoundError(KeyError):
    """Raised when a job id is not present in the registry."""


@dataclass(frozen=True)
class Correlation:
    """External metadata travelling with a job."""

    interview_review_id: str | None = None
    diarize: bool = False
    original_filename: str | None = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JobSnapshot:
    """Point-in-time view of one job."""

    id: str
    correlation: Correlation
    phase: JobPhase = JobPhase.RECEIVED
    status: str = STATUS_CAPTIONS[JobPhase.RECEIVED]
    segments_total: int = 0
    segments_completed: int = 0
    ready: bool = False
    transcript: str = ""
    error: str | None = None
    metrics: JobMetrics | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def as_status(self) -> dict[str, Any]:
        """Client-facing status payload; the transcript only once ready."""

        return {
            "id": self.id,
            "status": self.status,
            "phase": self.phase.value,
            "segmentsTotal": self.segments_total,
            "segmentsCompleted": self.segments_completed,
            "ready": self.ready,
            "transcript": self.transcript if self.ready else None,
            "error": self.error,
            "metrics": self.metrics.as_dict() if self.metrics else None,
        }


class JobRegistry:
    """Process-lifetime store of job snapshots keyed by id."""

    def __init__(self) -> None:
        self._jobs: dict[str, JobSnapshot] = {}

    def create(self, correlation: Correlation) -> JobSnapshot:
        job_id = uuid.uuid4().hex
        snapshot = JobSnapshot(id=job_id, correlation=correlation)
        self._jobs[job_id] = snapshot
        return snapshot

    def get(self, job_id: str) -> JobSnapshot:
        try:
            return self._jobs[job_id]
        except KeyError:
            raise JobNotFoundError(job_id) from None

    def update(self, job_id: str, **changes: Any) -> JobSnapshot:
        """Publish a new snapshot for ``job_id``; only its owning task calls this."""

        current = self.get(job_id)
        if current.phase.is_terminal:
            raise RuntimeError(f"Job {job_id} already finished as {current.phase.value}")

        completed = changes.get("segments_completed", current.segments_completed)
        total = changes.get("segments_total", current.segments_total)
        if completed < current.segments_completed or completed > total:
            raise ValueError(
                f"Invalid segment progress {completed}/{total} for job {job_id}"
            )

        snapshot = replace(current, updated_at=_utcnow(), **changes)
        self._jobs[job_id] = snapshot
        return snapshot

    def active_count(self) -> int:
        return sum(1 for job in self._jobs.values() if not job.phase.is_terminal)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __bool__(self) -> bool:
        # An empty registry is still a usable registry.
        return True

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[JobSnapshot]:
        return iter(list(self._jobs.values()))


__all__ = [
    "Correlation",
    "JobNotFoundError",
    "JobPhase",
    "JobRegistry",
    "JobSnapshot",
    "STATUS_CAPTIONS",
    "segment_caption",
]
