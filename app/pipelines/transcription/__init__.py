"""Transcription job pipeline.

Modules follow the life of one upload:

1. `registry`: in-memory job snapshots polled by `/status/{id}`.
2. `orchestrator`: background task converting, splitting and transcribing.
3. `metrics`: timing record attached to finished jobs.
4. `persistence`: saves the transcript on the owning interview review.

`persistence` pulls in the database engine, so the application factory imports
it directly instead of it being re-exported here.
"""

from .metrics import JobMetrics, Stopwatch
from .orchestrator import (
    INVALID_FORMAT_ERROR,
    PROCESSING_ERROR,
    JobArtifacts,
    TranscriptionOrchestrator,
    UnsupportedFormatError,
)
from .registry import (
    STATUS_CAPTIONS,
    Correlation,
    JobNotFoundError,
    JobPhase,
    JobRegistry,
    JobSnapshot,
    segment_caption,
)

__all__ = [
    "INVALID_FORMAT_ERROR",
    "PROCESSING_ERROR",
    "STATUS_CAPTIONS",
    "Correlation",
    "JobArtifacts",
    "JobMetrics",
    "JobNotFoundError",
    "JobPhase",
    "JobRegistry",
    "JobSnapshot",
    "Stopwatch",
    "TranscriptionOrchestrator",
    "UnsupportedFormatError",
    "segment_caption",
]
