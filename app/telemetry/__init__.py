"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    JOB_DURATION,
    JOBS_FINISHED,
    JOBS_IN_FLIGHT,
    JOBS_SUBMITTED,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SEGMENTS_TRANSCRIBED,
    observe_job_finished,
    observe_request,
)

__all__ = [
    "ERROR_COUNTER",
    "JOB_DURATION",
    "JOBS_FINISHED",
    "JOBS_IN_FLIGHT",
    "JOBS_SUBMITTED",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SEGMENTS_TRANSCRIBED",
    "observe_job_finished",
    "observe_request",
]
