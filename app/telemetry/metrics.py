"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

JOBS_SUBMITTED = Counter(
    "transcription_jobs_submitted_total",
    "Number of transcription jobs accepted",
)

JOBS_FINISHED = Counter(
    "transcription_jobs_finished_total",
    "Number of transcription jobs reaching a terminal state",
    ("outcome",),
)

JOBS_IN_FLIGHT = Gauge(
    "transcription_jobs_in_flight",
    "Transcription jobs currently being processed",
)

SEGMENTS_TRANSCRIBED = Counter(
    "transcription_segments_total",
    "Audio segments sent to the transcription provider",
)

JOB_DURATION = Histogram(
    "transcription_job_duration_seconds",
    "Wall-clock duration of transcription jobs",
    ("outcome",),
    buckets=(5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0, 1200.0, 2400.0, 3600.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def observe_job_finished(outcome: str, duration_seconds: float) -> None:
    """Record a job reaching ``completed`` or ``failed``."""

    JOBS_FINISHED.labels(outcome=outcome).inc()
    JOB_DURATION.labels(outcome=outcome).observe(max(duration_seconds, 0.0))
