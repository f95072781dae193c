"""Tests for the in-memory job registry and job metrics."""

from __future__ import annotations

import math

import pytest

from app.pipelines.transcription import (
    Correlation,
    JobMetrics,
    JobNotFoundError,
    JobPhase,
    JobRegistry,
)


def test_create_registers_received_job():
    registry = JobRegistry()

    snapshot = registry.create(Correlation(interview_review_id="abc"))

    assert snapshot.phase is JobPhase.RECEIVED
    assert snapshot.status == "Recebido"
    assert snapshot.id in registry
    assert len(registry) == 1
    assert registry.active_count() == 1


def test_empty_registry_is_truthy():
    registry = JobRegistry()

    assert len(registry) == 0
    assert bool(registry) is True
    assert (registry or None) is registry


def test_get_unknown_job_raises_not_found():
    with pytest.raises(JobNotFoundError):
        JobRegistry().get("missing")


def test_update_swaps_in_new_snapshot():
    registry = JobRegistry()
    first = registry.create(Correlation())

    second = registry.update(first.id, phase=JobPhase.CONVERTED, status="Convertido")

    assert first.phase is JobPhase.RECEIVED
    assert registry.get(first.id) is second
    assert second.phase is JobPhase.CONVERTED


def test_terminal_jobs_are_frozen():
    registry = JobRegistry()
    job = registry.create(Correlation())
    registry.update(job.id, phase=JobPhase.FAILED, error="x")

    with pytest.raises(RuntimeError):
        registry.update(job.id, phase=JobPhase.COMPLETED)
    assert registry.active_count() == 0


def test_segment_progress_cannot_regress_or_overflow():
    registry = JobRegistry()
    job = registry.create(Correlation())
    registry.update(job.id, segments_total=3, segments_completed=2)

    with pytest.raises(ValueError):
        registry.update(job.id, segments_completed=1)
    with pytest.raises(ValueError):
        registry.update(job.id, segments_completed=4)


def test_status_hides_transcript_until_ready():
    registry = JobRegistry()
    job = registry.create(Correlation())
    registry.update(job.id, transcript="parcial")

    assert registry.get(job.id).as_status()["transcript"] is None

    registry.update(job.id, phase=JobPhase.COMPLETED, ready=True)
    assert registry.get(job.id).as_status()["transcript"] == "parcial"


def test_efficiency_ratio_handles_zero_total():
    metrics = JobMetrics(
        audio_duration_seconds=180.0,
        conversion_seconds=0.0,
        transcription_seconds=0.0,
        total_seconds=0.0,
    )

    assert metrics.efficiency_ratio is None
    assert metrics.as_dict()["efficiencyRatio"] is None


def test_efficiency_ratio_is_audio_over_total():
    metrics = JobMetrics(
        audio_duration_seconds=180.0,
        conversion_seconds=2.0,
        transcription_seconds=58.0,
        total_seconds=60.0,
    )

    assert math.isclose(metrics.efficiency_ratio, 3.0)
    assert metrics.as_dict() == {
        "audioDurationSeconds": 180.0,
        "conversionSeconds": 2.0,
        "transcriptionSeconds": 58.0,
        "totalSeconds": 60.0,
        "efficiencyRatio": 3.0,
    }
