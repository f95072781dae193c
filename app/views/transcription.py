"""Pydantic schemas for transcription uploads and job polling."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class UploadResponse(BaseModel):
    """Handle returned as soon as an upload is accepted."""

    id: str


class JobMetricsResponse(BaseModel):
    audioDurationSeconds: float
    conversionSeconds: float
    transcriptionSeconds: float
    totalSeconds: float
    efficiencyRatio: Optional[float] = Field(
        None,
        description="Audio seconds processed per wall-clock second; null when total time is zero.",
    )


class JobStatusResponse(BaseModel):
    """Snapshot of a transcription job as seen by a polling client."""

    id: str
    status: str
    phase: str
    segmentsTotal: int = 0
    segmentsCompleted: int = 0
    ready: bool = False
    transcript: Optional[str] = Field(
        None,
        description="Only present once the job is ready.",
    )
    error: Optional[str] = None
    metrics: Optional[JobMetricsResponse] = None
