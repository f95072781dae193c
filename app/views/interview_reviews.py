"""Pydantic schemas for stored interview reviews."""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class InterviewReviewCreate(BaseModel):
    """Row created before the recording is uploaded."""

    job_opening_id: Optional[int] = None
    interview_type_id: Optional[int] = None
    candidate_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None


class InterviewReviewUpdate(BaseModel):
    candidate_name: Optional[str] = Field(None, max_length=200)
    notes: Optional[str] = None
    manual_review: Optional[str] = None
    competency_evaluation: Optional[str] = None


class InterviewReviewRead(BaseModel):
    id: uuid.UUID
    job_opening_id: Optional[int] = None
    interview_type_id: Optional[int] = None
    candidate_name: Optional[str] = None
    transcript: Optional[str] = None
    metrics: Optional[dict[str, Any]] = None
    notes: Optional[str] = None
    final_review: Optional[str] = None
    manual_review: Optional[str] = None
    competency_evaluation: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
