"""Pydantic schemas for review generation and recruiter chat."""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class ReviewRequest(BaseModel):
    """Interview context sent by the front-end to obtain a review."""

    transcript: str = Field(..., min_length=1)
    id: Optional[uuid.UUID] = Field(
        None,
        description="Interview review to update; a new row is created when absent or unknown.",
    )
    job_opening_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("job_opening_id", "jobOpeningId", "job_id"),
    )
    interview_type_id: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("interview_type_id", "interviewTypeId"),
    )
    candidate_name: Optional[str] = Field(
        None,
        max_length=200,
        validation_alias=AliasChoices("candidate_name", "candidateName"),
    )
    job_name: Optional[str] = None
    job_description: Optional[str] = None
    job_responsibilities: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("job_responsibilities", "job_responsabilities"),
    )
    interview_roadmap: Optional[str] = None
    company_values: Optional[str] = None
    notes: Optional[str] = None


class ReviewResponse(BaseModel):
    review: str
    id: uuid.UUID


class JobChatRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class JobChatResponse(BaseModel):
    answer: str
