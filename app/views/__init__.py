"""Pydantic schemas used as views in the MVC architecture."""

from .common import ErrorResponse
from .interview_reviews import (
    InterviewReviewCreate,
    InterviewReviewRead,
    InterviewReviewUpdate,
)
from .interview_types import (
    CompetencyCreate,
    CompetencyRead,
    CompetencyUpdate,
    InterviewTypeCreate,
    InterviewTypeRead,
    InterviewTypeUpdate,
)
from .job_openings import JobOpeningCreate, JobOpeningRead, JobOpeningUpdate
from .review import JobChatRequest, JobChatResponse, ReviewRequest, ReviewResponse
from .transcription import JobMetricsResponse, JobStatusResponse, UploadResponse

__all__ = [
    "CompetencyCreate",
    "CompetencyRead",
    "CompetencyUpdate",
    "ErrorResponse",
    "InterviewReviewCreate",
    "InterviewReviewRead",
    "InterviewReviewUpdate",
    "InterviewTypeCreate",
    "InterviewTypeRead",
    "InterviewTypeUpdate",
    "JobChatRequest",
    "JobChatResponse",
    "JobMetricsResponse",
    "JobOpeningCreate",
    "JobOpeningRead",
    "JobOpeningUpdate",
    "JobStatusResponse",
    "ReviewRequest",
    "ReviewResponse",
    "UploadResponse",
]
