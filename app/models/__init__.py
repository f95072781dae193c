"""SQLAlchemy models for the MVC architecture."""

from .base import Base
from .competency import Competency  # noqa: F401
from .interview_review import InterviewReview  # noqa: F401
from .interview_type import InterviewType  # noqa: F401
from .job_opening import JobOpening  # noqa: F401

__all__ = [
    "Base",
    "Competency",
    "InterviewReview",
    "InterviewType",
    "JobOpening",
]
