"""FastAPI routers acting as controllers in the MVC architecture."""

from . import interview_reviews, interview_types, job_openings, review, transcription

__all__ = [
    "interview_reviews",
    "interview_types",
    "job_openings",
    "review",
    "transcription",
]
