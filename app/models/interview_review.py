"""SQLAlchemy model for interview reviews.

A row is created by the front-end before the recording is uploaded; the
transcription pipeline fills ``transcript``/``metrics`` and the review
endpoint fills ``final_review``.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import relationship

from app.models.base import Base


class InterviewReview(Base):
    __tablename__ = "interview_reviews"

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )
    job_opening_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    interview_type_id = Column(
        Integer,
        ForeignKey("interview_types.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    candidate_name = Column(String(200), nullable=True)
    transcript = Column(Text, nullable=True)
    metrics = Column(JSONB, nullable=True)
    notes = Column(Text, nullable=True)
    final_review = Column(Text, nullable=True)
    manual_review = Column(Text, nullable=True)
    competency_evaluation = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    interview_type = relationship("InterviewType", lazy="joined")


__all__ = ["InterviewReview"]
