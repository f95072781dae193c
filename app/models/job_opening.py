"""SQLAlchemy model for job openings (vacancies) recruiters interview for."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class JobOpening(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    job_description = Column(Text, nullable=True)
    job_responsibilities = Column(Text, nullable=True)
    company_values = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    interview_types = relationship(
        "InterviewType",
        back_populates="job_opening",
        cascade="all, delete-orphan",
    )


__all__ = ["JobOpening"]
