"""SQLAlchemy model for interview types (stages of a hiring pipeline)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class InterviewType(Base):
    __tablename__ = "interview_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    interview_roadmap = Column(Text, nullable=True)
    job_opening_id = Column(
        Integer,
        ForeignKey("jobs.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    job_opening = relationship("JobOpening", back_populates="interview_types")
    competencies = relationship(
        "Competency",
        back_populates="interview_type",
        cascade="all, delete-orphan",
        order_by="Competency.id",
        lazy="selectin",
    )


__all__ = ["InterviewType"]
