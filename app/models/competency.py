"""SQLAlchemy model for competency rubrics attached to an interview type.

Each rubric describes what the four fixed evaluation levels look like for a
single competency; the review prompt lists them verbatim.
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from app.models.base import Base


class Competency(Base):
    __tablename__ = "competencies"

    id = Column(Integer, primary_key=True, index=True)
    interview_type_id = Column(
        Integer,
        ForeignKey("interview_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(120), nullable=False)
    description = Column(Text, nullable=True)
    below_expected = Column(Text, nullable=True)
    partially_meets = Column(Text, nullable=True)
    meets = Column(Text, nullable=True)
    exceeds = Column(Text, nullable=True)

    interview_type = relationship("InterviewType", back_populates="competencies")


__all__ = ["Competency"]
