"""Pydantic schemas for interview types and their competency rubrics."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CompetencyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    below_expected: Optional[str] = None
    partially_meets: Optional[str] = None
    meets: Optional[str] = None
    exceeds: Optional[str] = None


class CompetencyUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    below_expected: Optional[str] = None
    partially_meets: Optional[str] = None
    meets: Optional[str] = None
    exceeds: Optional[str] = None


class CompetencyRead(BaseModel):
    id: int
    interview_type_id: int
    name: str
    description: Optional[str] = None
    below_expected: Optional[str] = None
    partially_meets: Optional[str] = None
    meets: Optional[str] = None
    exceeds: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InterviewTypeCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    interview_roadmap: Optional[str] = None
    job_opening_id: Optional[int] = None


class InterviewTypeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    interview_roadmap: Optional[str] = None
    job_opening_id: Optional[int] = None


class InterviewTypeRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    interview_roadmap: Optional[str] = None
    job_opening_id: Optional[int] = None
    competencies: list[CompetencyRead] = []

    model_config = ConfigDict(from_attributes=True)
