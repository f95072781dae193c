"""Pydantic schemas for job openings."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class JobOpeningCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    job_description: Optional[str] = None
    job_responsibilities: Optional[str] = None
    company_values: Optional[str] = None


class JobOpeningUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    job_description: Optional[str] = None
    job_responsibilities: Optional[str] = None
    company_values: Optional[str] = None


class JobOpeningRead(BaseModel):
    id: int
    name: str
    job_description: Optional[str] = None
    job_responsibilities: Optional[str] = None
    company_values: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
