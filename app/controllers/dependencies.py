"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_session
from app.pipelines.transcription import JobRegistry, TranscriptionOrchestrator
from app.services.job_chat import JobChatService
from app.services.review import ReviewGenerator

SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_job_registry(request: Request) -> JobRegistry:
    return request.app.state.job_registry


def get_orchestrator(request: Request) -> TranscriptionOrchestrator:
    return request.app.state.orchestrator


def get_review_generator(request: Request) -> ReviewGenerator:
    return request.app.state.review_generator


def get_job_chat_service(request: Request) -> JobChatService:
    return request.app.state.job_chat


JobRegistryDep = Annotated[JobRegistry, Depends(get_job_registry)]
OrchestratorDep = Annotated[TranscriptionOrchestrator, Depends(get_orchestrator)]
ReviewGeneratorDep = Annotated[ReviewGenerator, Depends(get_review_generator)]
JobChatDep = Annotated[JobChatService, Depends(get_job_chat_service)]


__all__ = [
    "JobChatDep",
    "JobRegistryDep",
    "OrchestratorDep",
    "ReviewGeneratorDep",
    "SessionDep",
    "get_job_chat_service",
    "get_job_registry",
    "get_orchestrator",
    "get_review_generator",
]
