"""Job opening CRUD and recruiter chat endpoints."""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Response, status
from sqlalchemy import select

from app.controllers.dependencies import JobChatDep, SessionDep
from app.models import JobOpening
from app.services.job_chat import JobOpeningNotFoundError
from app.services.llm_client import LlmInvocationError
from app.views import (
    ErrorResponse,
    JobChatRequest,
    JobChatResponse,
    JobOpeningCreate,
    JobOpeningRead,
    JobOpeningUpdate,
)

router = APIRouter(prefix="/job-openings", tags=["job-openings"])

logger = logging.getLogger(__name__)


async def _get_job_opening_or_404(session: SessionDep, job_opening_id: int) -> JobOpening:
    job = await session.get(JobOpening, job_opening_id)
    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vaga não encontrada",
        )
    return job


@router.get("/", response_model=List[JobOpeningRead])
async def list_job_openings(session: SessionDep) -> List[JobOpeningRead]:
    result = await session.execute(select(JobOpening).order_by(JobOpening.created_at.desc()))
    return [JobOpeningRead.model_validate(row) for row in result.scalars().all()]


@router.post("/", response_model=JobOpeningRead, status_code=status.HTTP_201_CREATED)
async def create_job_opening(payload: JobOpeningCreate, session: SessionDep) -> JobOpeningRead:
    job = JobOpening(**payload.model_dump())
    session.add(job)
    await session.commit()
    await session.refresh(job)
    return JobOpeningRead.model_validate(job)


@router.get("/{job_opening_id}", response_model=JobOpeningRead)
async def get_job_opening(job_opening_id: int, session: SessionDep) -> JobOpeningRead:
    return JobOpeningRead.model_validate(await _get_job_opening_or_404(session, job_opening_id))


@router.patch("/{job_opening_id}", response_model=JobOpeningRead)
async def update_job_opening(
    job_opening_id: int,
    payload: JobOpeningUpdate,
    session: SessionDep,
) -> JobOpeningRead:
    job = await _get_job_opening_or_404(session, job_opening_id)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        setattr(job, field_name, value)
    await session.commit()
    await session.refresh(job)
    return JobOpeningRead.model_validate(job)


@router.delete("/{job_opening_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job_opening(job_opening_id: int, session: SessionDep) -> Response:
    job = await _get_job_opening_or_404(session, job_opening_id)
    await session.delete(job)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{job_opening_id}/chat",
    response_model=JobChatResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_about_job_opening(
    job_opening_id: int,
    payload: JobChatRequest,
    session: SessionDep,
    chat: JobChatDep,
) -> JobChatResponse:
    """Answer a recruiter question using the interviews recorded for the opening."""

    try:
        answer = await chat.answer(session, job_opening_id, payload.question)
    except JobOpeningNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vaga não encontrada",
        ) from None
    except LlmInvocationError as exc:
        logger.exception("Job chat failed for opening %s", job_opening_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Erro ao processar a pergunta",
        ) from exc
    return JobChatResponse(answer=answer)
