"""Interview type and competency rubric endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy import select

from app.controllers.dependencies import SessionDep
from app.models import Competency, InterviewType
from app.views import (
    CompetencyCreate,
    CompetencyRead,
    CompetencyUpdate,
    InterviewTypeCreate,
    InterviewTypeRead,
    InterviewTypeUpdate,
)

router = APIRouter(prefix="/interview-types", tags=["interview-types"])
competency_router = APIRouter(prefix="/competencies", tags=["interview-types"])


async def _get_interview_type_or_404(session: SessionDep, interview_type_id: int) -> InterviewType:
    interview_type = await session.get(InterviewType, interview_type_id)
    if not interview_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tipo de entrevista não encontrado",
        )
    return interview_type


async def _get_competency_or_404(session: SessionDep, competency_id: int) -> Competency:
    competency = await session.get(Competency, competency_id)
    if not competency:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Competência não encontrada",
        )
    return competency


async def _reload_interview_type(session: SessionDep, interview_type_id: int) -> InterviewTypeRead:
    # populate_existing refreshes the competencies collection after writes.
    result = await session.execute(
        select(InterviewType)
        .where(InterviewType.id == interview_type_id)
        .execution_options(populate_existing=True)
    )
    return InterviewTypeRead.model_validate(result.scalar_one())


@router.get("/", response_model=List[InterviewTypeRead])
async def list_interview_types(
    session: SessionDep,
    job_opening_id: Optional[int] = Query(None),
) -> List[InterviewTypeRead]:
    query = select(InterviewType).order_by(InterviewType.name)
    if job_opening_id is not None:
        query = query.where(InterviewType.job_opening_id == job_opening_id)
    result = await session.execute(query)
    return [InterviewTypeRead.model_validate(row) for row in result.scalars().all()]


@router.post("/", response_model=InterviewTypeRead, status_code=status.HTTP_201_CREATED)
async def create_interview_type(
    payload: InterviewTypeCreate,
    session: SessionDep,
) -> InterviewTypeRead:
    interview_type = InterviewType(**payload.model_dump())
    session.add(interview_type)
    await session.commit()
    return await _reload_interview_type(session, interview_type.id)


@router.get("/{interview_type_id}", response_model=InterviewTypeRead)
async def get_interview_type(interview_type_id: int, session: SessionDep) -> InterviewTypeRead:
    return InterviewTypeRead.model_validate(
        await _get_interview_type_or_404(session, interview_type_id)
    )


@router.patch("/{interview_type_id}", response_model=InterviewTypeRead)
async def update_interview_type(
    interview_type_id: int,
    payload: InterviewTypeUpdate,
    session: SessionDep,
) -> InterviewTypeRead:
    interview_type = await _get_interview_type_or_404(session, interview_type_id)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        setattr(interview_type, field_name, value)
    await session.commit()
    return await _reload_interview_type(session, interview_type_id)


@router.delete("/{interview_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview_type(interview_type_id: int, session: SessionDep) -> Response:
    interview_type = await _get_interview_type_or_404(session, interview_type_id)
    await session.delete(interview_type)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{interview_type_id}/competencies", response_model=List[CompetencyRead])
async def list_competencies(interview_type_id: int, session: SessionDep) -> List[CompetencyRead]:
    interview_type = await _get_interview_type_or_404(session, interview_type_id)
    return [CompetencyRead.model_validate(item) for item in interview_type.competencies]


@router.post(
    "/{interview_type_id}/competencies",
    response_model=CompetencyRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_competency(
    interview_type_id: int,
    payload: CompetencyCreate,
    session: SessionDep,
) -> CompetencyRead:
    await _get_interview_type_or_404(session, interview_type_id)
    competency = Competency(interview_type_id=interview_type_id, **payload.model_dump())
    session.add(competency)
    await session.commit()
    await session.refresh(competency)
    return CompetencyRead.model_validate(competency)


@competency_router.patch("/{competency_id}", response_model=CompetencyRead)
async def update_competency(
    competency_id: int,
    payload: CompetencyUpdate,
    session: SessionDep,
) -> CompetencyRead:
    competency = await _get_competency_or_404(session, competency_id)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        setattr(competency, field_name, value)
    await session.commit()
    await session.refresh(competency)
    return CompetencyRead.model_validate(competency)


@competency_router.delete("/{competency_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_competency(competency_id: int, session: SessionDep) -> Response:
    competency = await _get_competency_or_404(session, competency_id)
    await session.delete(competency)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
