"""Interview review generation endpoint."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from app.controllers.dependencies import ReviewGeneratorDep, SessionDep
from app.models import InterviewReview, InterviewType, JobOpening
from app.services.llm_client import LlmInvocationError
from app.services.review import ReviewGenerationError
from app.services.review_prompt import CompetencyRubric, ReviewContext
from app.views import ErrorResponse, ReviewRequest, ReviewResponse

router = APIRouter(tags=["review"])

logger = logging.getLogger(__name__)

REVIEW_FAILED = "Erro ao gerar review"


async def _build_context(session: SessionDep, payload: ReviewRequest) -> ReviewContext:
    """Merge request fields with the stored job opening and interview type."""

    job = (
        await session.get(JobOpening, payload.job_opening_id)
        if payload.job_opening_id is not None
        else None
    )
    interview_type = (
        await session.get(InterviewType, payload.interview_type_id)
        if payload.interview_type_id is not None
        else None
    )
    if payload.interview_type_id is not None and interview_type is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tipo de entrevista não encontrado",
        )

    competencies = tuple(
        CompetencyRubric(
            name=item.name,
            description=item.description,
            below_expected=item.below_expected,
            partially_meets=item.partially_meets,
            meets=item.meets,
            exceeds=item.exceeds,
        )
        for item in (interview_type.competencies if interview_type else ())
    )

    return ReviewContext(
        transcript=payload.transcript,
        job_name=payload.job_name or (job.name if job else None),
        job_description=payload.job_description or (job.job_description if job else None),
        job_responsibilities=payload.job_responsibilities
        or (job.job_responsibilities if job else None),
        interview_roadmap=payload.interview_roadmap
        or (interview_type.interview_roadmap if interview_type else None),
        notes=payload.notes,
        company_values=payload.company_values or (job.company_values if job else None),
        competencies=competencies,
    )


@router.post(
    "/review",
    response_model=ReviewResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_review(
    payload: ReviewRequest,
    session: SessionDep,
    generator: ReviewGeneratorDep,
) -> ReviewResponse:
    """Generate a review and upsert it on the interview review record."""

    try:
        context = await _build_context(session, payload)
    except SQLAlchemyError as exc:
        logger.exception("Could not load review context")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REVIEW_FAILED,
        ) from exc

    try:
        review_text = await generator.generate(context)
    except ReviewGenerationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except LlmInvocationError as exc:
        logger.exception("Review generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REVIEW_FAILED,
        ) from exc

    try:
        record = await session.get(InterviewReview, payload.id) if payload.id else None
        if record is None:
            record = InterviewReview(
                id=payload.id or uuid.uuid4(),
                job_opening_id=payload.job_opening_id,
                interview_type_id=payload.interview_type_id,
            )
            session.add(record)
        record.transcript = payload.transcript
        record.final_review = review_text
        if payload.candidate_name is not None:
            record.candidate_name = payload.candidate_name
        if payload.notes is not None:
            record.notes = payload.notes
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Could not persist review %s", payload.id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REVIEW_FAILED,
        ) from exc

    return ReviewResponse(review=review_text, id=record.id)
