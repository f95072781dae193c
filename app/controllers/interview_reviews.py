"""Stored interview review endpoints."""

from __future__ import annotations

import uuid
from typing import Annotated, List, Optional

from fastapi import APIRouter, HTTPException, Query, Response, status
from sqlalchemy import select

from app.controllers.dependencies import SessionDep
from app.models import InterviewReview
from app.views import (
    InterviewReviewCreate,
    InterviewReviewRead,
    InterviewReviewUpdate,
)

router = APIRouter(prefix="/interview-reviews", tags=["interview-reviews"])

LimitQuery = Annotated[int, Query(ge=1, le=200)]


async def _get_review_or_404(session: SessionDep, review_id: uuid.UUID) -> InterviewReview:
    review = await session.get(InterviewReview, review_id)
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Entrevista não encontrada",
        )
    return review


@router.get("/", response_model=List[InterviewReviewRead])
async def list_interview_reviews(
    session: SessionDep,
    job_opening_id: Optional[int] = Query(None),
    limit: LimitQuery = 50,
) -> List[InterviewReviewRead]:
    query = select(InterviewReview).order_by(InterviewReview.created_at.desc()).limit(limit)
    if job_opening_id is not None:
        query = query.where(InterviewReview.job_opening_id == job_opening_id)
    result = await session.execute(query)
    return [InterviewReviewRead.model_validate(row) for row in result.unique().scalars().all()]


@router.post("/", response_model=InterviewReviewRead, status_code=status.HTTP_201_CREATED)
async def create_interview_review(
    payload: InterviewReviewCreate,
    session: SessionDep,
) -> InterviewReviewRead:
    """Create the record a recording will later be transcribed into."""

    review = InterviewReview(**payload.model_dump())
    session.add(review)
    await session.commit()
    await session.refresh(review)
    return InterviewReviewRead.model_validate(review)


@router.get("/{review_id}", response_model=InterviewReviewRead)
async def get_interview_review(review_id: uuid.UUID, session: SessionDep) -> InterviewReviewRead:
    return InterviewReviewRead.model_validate(await _get_review_or_404(session, review_id))


@router.patch("/{review_id}", response_model=InterviewReviewRead)
async def update_interview_review(
    review_id: uuid.UUID,
    payload: InterviewReviewUpdate,
    session: SessionDep,
) -> InterviewReviewRead:
    review = await _get_review_or_404(session, review_id)
    for field_name, value in payload.model_dump(exclude_unset=True).items():
        setattr(review, field_name, value)
    await session.commit()
    await session.refresh(review)
    return InterviewReviewRead.model_validate(review)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview_review(review_id: uuid.UUID, session: SessionDep) -> Response:
    review = await _get_review_or_404(session, review_id)
    await session.delete(review)
    await session.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
