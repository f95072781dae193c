"""Final-save step of the transcription pipeline."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import update

from app.database import session_scope
from app.models import InterviewReview

from .metrics import JobMetrics
from .registry import Correlation

logger = logging.getLogger(__name__)


async def save_transcription_result(
    correlation: Correlation,
    transcript: str,
    metrics: JobMetrics,
) -> None:
    """Write transcript and metrics onto the interview review the job belongs to."""

    if not correlation.interview_review_id:
        return

    review_id = uuid.UUID(str(correlation.interview_review_id))
    async with session_scope() as session:
        result = await session.execute(
            update(InterviewReview)
            .where(InterviewReview.id == review_id)
            .values(transcript=transcript, metrics=metrics.as_dict())
        )
        await session.commit()

    if result.rowcount == 0:
        logger.warning("No interview review %s to attach transcript to", review_id)
    else:
        logger.info("Transcript saved on interview review %s", review_id)


__all__ = ["save_transcription_result"]
