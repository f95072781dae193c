"""Recruiter Q&A over every interview recorded for a job opening."""

from __future__ import annotations

import json
import logging
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import InterviewReview, InterviewType, JobOpening
from app.services.llm_client import BedrockLlmClient

logger = logging.getLogger(__name__)

NO_INTERVIEWS_MESSAGE = "Não há entrevistas suficientes para análise nesta vaga."
OFF_TOPIC_MESSAGE = "Desculpe, não consigo te ajudar com essa pergunta."
MISSING_TRANSCRIPT = "Transcrição não disponível."

SUMMARY_SYSTEM_PROMPT = (
    "Resuma a transcrição abaixo focando apenas em comunicação, clareza, "
    "comportamento e sinais relevantes para recrutamento."
)

CHAT_SYSTEM_PROMPT = (
    "Você é um analista sênior de recrutamento e seleção. "
    "Use exclusivamente os dados fornecidos e não invente informações. "
    "Para qualquer pergunta que não se refira às entrevistas da vaga responda "
    f'"{OFF_TOPIC_MESSAGE}" '
    "Seja técnico, claro e direto."
)


class JobOpeningNotFoundError(LookupError):
    """Raised when the chat targets a job opening that does not exist."""


class JobChatService:
    def __init__(
        self,
        llm_client: BedrockLlmClient,
        *,
        interview_limit: int = 50,
        summary_threshold: int = 500,
        transcript_cut: int = 8000,
        temperature: float = 0.2,
    ) -> None:
        self._llm = llm_client
        self._interview_limit = interview_limit
        self._summary_threshold = summary_threshold
        self._transcript_cut = transcript_cut
        self._temperature = temperature

    async def answer(self, session: AsyncSession, job_opening_id: int, question: str) -> str:
        """Answer ``question`` using the latest interviews of the job opening."""

        job = await session.get(JobOpening, job_opening_id)
        if job is None:
            raise JobOpeningNotFoundError(job_opening_id)

        result = await session.execute(
            select(InterviewReview, InterviewType.name)
            .outerjoin(InterviewType, InterviewType.id == InterviewReview.interview_type_id)
            .where(InterviewReview.job_opening_id == job_opening_id)
            .order_by(InterviewReview.created_at.desc())
            .limit(self._interview_limit)
        )
        rows = result.unique().all()
        if not rows:
            return NO_INTERVIEWS_MESSAGE

        blocks = []
        for index, (review, type_name) in enumerate(rows, start=1):
            summary = await self._summarise(review.transcript)
            blocks.append(self._format_interview(index, review, type_name, summary))

        user_prompt = "\n\n".join(
            (
                self._format_job(job),
                f"ENTREVISTAS ANALISADAS\nTotal: {len(blocks)}",
                "\n\n".join(blocks),
                f"Pergunta do recrutador:\n{question.strip()}",
            )
        )
        logger.info(
            "Job chat for opening %s with %s interviews", job_opening_id, len(blocks)
        )
        text = await self._llm.invoke(
            system_prompt=CHAT_SYSTEM_PROMPT,
            user_prompt=user_prompt,
            temperature=self._temperature,
        )
        return (text or "").strip() or OFF_TOPIC_MESSAGE

    async def _summarise(self, transcript: str | None) -> str:
        if not transcript or not transcript.strip():
            return MISSING_TRANSCRIPT
        if len(transcript) <= self._summary_threshold:
            return transcript

        summary = await self._llm.invoke(
            system_prompt=SUMMARY_SYSTEM_PROMPT,
            user_prompt=transcript[: self._transcript_cut],
            temperature=0.0,
        )
        return (summary or "").strip() or MISSING_TRANSCRIPT

    @staticmethod
    def _format_job(job: JobOpening) -> str:
        return (
            "DADOS DA VAGA\n"
            f"Nome da vaga:\n{job.name}\n\n"
            f"Descrição da vaga:\n{job.job_description or 'Não informada.'}\n\n"
            f"Atividades da vaga:\n{job.job_responsibilities or 'Não informadas.'}"
        )

    @staticmethod
    def _format_interview(
        index: int,
        review: InterviewReview,
        type_name: str | None,
        summary: str,
    ) -> str:
        lines: Sequence[str] = (
            f"ENTREVISTA {index}",
            f"Candidato: {review.candidate_name or 'Não informado'}",
            f"Tipo: {type_name or 'não definido'}",
            f"Métricas: {json.dumps(review.metrics, ensure_ascii=False)}",
            "Parecer:",
            review.manual_review or review.final_review or "Parecer não disponível.",
            "Resumo da transcrição:",
            summary,
        )
        return "\n".join(lines)


__all__ = [
    "NO_INTERVIEWS_MESSAGE",
    "OFF_TOPIC_MESSAGE",
    "JobChatService",
    "JobOpeningNotFoundError",
]
