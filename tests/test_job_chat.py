"""Tests for the recruiter chat over a job opening's interviews."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from app.models import InterviewReview, JobOpening
from app.services.job_chat import (
    NO_INTERVIEWS_MESSAGE,
    JobChatService,
    JobOpeningNotFoundError,
)
from conftest import FakeLlmClient, FakeSession


class _Result:
    def __init__(self, rows):
        self._rows = rows

    def unique(self):
        return self

    def all(self):
        return list(self._rows)


class ChatSession(FakeSession):
    def __init__(self, rows, interviews):
        super().__init__(rows)
        self.interviews = interviews
        self.statements = []

    async def execute(self, statement):
        self.statements.append(statement)
        return _Result(self.interviews)


JOB = JobOpening(id=3, name="Account Executive", job_description="Vendas B2B")


def _interview(transcript, **fields):
    return InterviewReview(id=uuid.uuid4(), job_opening_id=3, transcript=transcript, **fields)


def test_unknown_job_opening_raises():
    service = JobChatService(FakeLlmClient())

    with pytest.raises(JobOpeningNotFoundError):
        asyncio.run(service.answer(ChatSession({}, []), 3, "Quem se destacou?"))


def test_no_interviews_returns_fixed_message_without_llm_call():
    llm = FakeLlmClient()
    session = ChatSession({(JobOpening, 3): JOB}, [])

    answer = asyncio.run(JobChatService(llm).answer(session, 3, "Quem se destacou?"))

    assert answer == NO_INTERVIEWS_MESSAGE
    assert llm.calls == []


def test_long_transcripts_are_summarised_before_question():
    llm = FakeLlmClient("resumo curto", "A candidata Ana se destacou.")
    long_text = "fala " * 3000
    session = ChatSession(
        {(JobOpening, 3): JOB},
        [
            (_interview(long_text, candidate_name="Ana", final_review="Forte"), "Técnica"),
            (_interview("breve", manual_review="Revisado"), None),
        ],
    )
    service = JobChatService(llm, summary_threshold=500, transcript_cut=8000)

    answer = asyncio.run(service.answer(session, 3, "Quem se destacou?"))

    assert answer == "A candidata Ana se destacou."
    assert len(llm.calls) == 2
    assert len(llm.calls[0]["user_prompt"]) == 8000
    final_prompt = llm.calls[1]["user_prompt"]
    assert "Nome da vaga:\nAccount Executive" in final_prompt
    assert "Total: 2" in final_prompt
    assert "resumo curto" in final_prompt
    assert "Tipo: Técnica" in final_prompt
    assert "Revisado" in final_prompt
    assert final_prompt.rstrip().endswith("Quem se destacou?")
    assert "Desculpe, não consigo te ajudar" in llm.calls[1]["system_prompt"]
