"""Tests for the review generator."""

from __future__ import annotations

import asyncio

import pytest

from app.services.llm_client import LlmInvocationError
from app.services.review import FALLBACK_REVIEW, ReviewGenerationError, ReviewGenerator
from app.services.review_prompt import ReviewContext
from conftest import FakeLlmClient


def test_generate_returns_trimmed_text_from_single_call():
    llm = FakeLlmClient("  **Parecer:** candidata sólida  \n")
    generator = ReviewGenerator(llm, max_strengths=4, max_concerns=2)

    review = asyncio.run(generator.generate(ReviewContext(transcript="Olá")))

    assert review == "**Parecer:** candidata sólida"
    assert len(llm.calls) == 1
    assert "no máximo 4 pontos fortes" in llm.calls[0]["user_prompt"]


@pytest.mark.parametrize("response", [None, "", "   \n"])
def test_generate_falls_back_on_empty_response(response):
    generator = ReviewGenerator(FakeLlmClient(response))

    assert asyncio.run(generator.generate(ReviewContext(transcript="Olá"))) == FALLBACK_REVIEW


def test_generate_propagates_provider_failure():
    generator = ReviewGenerator(FakeLlmClient(LlmInvocationError("throttled")))

    with pytest.raises(LlmInvocationError):
        asyncio.run(generator.generate(ReviewContext(transcript="Olá")))


def test_generate_rejects_blank_transcript():
    llm = FakeLlmClient()

    with pytest.raises(ReviewGenerationError):
        asyncio.run(ReviewGenerator(llm).generate(ReviewContext(transcript="  ")))
    assert llm.calls == []
