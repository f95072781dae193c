"""Interview review generation backed by Bedrock."""

from __future__ import annotations

import logging

from app.services.llm_client import BedrockLlmClient
from app.services.review_prompt import ReviewContext, build_review_prompt

logger = logging.getLogger(__name__)

FALLBACK_REVIEW = "Não foi possível gerar o parecer."


class ReviewGenerationError(RuntimeError):
    """Raised when a review cannot be requested from the given context."""


class ReviewGenerator:
    """Turn an interview context into recruiter-facing review text."""

    def __init__(
        self,
        llm_client: BedrockLlmClient,
        *,
        max_strengths: int = 5,
        max_concerns: int = 5,
        max_development: int = 3,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> None:
        self._llm = llm_client
        self._max_strengths = max_strengths
        self._max_concerns = max_concerns
        self._max_development = max_development
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def generate(self, context: ReviewContext) -> str:
        """Make one provider call and return the trimmed review.

        An empty response yields :data:`FALLBACK_REVIEW`; provider failures
        propagate as ``LlmInvocationError``.
        """

        if not context.transcript or not context.transcript.strip():
            raise ReviewGenerationError("Transcript is required to generate a review.")

        bundle = build_review_prompt(
            context,
            max_strengths=self._max_strengths,
            max_concerns=self._max_concerns,
            max_development=self._max_development,
        )
        logger.info(
            "Requesting review mode=%s competencies=%s prompt_chars=%s",
            bundle.mode.value,
            len(context.competencies),
            len(bundle.user_prompt),
        )

        text = await self._llm.invoke(
            system_prompt=bundle.system_prompt,
            user_prompt=bundle.user_prompt,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        review = (text or "").strip()
        if not review:
            logger.warning("Bedrock returned an empty review; using fallback text")
            return FALLBACK_REVIEW
        return review


__all__ = ["FALLBACK_REVIEW", "ReviewGenerationError", "ReviewGenerator"]
