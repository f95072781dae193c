"""Service layer helpers for external integrations."""

from .job_chat import JobChatService, JobOpeningNotFoundError
from .llm_client import BedrockLlmClient, LlmInvocationError
from .media_tools import (
    CommandResult,
    MediaToolError,
    MediaToolkit,
    Segment,
    run_command,
)
from .review import FALLBACK_REVIEW, ReviewGenerationError, ReviewGenerator
from .review_prompt import (
    COMPETENCY_LEVELS,
    INSUFFICIENT_EVIDENCE,
    CompetencyRubric,
    EvaluationMode,
    PromptBundle,
    ReviewContext,
    build_review_prompt,
)
from .transcribe import TranscribeService, TranscriptionError

__all__ = [
    "BedrockLlmClient",
    "COMPETENCY_LEVELS",
    "CommandResult",
    "CompetencyRubric",
    "EvaluationMode",
    "FALLBACK_REVIEW",
    "INSUFFICIENT_EVIDENCE",
    "JobChatService",
    "JobOpeningNotFoundError",
    "LlmInvocationError",
    "MediaToolError",
    "MediaToolkit",
    "PromptBundle",
    "ReviewContext",
    "ReviewGenerationError",
    "ReviewGenerator",
    "Segment",
    "TranscribeService",
    "TranscriptionError",
    "build_review_prompt",
    "run_command",
]
