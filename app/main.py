"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import settings
from .controllers import (
    interview_reviews,
    interview_types,
    job_openings,
    review,
    transcription,
)
from .database import dispose_engine, init_models
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware
from .pipelines.transcription import JobRegistry, TranscriptionOrchestrator
from .pipelines.transcription.persistence import save_transcription_result
from .services.job_chat import JobChatService
from .services.llm_client import BedrockLlmClient
from .services.media_tools import MediaToolkit
from .services.review import ReviewGenerator
from .services.transcribe import TranscribeService

PIPELINE_LOGGER_NAME = "app.services.transcription_pipeline"


def _configure_logging() -> None:
    """Ensure structured middleware logs stream to stdout and file."""

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    middleware_logger = logging.getLogger("app.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(logging.INFO)
    middleware_logger.propagate = False

    # Job transitions also go to their own file; records still reach the root handlers.
    pipeline_log_path = Path(settings.pipeline_log_file)
    pipeline_log_path.parent.mkdir(parents=True, exist_ok=True)
    pipeline_handler = RotatingFileHandler(
        pipeline_log_path,
        maxBytes=500_000,
        backupCount=5,
        encoding="utf-8",
    )
    pipeline_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
    )
    pipeline_logger = logging.getLogger(PIPELINE_LOGGER_NAME)
    pipeline_logger.handlers.clear()
    pipeline_logger.addHandler(pipeline_handler)
    pipeline_logger.setLevel(logging.INFO)

    noisy_loggers = [
        "botocore",
        "boto3",
        "urllib3",
        "sqlalchemy.engine",
        "awscrt",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_services(app: FastAPI) -> None:
    """Attach the job registry, orchestrator and LLM-backed services to app state."""

    upload_dir = Path(settings.media.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    temp_root = Path(settings.media.temp_dir) if settings.media.temp_dir else None
    if temp_root is not None:
        temp_root.mkdir(parents=True, exist_ok=True)

    registry = JobRegistry()
    orchestrator = TranscriptionOrchestrator(
        registry,
        MediaToolkit.from_settings(settings.media),
        TranscribeService.from_settings(settings.transcribe),
        save_transcription_result,
        threshold_mb=settings.media.segment_threshold_mb,
        segment_seconds=settings.media.segment_seconds,
        temp_root=temp_root,
    )

    llm_client = BedrockLlmClient(settings.bedrock)
    app.state.upload_dir = upload_dir
    app.state.job_registry = registry
    app.state.orchestrator = orchestrator
    app.state.review_generator = ReviewGenerator(
        llm_client,
        max_strengths=settings.review.max_strengths,
        max_concerns=settings.review.max_concerns,
        max_development=settings.review.max_development,
        max_tokens=settings.review.max_tokens,
        temperature=settings.review.temperature,
    )
    app.state.job_chat = JobChatService(
        llm_client,
        interview_limit=settings.review.chat_interview_limit,
        summary_threshold=settings.review.chat_summary_threshold,
        transcript_cut=settings.review.chat_transcript_cut,
        temperature=settings.review.chat_temperature,
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Interview transcription and review backend API",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    _build_services(app)

    app.include_router(transcription.router)
    app.include_router(review.router)
    app.include_router(job_openings.router)
    app.include_router(interview_types.router)
    app.include_router(interview_types.competency_router)
    app.include_router(interview_reviews.router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Root endpoint."""

        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "operational",
        }

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, object]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "activeJobs": app.state.job_registry.active_count(),
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logging.getLogger(__name__).exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        await init_models()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await app.state.orchestrator.shutdown()
        await dispose_engine()

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
