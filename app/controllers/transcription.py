"""Audio upload and transcription job polling endpoints.

`POST /upload` only stores the recording and registers a job; conversion,
segmentation and transcription happen in the background
(see `app.pipelines.transcription.orchestrator`). Clients poll
`GET /status/{job_id}` until `ready` is true or `error` is set.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from app.controllers.dependencies import JobRegistryDep, OrchestratorDep
from app.pipelines.transcription import Correlation, JobNotFoundError
from app.views import ErrorResponse, JobStatusResponse, UploadResponse

router = APIRouter(tags=["transcription"])

logger = logging.getLogger(__name__)

_AUDIO_FILE_UPLOAD = File(None)
_REVIEW_ID_FORM = Form(None)
_DIARIZATION_FORM = Form(False)


def _store_upload(source: BinaryIO, destination: Path) -> int:
    destination.parent.mkdir(parents=True, exist_ok=True)
    with destination.open("wb") as target:
        shutil.copyfileobj(source, target)
    return destination.stat().st_size


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={400: {"model": ErrorResponse}},
)
async def upload_audio(
    request: Request,
    orchestrator: OrchestratorDep,
    audio: Optional[UploadFile] = _AUDIO_FILE_UPLOAD,
    interview_review_id: Optional[str] = _REVIEW_ID_FORM,
    diarization: bool = _DIARIZATION_FORM,
) -> UploadResponse:
    """Accept a recording and start transcribing it in the background."""

    if audio is None or not audio.filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nenhum arquivo enviado",
        )
    review_id = (interview_review_id or "").strip()
    if not review_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="interview_review_id é obrigatório",
        )
    try:
        uuid.UUID(review_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="interview_review_id inválido",
        ) from None

    # Unique stored name; the original extension is kept for format validation.
    suffix = Path(audio.filename).suffix.lower()
    destination = Path(request.app.state.upload_dir) / f"{uuid.uuid4().hex}{suffix}"
    try:
        size = await run_in_threadpool(_store_upload, audio.file, destination)
    finally:
        await audio.close()

    if size == 0:
        destination.unlink(missing_ok=True)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Arquivo de áudio vazio",
        )

    job_id = orchestrator.submit(
        destination,
        Correlation(
            interview_review_id=review_id,
            diarize=diarization,
            original_filename=audio.filename,
        ),
    )
    logger.info("Upload %s (%s bytes) queued as job %s", audio.filename, size, job_id)
    return UploadResponse(id=job_id)


@router.get(
    "/status/{job_id}",
    response_model=JobStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_job_status(job_id: str, registry: JobRegistryDep) -> JobStatusResponse:
    """Return the last published state of a transcription job."""

    try:
        snapshot = registry.get(job_id)
    except JobNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Job não encontrado",
        ) from None
    return JobStatusResponse.model_validate(snapshot.as_status())
