"""Background orchestration of transcription jobs.

A submitted upload goes through these stages, strictly in order, inside one
asyncio task per job:

1. ``validation``: reject extensions outside the allow-list (upload deleted).
2. ``conversion``: ffmpeg to mono 16 kHz WAV (skipped for WAV input).
3. ``probe``: ffprobe duration, used only for metrics.
4. ``transcription``: one provider call for small files, otherwise one call
   per segment in ascending order with progress published after each.
5. ``persistence``: best-effort save of transcript + metrics to the
   interview review named by the job's correlation id.

Temporary files (upload, converted WAV, segment directory) are released on
every exit path before the job is published as finished. Failures abort the
job once; nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from app.services.media_tools import MediaToolkit
from app.telemetry import (
    JOBS_IN_FLIGHT,
    JOBS_SUBMITTED,
    SEGMENTS_TRANSCRIBED,
    observe_job_finished,
)

from .metrics import JobMetrics, Stopwatch
from .registry import (
    STATUS_CAPTIONS,
    Correlation,
    JobPhase,
    JobRegistry,
    JobSnapshot,
    segment_caption,
)

logger = logging.getLogger(__name__)
pipeline_logger = logging.getLogger("app.services.transcription_pipeline")

INVALID_FORMAT_ERROR = "Formato inválido"
PROCESSING_ERROR = "Erro ao processar áudio"
INTERRUPTED_ERROR = "Processamento interrompido"

_BYTES_PER_MB = 1024 * 1024


class Transcriber(Protocol):
    async def transcribe_file(self, path: Path, *, diarize: bool = False) -> str: ...


PersistResult = Callable[[Correlation, str, JobMetrics], Awaitable[None]]


class UnsupportedFormatError(ValueError):
    """Raised when an upload's extension is outside the allow-list."""


@dataclass
class JobArtifacts:
    """Temporary paths owned by one job until it finishes."""

    original: Path
    converted: Path | None = None
    segment_dir: Path | None = None

    def release(self) -> None:
        """Delete every tracked path; problems are logged, never raised."""

        paths = [self.original]
        if self.converted is not None and self.converted != self.original:
            paths.append(self.converted)
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                pipeline_logger.warning("Could not delete %s: %s", path, exc)

        if self.segment_dir is not None:
            try:
                shutil.rmtree(self.segment_dir)
            except FileNotFoundError:
                pass
            except OSError as exc:
                pipeline_logger.warning(
                    "Could not delete segment directory %s: %s", self.segment_dir, exc
                )


class TranscriptionOrchestrator:
    """Runs transcription jobs as detached tasks and tracks them in a registry."""

    def __init__(
        self,
        registry: JobRegistry,
        media: MediaToolkit,
        transcriber: Transcriber,
        persist_result: PersistResult | None = None,
        *,
        threshold_mb: float,
        segment_seconds: int,
        temp_root: Path | None = None,
    ) -> None:
        self._registry = registry
        self._media = media
        self._transcriber = transcriber
        self._persist_result = persist_result
        self._threshold_bytes = threshold_mb * _BYTES_PER_MB
        self._segment_seconds = segment_seconds
        self._temp_root = temp_root
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def registry(self) -> JobRegistry:
        return self._registry

    def submit(self, artifact_path: Path, correlation: Correlation) -> str:
        """Register a job and start processing it in the background.

        Must be called from within the running event loop; returns the job id
        without waiting for any conversion or transcription work.
        """

        snapshot = self._registry.create(correlation)
        JOBS_SUBMITTED.inc()
        pipeline_logger.info(
            "Job %s received file=%s review=%s",
            snapshot.id,
            correlation.original_filename or Path(artifact_path).name,
            correlation.interview_review_id,
        )

        task = asyncio.get_running_loop().create_task(
            self._run(snapshot.id, Path(artifact_path)),
            name=f"transcription-{snapshot.id}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return snapshot.id

    def get_status(self, job_id: str) -> JobSnapshot:
        """Return the latest snapshot; raises ``JobNotFoundError`` for unknown ids."""

        return self._registry.get(job_id)

    async def wait_idle(self) -> None:
        """Wait until every job submitted so far has finished."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def shutdown(self) -> None:
        """Cancel outstanding jobs (used on application shutdown)."""

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _run(self, job_id: str, upload_path: Path) -> None:
        clock = Stopwatch()
        correlation = self._registry.get(job_id).correlation
        JOBS_IN_FLIGHT.inc()
        try:
            transcript, metrics = await self._process(job_id, upload_path, correlation, clock)
            await self._persist(job_id, correlation, transcript, metrics)
        except UnsupportedFormatError:
            pipeline_logger.warning("Job %s rejected: unsupported file %s", job_id, upload_path.name)
            self._publish_failure(job_id, INVALID_FORMAT_ERROR, clock)
            return
        except asyncio.CancelledError:
            pipeline_logger.warning("Job %s cancelled", job_id)
            self._publish_failure(job_id, INTERRUPTED_ERROR, clock)
            raise
        except Exception:
            logger.exception("Transcription job %s failed", job_id)
            self._publish_failure(job_id, PROCESSING_ERROR, clock)
            return
        finally:
            JOBS_IN_FLIGHT.dec()

        self._registry.update(
            job_id,
            phase=JobPhase.COMPLETED,
            status=STATUS_CAPTIONS[JobPhase.COMPLETED],
            ready=True,
        )
        observe_job_finished(JobPhase.COMPLETED.value, clock.elapsed())
        pipeline_logger.info(
            "Job %s completed audio=%.1fs total=%.1fs",
            job_id,
            metrics.audio_duration_seconds,
            metrics.total_seconds,
        )

    async def _process(
        self,
        job_id: str,
        upload_path: Path,
        correlation: Correlation,
        clock: Stopwatch,
    ) -> tuple[str, JobMetrics]:
        artifacts = JobArtifacts(original=upload_path)
        try:
            if not self._media.is_supported(upload_path):
                raise UnsupportedFormatError(upload_path.suffix)

            artifacts.converted = self._media.converted_path(upload_path)
            conversion_clock = Stopwatch()
            converted = await self._media.transcode(upload_path)
            artifacts.converted = converted
            conversion_seconds = 0.0 if converted == upload_path else conversion_clock.elapsed()
            self._registry.update(
                job_id,
                phase=JobPhase.CONVERTED,
                status=STATUS_CAPTIONS[JobPhase.CONVERTED],
            )

            audio_duration = await self._media.probe_duration(converted)
            size_bytes = converted.stat().st_size
            pipeline_logger.info(
                "Job %s converted in %.2fs size=%.2fMB duration=%.1fs",
                job_id,
                conversion_seconds,
                size_bytes / _BYTES_PER_MB,
                audio_duration,
            )

            transcription_clock = Stopwatch()
            if size_bytes <= self._threshold_bytes:
                transcript = await self._transcribe_whole(job_id, converted, correlation)
            else:
                transcript = await self._transcribe_segments(
                    job_id, converted, correlation, artifacts
                )
            transcription_seconds = transcription_clock.elapsed()

            metrics = JobMetrics(
                audio_duration_seconds=audio_duration,
                conversion_seconds=conversion_seconds,
                transcription_seconds=transcription_seconds,
                total_seconds=clock.elapsed(),
            )
            self._registry.update(job_id, metrics=metrics)
            return transcript, metrics
        finally:
            artifacts.release()

    async def _transcribe_whole(
        self,
        job_id: str,
        audio_path: Path,
        correlation: Correlation,
    ) -> str:
        self._registry.update(
            job_id,
            phase=JobPhase.TRANSCRIBING,
            status=STATUS_CAPTIONS[JobPhase.TRANSCRIBING],
        )
        text = await self._transcriber.transcribe_file(audio_path, diarize=correlation.diarize)
        SEGMENTS_TRANSCRIBED.inc()
        self._registry.update(
            job_id,
            transcript=text,
            segments_total=1,
            segments_completed=1,
        )
        return text

    async def _transcribe_segments(
        self,
        job_id: str,
        audio_path: Path,
        correlation: Correlation,
        artifacts: JobArtifacts,
    ) -> str:
        artifacts.segment_dir = Path(
            tempfile.mkdtemp(prefix=f"segments_{job_id}_", dir=self._temp_root)
        )
        segments = await self._media.segment(
            audio_path, artifacts.segment_dir, self._segment_seconds
        )
        total = len(segments)
        self._registry.update(
            job_id,
            phase=JobPhase.TRANSCRIBING,
            status=STATUS_CAPTIONS[JobPhase.TRANSCRIBING],
            segments_total=total,
        )
        pipeline_logger.info("Job %s split into %s segments", job_id, total)

        texts: list[str] = []
        for segment in sorted(segments, key=lambda item: item.sequence_index):
            text = await self._transcriber.transcribe_file(
                segment.path, diarize=correlation.diarize
            )
            texts.append(text)
            SEGMENTS_TRANSCRIBED.inc()

            done = segment.sequence_index + 1
            self._registry.update(
                job_id,
                transcript="\n".join(texts),
                segments_completed=done,
                status=segment_caption(done, total),
            )
            pipeline_logger.info("Job %s segment %s/%s transcribed", job_id, done, total)

        return "\n".join(texts)

    async def _persist(
        self,
        job_id: str,
        correlation: Correlation,
        transcript: str,
        metrics: JobMetrics,
    ) -> None:
        if self._persist_result is None or not correlation.interview_review_id:
            return
        try:
            await self._persist_result(correlation, transcript, metrics)
        except Exception:
            # Transcript stays available through the status endpoint.
            logger.exception(
                "Could not persist transcript of job %s for review %s",
                job_id,
                correlation.interview_review_id,
            )

    def _publish_failure(self, job_id: str, message: str, clock: Stopwatch) -> None:
        current = self._registry.get(job_id)
        if current.phase.is_terminal:
            return
        self._registry.update(
            job_id,
            phase=JobPhase.FAILED,
            status=STATUS_CAPTIONS[JobPhase.FAILED],
            ready=False,
            transcript="",
            error=message,
        )
        observe_job_finished(JobPhase.FAILED.value, clock.elapsed())


__all__ = [
    "INTERRUPTED_ERROR",
    "INVALID_FORMAT_ERROR",
    "PROCESSING_ERROR",
    "JobArtifacts",
    "PersistResult",
    "Transcriber",
    "TranscriptionOrchestrator",
    "UnsupportedFormatError",
]
