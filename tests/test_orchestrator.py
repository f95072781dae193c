"""State-machine tests for the transcription orchestrator."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from app.pipelines.transcription import (
    INVALID_FORMAT_ERROR,
    PROCESSING_ERROR,
    Correlation,
    JobNotFoundError,
    JobPhase,
    JobRegistry,
    TranscriptionOrchestrator,
)
from conftest import FakeCommandRunner, FakeTranscriber, make_toolkit

# Converted files above 1 KiB take the segmented path in these tests.
THRESHOLD_MB = 1 / 1024


def _orchestrator(runner, transcriber, temp_root, persist=None, registry=None):
    return TranscriptionOrchestrator(
        registry if registry is not None else JobRegistry(),
        make_toolkit(runner),
        transcriber,
        persist,
        threshold_mb=THRESHOLD_MB,
        segment_seconds=480,
        temp_root=temp_root,
    )


def _run_job(orchestrator, upload: Path, correlation: Correlation | None = None):
    async def scenario():
        job_id = orchestrator.submit(upload, correlation or Correlation(interview_review_id="r-1"))
        assert orchestrator.get_status(job_id).phase is JobPhase.RECEIVED
        await orchestrator.wait_idle()
        return orchestrator.get_status(job_id)

    return asyncio.run(scenario())


def _leftovers(*directories: Path) -> list[Path]:
    return [entry for directory in directories for entry in directory.iterdir()]


def test_small_file_uses_single_transcription_call(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "curta.webm"
    upload.write_bytes(b"webm-bytes")
    runner = FakeCommandRunner(duration="180", converted_size=512)
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.COMPLETED
    assert snapshot.status == "Concluído"
    assert snapshot.ready is True
    assert snapshot.transcript == "texto 1"
    assert snapshot.segments_total == snapshot.segments_completed == 1
    assert transcriber.paths == [uploads / "curta.wav"]
    assert runner.calls_of("segment") == []
    assert snapshot.metrics.audio_duration_seconds == 180.0
    assert snapshot.error is None
    assert _leftovers(uploads, temp_root) == []


def test_large_file_is_transcribed_segment_by_segment(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "longa.mp3"
    upload.write_bytes(b"mp3-bytes")
    runner = FakeCommandRunner(duration="2400", converted_size=4096, segment_count=5)
    registry = JobRegistry()
    progress: list[tuple[int, int, str]] = []

    def record_progress(call_number: int, path: Path) -> None:
        snapshot = next(iter(registry))
        progress.append((call_number, snapshot.segments_completed, snapshot.status))
        assert snapshot.segments_total == 5
        assert path.exists()

    transcriber = FakeTranscriber(on_call=record_progress)
    orchestrator = _orchestrator(runner, transcriber, temp_root, registry=registry)

    snapshot = _run_job(orchestrator, upload)

    assert snapshot.phase is JobPhase.COMPLETED
    assert snapshot.segments_total == snapshot.segments_completed == 5
    assert snapshot.transcript == "\n".join(f"texto {i}" for i in range(1, 6))
    assert [path.name for path in transcriber.paths] == [f"part_{i:03d}.wav" for i in range(5)]
    # Progress before call n reflects exactly n - 1 finished segments.
    assert [done for _, done, _ in progress] == [0, 1, 2, 3, 4]
    assert progress[2][2] == "Transcrevendo parte 2/5"
    assert _leftovers(uploads, temp_root) == []


def test_unsupported_extension_fails_without_running_tools(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "planilha.xlsx"
    upload.write_bytes(b"not audio")
    runner = FakeCommandRunner()
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.FAILED
    assert snapshot.status == "Falhou"
    assert snapshot.error == INVALID_FORMAT_ERROR
    assert snapshot.ready is False
    assert runner.calls == []
    assert transcriber.paths == []
    assert not upload.exists()


def test_failure_mid_segments_discards_transcript_and_cleans_up(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "longa.ogg"
    upload.write_bytes(b"ogg-bytes")
    runner = FakeCommandRunner(converted_size=4096, segment_count=4)
    transcriber = FakeTranscriber(fail_on_call=3)
    persisted = []

    async def persist(correlation, transcript, metrics):
        persisted.append(transcript)

    snapshot = _run_job(
        _orchestrator(runner, transcriber, temp_root, persist=persist),
        upload,
    )

    assert snapshot.phase is JobPhase.FAILED
    assert snapshot.error == PROCESSING_ERROR
    assert snapshot.transcript == ""
    assert snapshot.ready is False
    assert snapshot.as_status()["transcript"] is None
    assert len(transcriber.paths) == 3
    assert persisted == []
    assert _leftovers(uploads, temp_root) == []


def test_conversion_failure_marks_job_failed(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "quebrada.m4a"
    upload.write_bytes(b"m4a")
    runner = FakeCommandRunner(fail_tools=("transcode",))
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.FAILED
    assert snapshot.error == PROCESSING_ERROR
    assert transcriber.paths == []
    assert _leftovers(uploads, temp_root) == []


def test_wav_upload_skips_conversion(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "pronta.wav"
    upload.write_bytes(b"\0" * 100)
    runner = FakeCommandRunner()
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.COMPLETED
    assert runner.calls_of("transcode") == []
    assert snapshot.metrics.conversion_seconds == 0.0
    assert transcriber.paths == [upload]
    assert not upload.exists()


def test_result_is_persisted_with_correlation(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "curta.webm"
    upload.write_bytes(b"webm")
    persisted = []

    async def persist(correlation, transcript, metrics):
        persisted.append((correlation.interview_review_id, transcript, metrics))

    snapshot = _run_job(
        _orchestrator(FakeCommandRunner(), FakeTranscriber(), temp_root, persist=persist),
        upload,
        Correlation(interview_review_id="review-42", diarize=True),
    )

    assert snapshot.phase is JobPhase.COMPLETED
    assert persisted == [("review-42", "texto 1", snapshot.metrics)]


def test_persistence_failure_does_not_fail_job(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "curta.webm"
    upload.write_bytes(b"webm")

    async def broken_persist(correlation, transcript, metrics):
        raise RuntimeError("database down")

    snapshot = _run_job(
        _orchestrator(FakeCommandRunner(), FakeTranscriber(), temp_root, persist=broken_persist),
        upload,
    )

    assert snapshot.phase is JobPhase.COMPLETED
    assert snapshot.ready is True
    assert snapshot.transcript == "texto 1"


def test_diarization_flag_reaches_transcriber(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "curta.webm"
    upload.write_bytes(b"webm")
    transcriber = FakeTranscriber()

    _run_job(
        _orchestrator(FakeCommandRunner(), transcriber, temp_root),
        upload,
        Correlation(interview_review_id="r", diarize=True),
    )

    assert transcriber.diarize_flags == [True]


def test_get_status_of_unknown_job_raises(media_dirs):
    _, temp_root = media_dirs
    orchestrator = _orchestrator(FakeCommandRunner(), FakeTranscriber(), temp_root)

    with pytest.raises(JobNotFoundError):
        orchestrator.get_status("nope")


def test_segmenter_failure_still_removes_segment_directory(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "longa.mp3"
    upload.write_bytes(b"mp3-bytes")
    runner = FakeCommandRunner(converted_size=4096, fail_tools=("segment",))
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.FAILED
    assert snapshot.error == PROCESSING_ERROR
    assert len(runner.calls_of("segment")) == 1
    assert transcriber.paths == []
    assert _leftovers(uploads, temp_root) == []


def test_file_exactly_at_threshold_uses_single_call(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "limite.webm"
    upload.write_bytes(b"webm")
    runner = FakeCommandRunner(converted_size=1024, segment_count=3)
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.COMPLETED
    assert runner.calls_of("segment") == []
    assert transcriber.paths == [uploads / "limite.wav"]
    assert snapshot.segments_total == 1


def test_probe_failure_completes_with_zero_duration(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "curta.webm"
    upload.write_bytes(b"webm")
    runner = FakeCommandRunner(converted_size=512, fail_tools=("probe",))

    snapshot = _run_job(_orchestrator(runner, FakeTranscriber(), temp_root), upload)

    assert snapshot.phase is JobPhase.COMPLETED
    assert snapshot.transcript == "texto 1"
    assert snapshot.metrics.audio_duration_seconds == 0.0
    assert snapshot.metrics.total_seconds > 0
    assert snapshot.metrics.efficiency_ratio == 0.0
    assert snapshot.metrics.as_dict()["efficiencyRatio"] == 0.0


def test_segments_past_999_are_transcribed_in_order(media_dirs):
    uploads, temp_root = media_dirs
    upload = uploads / "maratona.mp3"
    upload.write_bytes(b"mp3-bytes")
    runner = FakeCommandRunner(converted_size=4096, segment_count=1002)
    transcriber = FakeTranscriber()

    snapshot = _run_job(_orchestrator(runner, transcriber, temp_root), upload)

    assert snapshot.phase is JobPhase.COMPLETED
    names = [path.name for path in transcriber.paths]
    assert names[100:102] == ["part_100.wav", "part_101.wav"]
    assert names[-2:] == ["part_1000.wav", "part_1001.wav"]
    assert snapshot.segments_completed == 1002
    assert snapshot.transcript.splitlines()[-1] == "texto 1002"
