"""Amazon Transcribe integration helpers using Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import wave
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from app.config.settings import TranscribeConfig

logger = logging.getLogger(__name__)

# Sample rates accepted by the streaming API for PCM input.
MIN_SAMPLE_RATE_HZ = 8000
MAX_SAMPLE_RATE_HZ = 48000


class TranscriptionError(RuntimeError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


@dataclass(frozen=True)
class PcmAudio:
    """Raw 16-bit PCM frames read from a WAV file."""

    frames: bytes
    sample_rate: int
    channels: int


def read_pcm(path: Path) -> PcmAudio:
    """Read the PCM payload of a WAV file (header stripped)."""

    with wave.open(str(path), "rb") as wav_file:
        if wav_file.getsampwidth() != 2:
            raise TranscriptionError(
                f"Expected 16-bit PCM audio, got {wav_file.getsampwidth() * 8}-bit."
            )
        return PcmAudio(
            frames=wav_file.readframes(wav_file.getnframes()),
            sample_rate=wav_file.getframerate(),
            channels=wav_file.getnchannels(),
        )


class TranscribeService:
    """High-level facade for streaming audio files to Amazon Transcribe."""

    def __init__(
        self,
        region: str,
        language_code: str = "pt-BR",
        chunk_size: int = 8192,
        stream_speedup: float = 1.0,
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._chunk_size = chunk_size
        self._stream_speedup = stream_speedup
        self._client: TranscribeStreamingClient | None = None

    @classmethod
    def from_settings(cls, config: TranscribeConfig) -> "TranscribeService":
        # Ensure credentials are available to the SDK
        if config.access_key:
            os.environ["AWS_ACCESS_KEY_ID"] = config.access_key
        if config.secret_key:
            os.environ["AWS_SECRET_ACCESS_KEY"] = config.secret_key

        return cls(
            region=config.region,
            language_code=config.language_code,
            chunk_size=config.chunk_size,
            stream_speedup=config.stream_speedup,
        )

    @property
    def language_code(self) -> str:
        return self._language_code

    def _get_client(self) -> TranscribeStreamingClient:
        if self._client is None:
            self._client = TranscribeStreamingClient(region=self._region)
        return self._client

    async def transcribe_file(self, path: Path, *, diarize: bool = False) -> str:
        """Stream one WAV file to Transcribe and return its final transcript.

        Provider errors surface as :class:`TranscriptionError`; callers decide
        whether that aborts their work.
        """

        try:
            audio = await run_in_threadpool(read_pcm, path)
        except (OSError, EOFError, wave.Error) as exc:
            raise TranscriptionError(f"Could not read audio {path.name}: {exc}") from exc

        if not audio.frames:
            raise TranscriptionError(f"Audio file {path.name} is empty.")
        if not MIN_SAMPLE_RATE_HZ <= audio.sample_rate <= MAX_SAMPLE_RATE_HZ:
            raise TranscriptionError(
                f"Unsupported sample rate {audio.sample_rate} Hz in {path.name}; "
                f"expected {MIN_SAMPLE_RATE_HZ}-{MAX_SAMPLE_RATE_HZ} Hz."
            )

        stream_options: dict[str, Any] = {
            "language_code": self._language_code,
            "media_sample_rate_hz": audio.sample_rate,
            "media_encoding": "pcm",
        }
        if audio.channels > 1:
            # Speaker labels cannot be combined with channel identification.
            stream_options["enable_channel_identification"] = True
            stream_options["number_of_channels"] = audio.channels
            if diarize:
                logger.info("Ignoring speaker labels for %s-channel %s", audio.channels, path.name)
            diarize = False
        else:
            stream_options["show_speaker_label"] = diarize

        try:
            stream = await self._get_client().start_stream_transcription(**stream_options)
        except Exception as exc:
            raise TranscriptionError(f"Could not start transcription stream: {exc}") from exc

        handler = _TranscriptCollector(stream.output_stream, diarize=diarize)

        async def write_chunks() -> None:
            chunk_size = self._chunk_size
            bytes_per_sec = audio.sample_rate * audio.channels * 2  # 16-bit = 2 bytes
            sleep_time = chunk_size / bytes_per_sec / self._stream_speedup

            logger.info(
                "Streaming %s: %s bytes, chunk=%s, sleep=%.4fs",
                path.name,
                len(audio.frames),
                chunk_size,
                sleep_time,
            )
            for offset in range(0, len(audio.frames), chunk_size):
                chunk = audio.frames[offset : offset + chunk_size]
                await stream.input_stream.send_audio_event(audio_chunk=chunk)
                # Pace the stream close to real time.
                await asyncio.sleep(sleep_time)

            await stream.input_stream.end_stream()

        try:
            await asyncio.gather(write_chunks(), handler.handle_events())
        except Exception as exc:
            logger.error("Streaming loop failed for %s: %s", path.name, exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        text = handler.text()
        logger.info("Transcription of %s complete. Length: %s", path.name, len(text))
        return text


class _TranscriptCollector(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream, *, diarize: bool = False):
        super().__init__(transcript_result_stream)
        self._diarize = diarize
        self._fragments: list[str] = []
        self._speaker_lines: list[tuple[str, list[str]]] = []

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if result.is_partial or not result.alternatives:
                continue
            alternative = result.alternatives[0]
            if self._diarize and alternative.items:
                self._add_speaker_items(alternative.items)
            elif alternative.transcript:
                self._fragments.append(alternative.transcript.strip())

    def _add_speaker_items(self, items) -> None:
        for item in items:
            content = (item.content or "").strip()
            if not content:
                continue
            if item.item_type == "punctuation":
                if self._speaker_lines:
                    words = self._speaker_lines[-1][1]
                    if words:
                        words[-1] += content
                continue
            speaker = item.speaker or "?"
            if not self._speaker_lines or self._speaker_lines[-1][0] != speaker:
                self._speaker_lines.append((speaker, []))
            self._speaker_lines[-1][1].append(content)

    def text(self) -> str:
        if self._diarize and self._speaker_lines:
            return "\n".join(
                f"spk_{speaker}: {' '.join(words)}" for speaker, words in self._speaker_lines
            )
        return " ".join(fragment for fragment in self._fragments if fragment)


__all__ = ["PcmAudio", "TranscribeService", "TranscriptionError", "read_pcm"]
