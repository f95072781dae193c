"""ffmpeg/ffprobe helpers used by the transcription pipeline.

Every external tool goes through :func:`run_command`, which takes an argument
list (never a shell string) and reports the outcome as a
:class:`CommandResult`. A missing binary or a non-zero exit status is data the
caller inspects, not an exception raised from deep inside ``subprocess``.
"""

from __future__ import annotations

import logging
import math
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Sequence

from fastapi.concurrency import run_in_threadpool

from app.config.settings import MediaConfig

logger = logging.getLogger(__name__)

_PART_NAME = re.compile(r"part_(\d+)")


class MediaToolError(RuntimeError):
    """Raised when ffmpeg fails to convert or split an audio artifact."""


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one external tool invocation."""

    args: tuple[str, ...]
    returncode: int | None
    stdout: str = ""
    stderr: str = ""
    missing: bool = False

    @property
    def ok(self) -> bool:
        return not self.missing and self.returncode == 0

    def describe(self) -> str:
        """Short human-readable failure description for logs and errors."""

        tool = self.args[0] if self.args else "<empty>"
        if self.missing:
            return f"{tool} not found"
        if self.returncode is None:
            return f"{tool} could not be started: {self.stderr.strip()}"
        detail = self.stderr.strip().splitlines()[-1:] or ["no stderr"]
        return f"{tool} exited with status {self.returncode}: {detail[0]}"


CommandRunner = Callable[[Sequence[str]], Awaitable[CommandResult]]


def _run_sync(args: tuple[str, ...]) -> CommandResult:
    try:
        completed = subprocess.run(
            list(args),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except FileNotFoundError:
        return CommandResult(args=args, returncode=None, missing=True)
    except OSError as exc:
        return CommandResult(args=args, returncode=None, stderr=str(exc))

    return CommandResult(
        args=args,
        returncode=completed.returncode,
        stdout=completed.stdout.decode("utf-8", errors="replace"),
        stderr=completed.stderr.decode("utf-8", errors="replace"),
    )


async def run_command(args: Sequence[str]) -> CommandResult:
    """Run an external tool in a worker thread so the event loop stays free."""

    return await run_in_threadpool(_run_sync, tuple(str(arg) for arg in args))


@dataclass(frozen=True)
class Segment:
    """One bounded-duration slice of the converted audio."""

    sequence_index: int
    path: Path


class MediaToolkit:
    """Probe, convert and split audio files with ffmpeg."""

    def __init__(
        self,
        *,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        sample_rate: int = 16000,
        channels: int = 1,
        canonical_extension: str = ".wav",
        allowed_extensions: Iterable[str] = (".webm", ".wav"),
        runner: CommandRunner = run_command,
    ) -> None:
        self._ffmpeg = ffmpeg_binary
        self._ffprobe = ffprobe_binary
        self._sample_rate = sample_rate
        self._channels = channels
        self._canonical_extension = _normalise_extension(canonical_extension)
        self._allowed_extensions = frozenset(
            _normalise_extension(ext) for ext in allowed_extensions
        )
        self._runner = runner

    @classmethod
    def from_settings(
        cls,
        config: MediaConfig,
        *,
        runner: CommandRunner = run_command,
    ) -> "MediaToolkit":
        return cls(
            ffmpeg_binary=config.ffmpeg_binary,
            ffprobe_binary=config.ffprobe_binary,
            sample_rate=config.sample_rate,
            channels=config.channels,
            canonical_extension=config.canonical_extension,
            allowed_extensions=config.allowed_extensions,
            runner=runner,
        )

    @property
    def allowed_extensions(self) -> frozenset[str]:
        return self._allowed_extensions

    def is_supported(self, path: Path) -> bool:
        return path.suffix.lower() in self._allowed_extensions

    def is_canonical(self, path: Path) -> bool:
        return path.suffix.lower() == self._canonical_extension

    def converted_path(self, path: Path) -> Path:
        return path.with_suffix(self._canonical_extension)

    async def probe_duration(self, path: Path) -> float:
        """Return the media duration in seconds, or 0.0 when it cannot be read.

        Duration only feeds the efficiency metrics, so any failure degrades to
        zero instead of failing the job.
        """

        result = await self._runner(
            [
                self._ffprobe,
                "-v",
                "error",
                "-show_entries",
                "format=duration",
                "-of",
                "default=noprint_wrappers=1:nokey=1",
                str(path),
            ]
        )
        if not result.ok:
            logger.warning("Could not probe %s: %s", path, result.describe())
            return 0.0

        try:
            duration = float(result.stdout.strip())
        except ValueError:
            logger.warning("Unparsable ffprobe duration for %s: %r", path, result.stdout)
            return 0.0

        if math.isnan(duration) or math.isinf(duration) or duration < 0:
            return 0.0
        return duration

    async def transcode(self, path: Path) -> Path:
        """Convert ``path`` to mono PCM WAV at the canonical sample rate.

        Files already in the canonical container are passed through untouched
        and the same path is returned.
        """

        if self.is_canonical(path):
            return path

        output_path = self.converted_path(path)
        result = await self._runner(
            [
                self._ffmpeg,
                "-y",
                "-i",
                str(path),
                "-ar",
                str(self._sample_rate),
                "-ac",
                str(self._channels),
                "-f",
                "wav",
                str(output_path),
            ]
        )
        if not result.ok:
            logger.error("ffmpeg conversion failed for %s: %s", path, result.stderr)
            raise MediaToolError(f"Audio conversion failed: {result.describe()}")
        return output_path

    async def segment(self, path: Path, directory: Path, seconds: int) -> list[Segment]:
        """Split ``path`` into ``seconds``-long parts inside ``directory``.

        Parts are returned in playback order, ranked by the number the ffmpeg
        segment muxer writes into each file name (it grows past three digits).
        """

        pattern = directory / f"part_%03d{self._canonical_extension}"
        result = await self._runner(
            [
                self._ffmpeg,
                "-i",
                str(path),
                "-f",
                "segment",
                "-segment_time",
                str(seconds),
                "-c",
                "copy",
                str(pattern),
            ]
        )
        if not result.ok:
            logger.error("ffmpeg segmentation failed for %s: %s", path, result.stderr)
            raise MediaToolError(f"Audio segmentation failed: {result.describe()}")

        numbered: list[tuple[int, Path]] = []
        for entry in directory.iterdir():
            if not entry.is_file() or entry.suffix.lower() != self._canonical_extension:
                continue
            match = _PART_NAME.fullmatch(entry.stem)
            if match is None:
                logger.warning("Ignoring unexpected file in segment directory: %s", entry.name)
                continue
            numbered.append((int(match.group(1)), entry))
        parts = [entry for _, entry in sorted(numbered)]
        if not parts:
            raise MediaToolError("Audio segmentation produced no parts.")

        return [Segment(sequence_index=index, path=part) for index, part in enumerate(parts)]


def _normalise_extension(extension: str) -> str:
    cleaned = extension.strip().lower()
    return cleaned if cleaned.startswith(".") else f".{cleaned}"


__all__ = [
    "CommandResult",
    "CommandRunner",
    "MediaToolError",
    "MediaToolkit",
    "Segment",
    "run_command",
]
