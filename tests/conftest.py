"""Shared fakes for ffmpeg, Transcribe, Bedrock and the database session."""

from __future__ import annotations

from pathlib import Path
import re
import sys
from typing import Any, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from app.services.media_tools import CommandResult, MediaToolkit  # noqa: E402
from app.services.transcribe import TranscriptionError  # noqa: E402


class FakeCommandRunner:
    """Stands in for ffmpeg/ffprobe by writing the files they would produce."""

    def __init__(
        self,
        *,
        duration: str = "180.0",
        converted_size: int = 1024,
        segment_count: int = 1,
        fail_tools: Sequence[str] = (),
    ) -> None:
        self.duration = duration
        self.converted_size = converted_size
        self.segment_count = segment_count
        self.fail_tools = set(fail_tools)
        self.calls: list[tuple[str, ...]] = []

    def kind(self, args: Sequence[str]) -> str:
        if args[0] == "ffprobe":
            return "probe"
        if "segment" in args:
            return "segment"
        return "transcode"

    def calls_of(self, kind: str) -> list[tuple[str, ...]]:
        return [call for call in self.calls if self.kind(call) == kind]

    async def __call__(self, args: Sequence[str]) -> CommandResult:
        args = tuple(str(arg) for arg in args)
        self.calls.append(args)
        kind = self.kind(args)
        if kind in self.fail_tools:
            return CommandResult(args=args, returncode=1, stderr="boom\nInvalid data found")

        if kind == "probe":
            return CommandResult(args=args, returncode=0, stdout=f"{self.duration}\n")
        if kind == "transcode":
            Path(args[-1]).write_bytes(b"\0" * self.converted_size)
            return CommandResult(args=args, returncode=0)

        pattern = args[-1]
        for index in range(self.segment_count):
            Path(re.sub(r"%03d", f"{index:03d}", pattern)).write_bytes(b"\0" * 16)
        return CommandResult(args=args, returncode=0)


class FakeTranscriber:
    """Returns one text per call and remembers the order of files it saw."""

    def __init__(self, *, fail_on_call: int | None = None, on_call=None) -> None:
        self.fail_on_call = fail_on_call
        self.on_call = on_call
        self.paths: list[Path] = []
        self.diarize_flags: list[bool] = []

    async def transcribe_file(self, path: Path, *, diarize: bool = False) -> str:
        self.paths.append(Path(path))
        self.diarize_flags.append(diarize)
        if self.on_call is not None:
            self.on_call(len(self.paths), Path(path))
        if self.fail_on_call is not None and len(self.paths) == self.fail_on_call:
            raise TranscriptionError("provider unavailable")
        return f"texto {len(self.paths)}"


class FakeLlmClient:
    """Bedrock stand-in returning queued responses and recording prompts."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    async def invoke(self, **kwargs: Any) -> str | None:
        self.calls.append(kwargs)
        response = self.responses.pop(0) if self.responses else "resposta"
        if isinstance(response, Exception):
            raise response
        return response


class FakeSession:
    """Minimal AsyncSession double keyed by (model, primary key)."""

    def __init__(self, rows: dict[tuple[type, Any], Any] | None = None) -> None:
        self.rows = dict(rows or {})
        self.added: list[Any] = []
        self.commits = 0
        self.rollbacks = 0
        self.fail_commit: Exception | None = None

    async def get(self, model: type, key: Any) -> Any:
        return self.rows.get((model, key))

    def add(self, instance: Any) -> None:
        self.added.append(instance)

    async def commit(self) -> None:
        if self.fail_commit is not None:
            raise self.fail_commit
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


@pytest.fixture
def media_dirs(tmp_path: Path) -> tuple[Path, Path]:
    uploads = tmp_path / "uploads"
    temp_root = tmp_path / "tmp"
    uploads.mkdir()
    temp_root.mkdir()
    return uploads, temp_root


def make_toolkit(runner: FakeCommandRunner) -> MediaToolkit:
    return MediaToolkit(
        allowed_extensions=(".webm", ".wav", ".mp3", ".m4a", ".ogg"),
        runner=runner,
    )
