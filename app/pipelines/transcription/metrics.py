"""Timing metrics collected while a transcription job runs."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class JobMetrics:
    """Timing/efficiency record attached to a finished job."""

    audio_duration_seconds: float
    conversion_seconds: float
    transcription_seconds: float
    total_seconds: float

    @property
    def efficiency_ratio(self) -> float | None:
        """Seconds of audio processed per wall-clock second.

        ``None`` when no wall-clock time was measured; the ratio is undefined
        in that case.
        """

        if self.total_seconds <= 0:
            return None
        return self.audio_duration_seconds / self.total_seconds

    def as_dict(self) -> dict[str, Any]:
        return {
            "audioDurationSeconds": round(self.audio_duration_seconds, 3),
            "conversionSeconds": round(self.conversion_seconds, 3),
            "transcriptionSeconds": round(self.transcription_seconds, 3),
            "totalSeconds": round(self.total_seconds, 3),
            "efficiencyRatio": (
                round(self.efficiency_ratio, 3)
                if self.efficiency_ratio is not None
                else None
            ),
        }


class Stopwatch:
    """Monotonic elapsed-time helper."""

    def __init__(self) -> None:
        self._started = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self._started


__all__ = ["JobMetrics", "Stopwatch"]
