"""Source motion between searches: one straight track sampled in frames."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .geometry import Point, interpolate_position
from .lens import Source
from .validate import ensure_count, ensure_finite, ensure_positive


@dataclass(frozen=True)
class SourceTrajectory:
    start: Point
    end: Point
    frames: int = 100

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", ensure_count(self.frames, "frames"))

    @classmethod
    def from_event_times(
        cls,
        start_time: float,
        end_time: float,
        *,
        peak_time: float,
        crossing_time: float,
        impact: float,
        frames: int = 100,
    ) -> "SourceTrajectory":
        """Build the track a source follows between two observation times.

        Time ``t`` maps to ``((t - peak_time) / crossing_time, impact)``, so the
        source passes closest to the lens axis at ``peak_time``.
        """

        crossing_time = ensure_positive(crossing_time, "crossing time")
        peak_time = ensure_finite(peak_time, "peak time")
        impact = ensure_finite(impact, "impact parameter")
        start = Point((ensure_finite(start_time, "start time") - peak_time) / crossing_time, impact)
        end = Point((ensure_finite(end_time, "end time") - peak_time) / crossing_time, impact)
        return cls(start, end, frames)

    def clamp(self, frame: int) -> int:
        return max(0, min(int(frame), self.frames))

    def ratio(self, frame: int) -> float:
        if self.frames == 0:
            return 0.0
        return self.clamp(frame) / float(self.frames)

    def position(self, frame: int) -> Point:
        return interpolate_position(self.start, self.end, self.ratio(frame))

    def source_at(self, source: Source, frame: int) -> Source:
        return source.moved_to(self.position(frame))

    def iter_sources(self, source: Source) -> Iterator[Tuple[int, Source]]:
        for frame in range(self.frames + 1):
            yield frame, self.source_at(source, frame)


__all__ = ["SourceTrajectory"]
