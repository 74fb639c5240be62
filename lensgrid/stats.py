"""Per-depth area and cost counters filled in by the search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np

from .validate import ValidationError

DEFAULT_LEVEL_CAPACITY = 1000


@dataclass(frozen=True, eq=False)
class LevelStatsSnapshot:
    """Read-only copy of the counters taken after a search completes."""

    area: np.ndarray
    calls: np.ndarray

    def levels(self) -> Iterator[Tuple[int, float, int]]:
        """Yield ``(level, area, calls)`` for every depth that recorded something."""

        active = np.flatnonzero((self.area != 0) | (self.calls != 0))
        for level in active:
            yield int(level), float(self.area[level]), int(self.calls[level])

    @property
    def total_area(self) -> float:
        return float(self.area.sum())

    @property
    def total_calls(self) -> int:
        return int(self.calls.sum())


class LevelStats:
    """Mutable accumulator owned by one search invocation (or one worker).

    Not synchronised: concurrent searches need one instance each, merged with
    :meth:`merge` once every subtree has finished.
    """

    def __init__(self, capacity: int = DEFAULT_LEVEL_CAPACITY) -> None:
        if int(capacity) < 1:
            raise ValidationError(f"level capacity must be at least 1, got {capacity!r}")
        self.capacity = int(capacity)
        self._area = np.zeros(self.capacity, dtype=float)
        self._calls = np.zeros(self.capacity, dtype=np.int64)

    def _check_level(self, level: int) -> None:
        if not 0 <= level < self.capacity:
            raise IndexError(f"level {level} outside 0..{self.capacity - 1}")

    def reset(self) -> None:
        self._area.fill(0.0)
        self._calls.fill(0)

    def record(self, level: int, area_delta: float) -> None:
        self._check_level(level)
        self._area[level] += area_delta

    def record_calls(self, level: int, delta: int) -> None:
        self._check_level(level)
        self._calls[level] += delta

    def area_at(self, level: int) -> float:
        self._check_level(level)
        return float(self._area[level])

    def calls_at(self, level: int) -> int:
        self._check_level(level)
        return int(self._calls[level])

    def total_area(self, start: int = 0, stop: Optional[int] = None) -> float:
        return float(self._area[start:stop].sum())

    def total_calls(self, start: int = 0, stop: Optional[int] = None) -> int:
        return int(self._calls[start:stop].sum())

    def merge(self, other: "LevelStats") -> None:
        if other.capacity != self.capacity:
            raise ValidationError(
                f"cannot merge level stats with capacity {other.capacity} into {self.capacity}"
            )
        self._area += other._area
        self._calls += other._calls

    def snapshot(self) -> LevelStatsSnapshot:
        area = self._area.copy()
        calls = self._calls.copy()
        area.setflags(write=False)
        calls.setflags(write=False)
        return LevelStatsSnapshot(area=area, calls=calls)

    def __repr__(self) -> str:
        return (
            f"LevelStats(capacity={self.capacity}, area={self.total_area():.6g}, "
            f"calls={self.total_calls()})"
        )


__all__ = [
    "DEFAULT_LEVEL_CAPACITY",
    "LevelStats",
    "LevelStatsSnapshot",
]
