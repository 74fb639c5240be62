"""Search defaults and event descriptions."""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from .geometry import Point, Region
from .lens import LensField, Source
from .logging_utils import debug_log_call
from .stats import DEFAULT_LEVEL_CAPACITY
from .trajectory import SourceTrajectory
from .validate import ValidationError, ensure_count

logger = logging.getLogger(__name__)


@dataclass
class SearchOptions:
    """Knobs for the adaptive search that are not part of the lens event."""

    min_points_per_side: int = 10
    cost_per_call: int = 40
    root_level: int = 0
    level_capacity: int = DEFAULT_LEVEL_CAPACITY

    def __post_init__(self) -> None:
        if self.min_points_per_side < 1:
            raise ValidationError(
                f"min_points_per_side must be at least 1, got {self.min_points_per_side!r}"
            )
        if self.cost_per_call < 0:
            raise ValidationError(f"cost_per_call must be non-negative, got {self.cost_per_call!r}")
        if self.root_level < 0:
            raise ValidationError(f"root_level must be non-negative, got {self.root_level!r}")
        if self.level_capacity < 1:
            raise ValidationError(f"level_capacity must be at least 1, got {self.level_capacity!r}")


_SEARCH_OPTIONS = SearchOptions()


def get_search_options() -> SearchOptions:
    return copy.deepcopy(_SEARCH_OPTIONS)


def set_search_options(options: SearchOptions) -> None:
    global _SEARCH_OPTIONS
    _SEARCH_OPTIONS = copy.deepcopy(options)


@dataclass(frozen=True)
class EventConfig:
    """Everything needed to run the search for any frame of one event."""

    name: str
    field: LensField
    source: Source
    region: Region
    trajectory: SourceTrajectory

    def source_for_frame(self, frame: int) -> Source:
        return self.trajectory.source_at(self.source, frame)


def sample_event() -> EventConfig:
    """Two-lens event with a small source crossing below the lens axis."""

    field = LensField.from_pairs([((0.0, 0.0), 1.0 / 1.5), ((2.0, 0.0), 0.5 / 1.5)], resolution=1e-2)
    trajectory = SourceTrajectory.from_event_times(
        5700.0,
        6000.0,
        peak_time=4500.0,
        crossing_time=800.0,
        impact=-0.17,
        frames=100,
    )
    return EventConfig(
        name="Test",
        field=field,
        source=Source(trajectory.start, 0.05),
        region=Region(-1.0, -2.0, 4.0),
        trajectory=trajectory,
    )


def _require(data: Mapping[str, Any], key: str, context: str) -> Any:
    if key not in data:
        raise ValidationError(f"{context} is missing '{key}'")
    return data[key]


def _point(value: Any, context: str) -> Point:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValidationError(f"{context} must be an [x, y] pair, got {value!r}")
    return Point(value[0], value[1])


def event_from_dict(data: Mapping[str, Any]) -> EventConfig:
    """Build an :class:`EventConfig` from a decoded JSON document.

    Expected layout::

        {
          "name": "Test",
          "resolution": 0.01,
          "lenses": [{"position": [0, 0], "mass": 0.667}, ...],
          "source": {"radius": 0.05},
          "region": {"x": -1, "y": -2, "size": 4},
          "trajectory": {"start": [x, y], "end": [x, y], "frames": 100}
        }

    ``trajectory`` may instead give ``start_time``, ``end_time``,
    ``peak_time``, ``crossing_time`` and ``impact``. Without a trajectory the
    source sits at ``source.position``.
    """

    if not isinstance(data, Mapping):
        raise ValidationError("event description must be a JSON object")

    lenses_raw = _require(data, "lenses", "event")
    if not isinstance(lenses_raw, list):
        raise ValidationError("event 'lenses' must be a list")
    pairs = []
    for idx, entry in enumerate(lenses_raw):
        context = f"lens {idx}"
        if not isinstance(entry, Mapping):
            raise ValidationError(f"{context} must be an object")
        position = _point(_require(entry, "position", context), f"{context} position")
        pairs.append(((position.x, position.y), _require(entry, "mass", context)))
    field = LensField.from_pairs(pairs, _require(data, "resolution", "event"))

    region_raw = _require(data, "region", "event")
    if not isinstance(region_raw, Mapping):
        raise ValidationError("event 'region' must be an object")
    region = Region(
        _require(region_raw, "x", "region"),
        _require(region_raw, "y", "region"),
        _require(region_raw, "size", "region"),
    )

    source_raw = _require(data, "source", "event")
    if not isinstance(source_raw, Mapping):
        raise ValidationError("event 'source' must be an object")
    radius = _require(source_raw, "radius", "source")

    traj_raw = data.get("trajectory")
    if traj_raw is None:
        origin = _point(_require(source_raw, "position", "source"), "source position")
        trajectory = SourceTrajectory(origin, origin, 0)
    elif not isinstance(traj_raw, Mapping):
        raise ValidationError("event 'trajectory' must be an object")
    elif "start" in traj_raw:
        trajectory = SourceTrajectory(
            _point(traj_raw["start"], "trajectory start"),
            _point(_require(traj_raw, "end", "trajectory"), "trajectory end"),
            ensure_count(traj_raw.get("frames", 100), "trajectory frames"),
        )
    else:
        trajectory = SourceTrajectory.from_event_times(
            _require(traj_raw, "start_time", "trajectory"),
            _require(traj_raw, "end_time", "trajectory"),
            peak_time=_require(traj_raw, "peak_time", "trajectory"),
            crossing_time=_require(traj_raw, "crossing_time", "trajectory"),
            impact=_require(traj_raw, "impact", "trajectory"),
            frames=ensure_count(traj_raw.get("frames", 100), "trajectory frames"),
        )

    return EventConfig(
        name=str(data.get("name", "event")),
        field=field,
        source=Source(trajectory.start, radius),
        region=region,
        trajectory=trajectory,
    )


@debug_log_call(logger)
def load_event_config(path: Union[str, Path]) -> EventConfig:
    event_path = Path(path)
    logger.info("Loading event description from %s", event_path)
    try:
        with event_path.open("r", encoding="utf-8") as fh:
            data: Dict[str, Any] = json.load(fh)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{event_path.name}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    return event_from_dict(data)


__all__ = [
    "EventConfig",
    "SearchOptions",
    "event_from_dict",
    "get_search_options",
    "load_event_config",
    "sample_event",
    "set_search_options",
]
