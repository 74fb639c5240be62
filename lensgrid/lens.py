"""Point-mass lens field: the lens equation and its Jacobian."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Tuple

import numpy as np

from .geometry import Point, Region, point_in_region
from .validate import ValidationError, ensure_non_empty, ensure_non_negative, ensure_positive


class JacobianComponent(Enum):
    XX = "xx"
    XY = "xy"
    YY = "yy"


@dataclass(frozen=True)
class Lens:
    origin: Point
    mass: float

    def __post_init__(self) -> None:
        if not isinstance(self.origin, Point):
            raise ValidationError(f"lens origin must be a Point, got {self.origin!r}")
        object.__setattr__(self, "mass", ensure_non_negative(self.mass, "lens mass"))


@dataclass(frozen=True)
class Source:
    """Uniform source disk; immutable for the duration of a search."""

    origin: Point
    radius: float

    def __post_init__(self) -> None:
        if not isinstance(self.origin, Point):
            raise ValidationError(f"source origin must be a Point, got {self.origin!r}")
        object.__setattr__(self, "radius", ensure_positive(self.radius, "source radius"))

    @property
    def area(self) -> float:
        return float(np.pi) * self.radius * self.radius

    def moved_to(self, origin: Point) -> "Source":
        return Source(origin, self.radius)


def jacobian_contribution(lens: Lens, point: Point, component: JacobianComponent) -> float:
    """Second-derivative term of one point mass at ``point``.

    Undefined when ``point`` is the lens origin; the search never asks for it.
    """

    dx = point.x - lens.origin.x
    dy = point.y - lens.origin.y
    dsq = dx * dx + dy * dy

    if component is JacobianComponent.XY:
        return 2 * lens.mass * dx * dy / (dsq * dsq)
    if component is JacobianComponent.YY:
        return -lens.mass / dsq + 2 * lens.mass * dy * dy / (dsq * dsq)
    return -lens.mass / dsq + 2 * lens.mass * dx * dx / (dsq * dsq)


@dataclass(frozen=True)
class LensField:
    """Ordered collection of point masses plus the search resolution floor."""

    lenses: Tuple[Lens, ...]
    resolution: float
    _origins: np.ndarray = field(init=False, repr=False, compare=False)
    _masses: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lenses = tuple(self.lenses)
        ensure_non_empty(lenses, "lens field")
        for lens in lenses:
            if not isinstance(lens, Lens):
                raise ValidationError(f"lens field entries must be Lens, got {lens!r}")
        object.__setattr__(self, "lenses", lenses)
        object.__setattr__(self, "resolution", ensure_positive(self.resolution, "resolution"))
        object.__setattr__(
            self, "_origins", np.array([[lens.origin.x, lens.origin.y] for lens in lenses], dtype=float)
        )
        object.__setattr__(self, "_masses", np.array([lens.mass for lens in lenses], dtype=float))

    @classmethod
    def from_pairs(
        cls, pairs: Iterable[Tuple[Tuple[float, float], float]], resolution: float
    ) -> "LensField":
        lenses = tuple(Lens(Point(float(x), float(y)), float(mass)) for (x, y), mass in pairs)
        return cls(lenses, resolution)

    @property
    def total_mass(self) -> float:
        return float(self._masses.sum())

    def contains_lens(self, region: Region) -> bool:
        return any(point_in_region(lens.origin, region) for lens in self.lenses)

    def jacobian_determinant_at(self, point: Point) -> float:
        d_fxx = 1.0
        d_fyy = 1.0
        d_fxy = 0.0
        for lens in self.lenses:
            d_fxx += jacobian_contribution(lens, point, JacobianComponent.XX)
            d_fxy += jacobian_contribution(lens, point, JacobianComponent.XY)
            d_fyy += jacobian_contribution(lens, point, JacobianComponent.YY)
        return d_fxx * d_fyy - d_fxy * d_fxy

    def jacobian_sign_at(self, point: Point) -> int:
        """Return +1 where the Jacobian determinant is positive and -1 otherwise."""

        return 1 if self.jacobian_determinant_at(point) > 0 else -1

    def map_to_source_plane(self, point: Point) -> Point:
        x = point.x
        y = point.y
        for lens in self.lenses:
            dx = point.x - lens.origin.x
            dy = point.y - lens.origin.y
            dsq = dx * dx + dy * dy
            x -= lens.mass * dx / dsq
            y -= lens.mass * dy / dsq
        return Point(x, y)

    def map_points(self, points: np.ndarray) -> np.ndarray:
        """Apply the lens equation to an ``(n, 2)`` array of image-plane points.

        Lenses are summed in field order. Points that sit exactly on a lens map
        to non-finite values.
        """

        image = np.asarray(points, dtype=float)
        mapped = image.copy()
        with np.errstate(divide="ignore", invalid="ignore"):
            for origin, mass in zip(self._origins, self._masses):
                delta = image - origin
                dsq = np.einsum("ij,ij->i", delta, delta)
                mapped -= mass * delta / dsq[:, None]
        return mapped


__all__ = [
    "JacobianComponent",
    "Lens",
    "LensField",
    "Source",
    "jacobian_contribution",
]
