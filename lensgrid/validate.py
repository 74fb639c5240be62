import math
import numbers
from typing import Sequence


class ValidationError(ValueError):
    pass


def ensure_finite(value: float, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f'{name} must be a real number, got {value!r}') from exc
    if not math.isfinite(number):
        raise ValidationError(f'{name} must be finite, got {number!r}')
    return number


def ensure_positive(value: float, name: str) -> float:
    number = ensure_finite(value, name)
    if number <= 0.0:
        raise ValidationError(f'{name} must be positive, got {number!r}')
    return number


def ensure_non_negative(value: float, name: str) -> float:
    number = ensure_finite(value, name)
    if number < 0.0:
        raise ValidationError(f'{name} must be non-negative, got {number!r}')
    return number


def ensure_non_empty(items: Sequence[object], name: str) -> None:
    if len(items) == 0:
        raise ValidationError(f'{name} needs at least one entry')


def ensure_count(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f'{name} must be a whole number, got {value!r}')
    number = int(value)
    if number < 0:
        raise ValidationError(f'{name} must be non-negative, got {number!r}')
    return number


def ensure_depth_fits(size: float, resolution: float, root_level: int, capacity: int) -> int:
    """Return the deepest level a search over ``size`` can reach, or raise."""

    depth = 0
    current = size
    while current > resolution:
        current /= 2.0
        depth += 1
    deepest = root_level + depth
    if deepest >= capacity:
        raise ValidationError(
            f'search would reach level {deepest} but level stats only hold {capacity} levels '
            f'(size={size!r}, resolution={resolution!r})'
        )
    return deepest
