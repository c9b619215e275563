"""Small 2D geometry primitives: vectors, rectangles and rounding helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vec2:
    """An immutable two-dimensional vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: object) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: object) -> Vec2:
        if not isinstance(other, Vec2):
            return NotImplemented
        return Vec2(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vec2:
        return Vec2(-self.x, -self.y)

    def __mul__(self, scalar: object) -> Vec2:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: object) -> Vec2:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec2(self.x / scalar, self.y / scalar)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def length(self) -> float:
        """Euclidean length of the vector."""
        return math.hypot(self.x, self.y)

    def normalize(self) -> Vec2:
        """Return the unit vector pointing the same way.

        Raises ValueError for a vector with zero or non-finite length.
        """
        norm = self.length()
        if norm == 0.0 or not math.isfinite(norm):
            raise ValueError(f"cannot normalize vector of length {norm}")
        return Vec2(self.x / norm, self.y / norm)


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    w: float
    h: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def overlaps(self, other: Rect) -> bool:
        """True if the rectangles intersect; touching edges count."""
        return (
            self.left <= other.right
            and self.right >= other.left
            and self.top <= other.bottom
            and self.bottom >= other.top
        )

    def contains(self, point: Vec2) -> bool:
        """True if the point lies inside; left and top edges are inclusive."""
        return (
            self.left <= point.x < self.right
            and self.top <= point.y < self.bottom
        )


def polar_to_cartesian(rho: float, theta: float) -> Vec2:
    """Convert polar coordinates (radius, angle in radians) to a vector."""
    return Vec2(rho * math.cos(theta), rho * math.sin(theta))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves going away from zero."""
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, value)) if whole else 0