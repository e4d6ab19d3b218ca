"""Planar geometry helpers: vectors, angles, segments and projections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

_EPSILON = 1e-12


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D vector, coordinates in meters."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2:
        return Vector2(self.x * scalar, self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector2:
        return Vector2(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2:
        return Vector2(-self.x, -self.y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def dot(self, other: Vector2) -> float:
        """Return the dot product with another vector."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vector2) -> float:
        """Return the z component of the cross product."""
        return self.x * other.y - self.y * other.x

    def norm(self) -> float:
        """Return the Euclidean length of the vector."""
        return math.hypot(self.x, self.y)


Segment = Tuple[Vector2, Vector2]


def distance(a: Vector2, b: Vector2) -> float:
    """Return the Euclidean distance between two points."""
    return (b - a).norm()


def distance2(a: Vector2, b: Vector2) -> float:
    """Return the squared distance between two points."""
    d = b - a
    return d.dot(d)


def orientation(a: Vector2, b: Vector2) -> float:
    """Return the angle in radians of the direction going from a to b."""
    return math.atan2(b.y - a.y, b.x - a.x)


def normal(vector: Vector2) -> Vector2:
    """Return the unit vector perpendicular (counter-clockwise) to vector."""
    length = vector.norm()
    if length < _EPSILON:
        raise ValueError("cannot compute the normal of a null vector")
    return Vector2(-vector.y / length, vector.x / length)


def heading(vector: Vector2, angle: float) -> Vector2:
    """Return vector rotated by angle radians."""
    c, s = math.cos(angle), math.sin(angle)
    return Vector2(vector.x * c - vector.y * s, vector.x * s + vector.y * c)


def lerp(start, stop, t: float):
    """Linear interpolation between start and stop (scalars or vectors)."""
    return start + (stop - start) * t


def wrap_angle(angle: float) -> float:
    """Wrap an angle in radians into the interval [-pi, pi)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


def is_equal_approx(a: Vector2, b: Vector2, tolerance: float = 1e-6) -> bool:
    """Return True when both coordinates differ by at most tolerance."""
    return abs(a.x - b.x) <= tolerance and abs(a.y - b.y) <= tolerance


def intersect(segment1: Segment, segment2: Segment) -> Optional[Vector2]:
    """Return the intersection point of two segments, or None."""
    p, p2 = segment1
    q, q2 = segment2
    r = p2 - p
    s = q2 - q
    denominator = r.cross(s)
    if abs(denominator) < _EPSILON:
        return None
    qp = q - p
    t = qp.cross(s) / denominator
    u = qp.cross(r) / denominator
    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return p + r * t
    return None


def _projection_factor(point: Vector2, start: Vector2, stop: Vector2) -> Optional[float]:
    direction = stop - start
    length2 = direction.dot(direction)
    if length2 < _EPSILON:
        return None
    return (point - start).dot(direction) / length2


def project(point: Vector2, start: Vector2, stop: Vector2, clamp: bool = False) -> Vector2:
    """Project point on the line through start and stop.

    With clamp, the result is kept inside the segment.
    """
    t = _projection_factor(point, start, stop)
    if t is None:
        return start
    if clamp:
        t = min(max(t, 0.0), 1.0)
    return lerp(start, stop, t)


def aligned(point: Vector2, start: Vector2, stop: Vector2) -> bool:
    """Return True when the orthogonal projection of point falls on the segment."""
    t = _projection_factor(point, start, stop)
    return t is not None and 0.0 <= t <= 1.0