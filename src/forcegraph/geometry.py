"""Vector helpers over 2D points.

Points and vectors are plain ``(x, y)`` tuples so they can be used as
dictionary values, compared in tests and handed to any renderer.
"""

from __future__ import annotations

import math
from typing import Iterable, Tuple

from .models import Point

Bounds = Tuple[float, float, float, float]


class DegenerateGeometryError(ValueError):
    """Raised when an operation needs a non-zero vector and got none."""


def difference(a: Point, b: Point) -> Point:
    """Vector from *a* to *b*."""
    return (b[0] - a[0], b[1] - a[1])


def length(v: Point) -> float:
    return math.hypot(v[0], v[1])


def normalize(v: Point) -> Point:
    """Unit vector in the direction of *v*.

    *v* must be non-zero.  Two vertices occupying exactly the same position
    is the only way the layout produces one, and random spawning makes that
    improbable rather than impossible, so it is reported instead of hidden.
    """
    norm = length(v)
    if norm == 0.0:
        raise DegenerateGeometryError("Cannot normalise a zero-length vector")
    return (v[0] / norm, v[1] / norm)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def angle(a: Point, b: Point) -> float:
    """Slope angle of the line through *a* and *b*, in [-pi/2, pi/2].

    This is ``atan(dy / dx)``, not ``atan2``: swapping the points gives the
    same angle, so perpendicular offsets computed from it agree for both
    orientations of an edge.  Vertical lines give +-pi/2 following the
    signs of the deltas; coincident points give 0.
    """
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    if dx == 0.0:
        if dy == 0.0:
            return 0.0
        return math.copysign(math.pi / 2, dy) * math.copysign(1.0, dx)
    return math.atan(dy / dx)


def reciprocal_angle(a: Point, b: Point) -> float:
    """Angle perpendicular to the line through *a* and *b*."""
    return angle(a, b) - math.pi / 2


def shift_along_angle(point: Point, theta: float, magnitude: float) -> Point:
    """Move *point* by *magnitude* in polar direction *theta*."""
    return (
        point[0] + math.cos(theta) * magnitude,
        point[1] + math.sin(theta) * magnitude,
    )


def add(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def scale(v: Point, factor: float) -> Point:
    return (v[0] * factor, v[1] * factor)


def bounding_box(points: Iterable[Point]) -> Bounds | None:
    """``(min_x, min_y, max_x, max_y)`` of *points*, or None when empty."""
    xs: list[float] = []
    ys: list[float] = []
    for x, y in points:
        xs.append(x)
        ys.append(y)
    if not xs:
        return None
    return (min(xs), min(ys), max(xs), max(ys))
