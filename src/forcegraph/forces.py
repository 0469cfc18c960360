"""Spring-electrical force model.

Adjacent vertices attract with a logarithmic spring, every pair of
distinct vertices repels with an inverse-square law.  Distances are
floored at :data:`STABILIZER` so nearly coincident vertices do not blow
the simulation up.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Mapping

from .geometry import DegenerateGeometryError, difference, distance, normalize, scale
from .models import Point, VertexId

STABILIZER = 1.0

RepulsionPass = Callable[[Mapping[VertexId, Point], float], Dict[VertexId, Point]]
"""Signature of a repulsion pass: ``(positions, repulsion_scale) -> net repulsion``."""


def repelling_function(dist: float, repulsion_scale: float) -> float:
    if dist < STABILIZER:
        dist = STABILIZER
    return repulsion_scale / dist**2


def attractive_function(
    dist: float,
    vertex_count: int,
    spring_force: float,
    spring_scale: float,
) -> float:
    """Spring magnitude, damped by the number of vertices in the graph."""
    if vertex_count <= 0:
        raise ValueError(f"vertex_count must be positive, got {vertex_count}")
    if spring_scale <= 0:
        raise ValueError(f"spring_scale must be positive, got {spring_scale}")
    if dist < STABILIZER:
        dist = STABILIZER
    return spring_force * math.log(dist / spring_scale) / (STABILIZER * vertex_count)


def repelling_force(source: Point, target: Point, repulsion_scale: float) -> Point:
    """Force on *source* pushing it away from *target*."""
    direction = normalize(difference(source, target))
    return scale(direction, -repelling_function(distance(source, target), repulsion_scale))


def attractive_force(
    source: Point,
    target: Point,
    vertex_count: int,
    spring_force: float,
    spring_scale: float,
) -> Point:
    """Force on *source* pulling it towards *target*.

    Negative when the pair is closer than *spring_scale*, which pushes
    them apart instead.
    """
    direction = normalize(difference(source, target))
    magnitude = attractive_function(
        distance(source, target), vertex_count, spring_force, spring_scale
    )
    return scale(direction, magnitude)


# ═══════════════════════════════════════════════════════════════════
# Repulsion passes
# ═══════════════════════════════════════════════════════════════════


def pairwise_repulsion(
    positions: Mapping[VertexId, Point],
    repulsion_scale: float,
) -> Dict[VertexId, Point]:
    """Net repulsion on every vertex from all others, O(V²)."""
    items = list(positions.items())
    totals: Dict[VertexId, Point] = {}
    for vid, point in items:
        fx = fy = 0.0
        for other, other_point in items:
            if other == vid:
                continue
            rx, ry = repelling_force(point, other_point, repulsion_scale)
            fx += rx
            fy += ry
        totals[vid] = (fx, fy)
    return totals


def vectorized_repulsion(
    positions: Mapping[VertexId, Point],
    repulsion_scale: float,
) -> Dict[VertexId, Point]:
    """Same result as :func:`pairwise_repulsion`, computed with numpy.

    Still O(V²) in time and memory, but fast enough for a few thousand
    vertices per step.
    """
    try:
        import numpy as np
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "vectorized_repulsion requires numpy. Install with `pip install numpy`."
        ) from exc

    ids = list(positions.keys())
    n = len(ids)
    if n == 0:
        return {}
    xy = np.array([positions[vid] for vid in ids], dtype=float)

    # delta[i, j] points from vertex i to vertex j
    delta = xy[None, :, :] - xy[:, None, :]
    dist = np.hypot(delta[..., 0], delta[..., 1])
    off_diagonal = ~np.eye(n, dtype=bool)
    if np.any(dist[off_diagonal] == 0.0):
        raise DegenerateGeometryError("Cannot normalise a zero-length vector")

    np.fill_diagonal(dist, 1.0)
    unit = delta / dist[..., None]
    magnitude = -repulsion_scale / np.maximum(dist, STABILIZER) ** 2
    magnitude[~off_diagonal] = 0.0
    net = (unit * magnitude[..., None]).sum(axis=1)

    return {vid: (float(net[i, 0]), float(net[i, 1])) for i, vid in enumerate(ids)}
