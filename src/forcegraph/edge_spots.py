from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional

from .config import FanConfig
from .geometry import midpoint, reciprocal_angle, shift_along_angle
from .models import Edge, EdgeId, EdgeSpot, Point, VertexId


@dataclass(frozen=True)
class EdgeCurve:
    """Model-space geometry of one edge.

    *control* is the quadratic Bezier control point, or None when the
    edge is alone in its spot and should be drawn straight.
    """

    edge_id: EdgeId
    start: Point
    end: Point
    control: Optional[Point] = None

    @property
    def is_straight(self) -> bool:
        return self.control is None

    def label_anchor(self) -> Point:
        middle = midpoint(self.start, self.end)
        if self.control is None:
            return middle
        return midpoint(middle, self.control)


def build_vertex_edges(edges: Iterable[Edge]) -> Dict[VertexId, List[Edge]]:
    """Map each vertex to its incident edges, in enumeration order."""
    vertex_edges: dict[VertexId, list[Edge]] = defaultdict(list)
    for edge in edges:
        a, b = edge.vertex_ids
        vertex_edges[a].append(edge)
        vertex_edges[b].append(edge)
    return dict(vertex_edges)


def build_edge_spots(edges: Iterable[Edge]) -> List[EdgeSpot]:
    """Partition *edges* into spots keyed by their unordered endpoint pair.

    Every edge lands in exactly one spot and every spot holds at least one
    edge; isolated vertices produce nothing.  Spots come out ordered by
    their lower vertex handle, then by the other endpoint's first edge.
    Self-loops have no spot and raise ``ValueError``.
    """
    edges = list(edges)
    for edge in edges:
        a, b = edge.vertex_ids
        if a == b:
            raise ValueError(f"Edge {edge.id} is a self-loop on vertex {a}")
    vertex_edges = build_vertex_edges(edges)
    spots: List[EdgeSpot] = []
    for vid in sorted(vertex_edges):
        by_other: dict[VertexId, list[EdgeId]] = {}
        for edge in vertex_edges[vid]:
            a, b = edge.vertex_ids
            other = b if a == vid else a
            if other < vid:
                continue
            by_other.setdefault(other, []).append(edge.id)
        for other, edge_ids in by_other.items():
            spots.append(EdgeSpot((vid, other), tuple(edge_ids)))
    return spots


def fan_offsets(count: int, fan: FanConfig = FanConfig()) -> List[float]:
    """Perpendicular offsets for *count* parallel edges, symmetric about 0.

    A single edge gets no offset.  Otherwise the outermost curves sit at
    ``+-(base_shift + count * shift_per_edge)`` and the rest are spaced
    evenly between them.
    """
    if count < 1:
        raise ValueError(f"An edge spot holds at least one edge, got {count}")
    if count == 1:
        return [0.0]
    spread = fan.base_shift + count * fan.shift_per_edge
    return [spread * (count - 1 - 2 * i) / (count - 1) for i in range(count)]


def spot_geometry(
    spot: EdgeSpot,
    edges: Mapping[EdgeId, Edge],
    positions: Mapping[VertexId, Point],
    fan: FanConfig = FanConfig(),
) -> List[EdgeCurve]:
    """Straight segment for a lone edge, a fan of curves for parallel ones.

    The perpendicular comes from :func:`~forcegraph.geometry.reciprocal_angle`,
    which ignores edge orientation, so ``a -> b`` and ``b -> a`` edges in
    the same spot still fan out around one shared axis.
    """
    curves: List[EdgeCurve] = []
    if not spot.is_parallel():
        edge = edges[spot.edge_ids[0]]
        a, b = edge.vertex_ids
        curves.append(EdgeCurve(edge.id, positions[a], positions[b]))
        return curves

    for edge_id, offset in zip(spot.edge_ids, fan_offsets(spot.size(), fan)):
        edge = edges[edge_id]
        a, b = edge.vertex_ids
        start, end = positions[a], positions[b]
        control = shift_along_angle(midpoint(start, end), reciprocal_angle(start, end), offset)
        curves.append(EdgeCurve(edge_id, start, end, control))
    return curves
