from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

Point = Tuple[float, float]
VertexId = int
EdgeId = int


@dataclass(frozen=True)
class Vertex:
    id: VertexId
    element: Any


@dataclass(frozen=True)
class Edge:
    id: EdgeId
    element: Any
    vertex_ids: tuple[VertexId, VertexId]

    def endpoints(self) -> frozenset[VertexId]:
        """Unordered endpoint pair, the key of the edge's spot."""
        return frozenset(self.vertex_ids)

    def touches(self, vertex_id: VertexId) -> bool:
        return vertex_id in self.vertex_ids


@dataclass(frozen=True)
class EdgeSpot:
    """All edges joining the same unordered vertex pair.

    *vertex_ids* is sorted so two spots over the same pair compare equal.
    *edge_ids* keeps the order the edges were enumerated in, which is
    the order their curves fan out in.
    """

    vertex_ids: tuple[VertexId, VertexId]
    edge_ids: tuple[EdgeId, ...]

    def size(self) -> int:
        return len(self.edge_ids)

    def is_parallel(self) -> bool:
        return len(self.edge_ids) > 1


@dataclass(frozen=True)
class DegreeBounds:
    minimum: int
    maximum: int

    def varies(self) -> bool:
        return self.minimum != self.maximum
