"""Screen-space snapshot of a layout, ready for any renderer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Union

from .models import EdgeId, Point, VertexId
from .viewport import Viewport

if TYPE_CHECKING:
    from .layout import LayoutEngine

EDGE_LABEL_OFFSET = 10.0


@dataclass(frozen=True)
class VertexGlyph:
    vertex_id: VertexId
    center: Point
    size: float
    label: str


@dataclass(frozen=True)
class StraightEdge:
    edge_id: EdgeId
    start: Point
    end: Point
    label: str
    label_anchor: Point


@dataclass(frozen=True)
class CurvedEdge:
    """Quadratic Bezier from *start* to *end* bent towards *control*."""

    edge_id: EdgeId
    start: Point
    end: Point
    control: Point
    label: str
    label_anchor: Point


EdgeGlyph = Union[StraightEdge, CurvedEdge]


@dataclass(frozen=True)
class Frame:
    vertices: List[VertexGlyph]
    edges: List[EdgeGlyph]
    viewport: Viewport

    def vertex(self, vertex_id: VertexId) -> Optional[VertexGlyph]:
        return next((v for v in self.vertices if v.vertex_id == vertex_id), None)


def build_frame(engine: "LayoutEngine", viewport: Viewport) -> Frame:
    """Project the engine's current layout through *viewport*.

    The viewport is copied so later pans do not alter the frame.
    """
    graph = engine.graph
    vertices = [
        VertexGlyph(vid, viewport.to_screen(point), size, str(graph.element(vid)))
        for vid, point, size in engine.candidates()
    ]

    edges: List[EdgeGlyph] = []
    for curve in engine.edge_curves():
        label = str(engine.edges[curve.edge_id].element)
        start = viewport.to_screen(curve.start)
        end = viewport.to_screen(curve.end)
        anchor = viewport.to_screen(curve.label_anchor())
        if curve.control is None:
            edges.append(StraightEdge(
                curve.edge_id, start, end, label,
                (anchor[0] + EDGE_LABEL_OFFSET, anchor[1]),
            ))
        else:
            edges.append(CurvedEdge(
                curve.edge_id, start, end, viewport.to_screen(curve.control), label, anchor,
            ))

    snapshot = Viewport(viewport.shift_x, viewport.shift_y, viewport.zoom)
    return Frame(vertices, edges, snapshot)
