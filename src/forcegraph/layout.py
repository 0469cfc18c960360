"""Force-directed layout simulation.

:class:`LayoutEngine` is either idle (no graph) or bound to a graph.
Binding scatters every vertex at random inside a spawn region that grows
with ``V**0.3``; each :meth:`~LayoutEngine.step` then sums repulsion from
every other vertex and attraction towards adjacent ones, and moves every
vertex except the excluded one by ``speed * force``.

A step is O(V²).  The repulsion half can be swapped for any
:data:`~forcegraph.forces.RepulsionPass` (for example
:func:`~forcegraph.forces.vectorized_repulsion`) without touching the rest.

The engine never decides when a layout is finished: it runs exactly the
number of steps it is asked for.
"""

from __future__ import annotations

import logging
import random
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Set, Union

from .config import ConfigError, LayoutConfig
from .edge_spots import EdgeCurve, build_edge_spots, spot_geometry
from .forces import RepulsionPass, attractive_force, pairwise_repulsion
from .geometry import Bounds, bounding_box
from .graph import GraphProvider
from .hit_test import Candidate, hit_test, vertex_size
from .models import DegreeBounds, Edge, EdgeId, EdgeSpot, Point, VertexId
from .viewport import Viewport

logger = logging.getLogger(__name__)


class NotBoundError(RuntimeError):
    """Raised when an operation needs a bound graph and there is none."""


class LayoutEngine:
    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        seed: Union[int, random.Random, None] = None,
        repulsion: RepulsionPass = pairwise_repulsion,
    ) -> None:
        self.config = config or LayoutConfig()
        self._rng = seed if isinstance(seed, random.Random) else random.Random(seed)
        self._repulsion = repulsion

        self._graph: Optional[GraphProvider] = None
        self._positions: Dict[VertexId, Point] = {}
        self._forces: Dict[VertexId, Point] = {}
        self._neighbors: Dict[VertexId, Set[VertexId]] = {}
        self._degrees: Dict[VertexId, int] = {}
        self._edges: Dict[EdgeId, Edge] = {}
        self._edge_spots: List[EdgeSpot] = []
        self._degree_bounds = DegreeBounds(0, 0)
        self._dragged: Optional[VertexId] = None

    # ── Binding ─────────────────────────────────────────────────────

    @property
    def is_bound(self) -> bool:
        return self._graph is not None

    @property
    def graph(self) -> Optional[GraphProvider]:
        return self._graph

    def bind(self, graph: GraphProvider) -> None:
        """Attach *graph*, scatter its vertices and rebuild derived caches.

        Any previous graph's state is discarded.  Later topology changes
        to *graph* are not seen until it is bound again.
        """
        if not isinstance(graph, GraphProvider):
            raise TypeError(f"{type(graph).__name__} does not implement GraphProvider")
        loops = [edge.id for edge in graph.edge_list() if edge.vertex_ids[0] == edge.vertex_ids[1]]
        if loops:
            raise ValueError(f"Self-loop edges cannot be laid out: {loops}")
        self.unbind()

        vertex_ids = graph.vertex_ids()
        self._graph = graph
        self._spawn(vertex_ids)
        self._forces = {vid: (0.0, 0.0) for vid in vertex_ids}

        self._neighbors = {vid: set() for vid in vertex_ids}
        for i, a in enumerate(vertex_ids):
            for b in vertex_ids[i + 1 :]:
                if graph.are_adjacent(a, b):
                    self._neighbors[a].add(b)
                    self._neighbors[b].add(a)

        self._degrees = {vid: graph.degree(vid) for vid in vertex_ids}
        if self._degrees:
            self._degree_bounds = DegreeBounds(
                min(self._degrees.values()), max(self._degrees.values())
            )

        edges = graph.edge_list()
        self._edges = {edge.id: edge for edge in edges}
        self._edge_spots = build_edge_spots(edges)
        logger.debug(
            "Bound graph: %d vertices, %d edges, %d edge spots, degrees %d..%d",
            len(vertex_ids),
            len(edges),
            len(self._edge_spots),
            self._degree_bounds.minimum,
            self._degree_bounds.maximum,
        )

    def unbind(self) -> None:
        if self._graph is not None:
            logger.debug("Unbinding graph with %d vertices", len(self._positions))
        self._graph = None
        self._positions = {}
        self._forces = {}
        self._neighbors = {}
        self._degrees = {}
        self._edges = {}
        self._edge_spots = []
        self._degree_bounds = DegreeBounds(0, 0)
        self._dragged = None

    def _spawn(self, vertex_ids: List[VertexId]) -> None:
        canvas = self.config.canvas
        growth = len(vertex_ids) ** self.config.simulation.spawn_exponent
        pad_x = canvas.padding_factor * canvas.width
        pad_y = canvas.padding_factor * canvas.height
        span_x = growth * canvas.width - 2 * pad_x
        span_y = growth * canvas.height - 2 * pad_y
        if vertex_ids and (span_x <= 0 or span_y <= 0):
            raise ConfigError(
                f"Spawn region is empty ({span_x:.1f}x{span_y:.1f}); reduce padding_factor"
            )
        self._positions = {
            vid: (
                self._rng.random() * span_x + pad_x,
                self._rng.random() * span_y + pad_y,
            )
            for vid in vertex_ids
        }

    # ── State access ────────────────────────────────────────────────

    @property
    def positions(self) -> Mapping[VertexId, Point]:
        return MappingProxyType(self._positions)

    @property
    def vertex_count(self) -> int:
        return len(self._positions)

    @property
    def degree_bounds(self) -> DegreeBounds:
        return self._degree_bounds

    @property
    def edge_spots(self) -> List[EdgeSpot]:
        return list(self._edge_spots)

    @property
    def edges(self) -> Mapping[EdgeId, Edge]:
        return MappingProxyType(self._edges)

    def position(self, vertex_id: VertexId) -> Point:
        return self._positions[self._require_vertex(vertex_id)]

    def force(self, vertex_id: VertexId) -> Point:
        """Net force on the vertex from the most recent step."""
        return self._forces[self._require_vertex(vertex_id)]

    def set_position(self, vertex_id: VertexId, point: Point) -> None:
        self._positions[self._require_vertex(vertex_id)] = (float(point[0]), float(point[1]))

    def bounds(self) -> Optional[Bounds]:
        return bounding_box(self._positions.values())

    def degree(self, vertex_id: VertexId) -> int:
        return self._degrees[self._require_vertex(vertex_id)]

    def vertex_size(self, vertex_id: VertexId) -> float:
        return vertex_size(self.degree(vertex_id), self._degree_bounds, self.config.nodes)

    # ── Simulation ──────────────────────────────────────────────────

    def step(self, excluded: Optional[VertexId] = None) -> None:
        """Run one simulation step.

        *excluded* keeps its position (its force is still computed).  It
        defaults to the vertex being dragged, if any.
        """
        self._require_bound()
        if excluded is None:
            excluded = self._dragged
        elif excluded not in self._positions:
            raise KeyError(f"Vertex {excluded} is not part of the layout")

        sim = self.config.simulation
        count = len(self._positions)
        forces = self._repulsion(self._positions, sim.repulsion_scale)
        for vid, point in self._positions.items():
            fx, fy = forces[vid]
            for other in self._neighbors[vid]:
                ax, ay = attractive_force(
                    point, self._positions[other], count, sim.spring_force, sim.spring_scale
                )
                fx += ax
                fy += ay
            forces[vid] = (fx, fy)
        self._forces = forces

        for vid, (x, y) in self._positions.items():
            if vid == excluded:
                continue
            fx, fy = forces[vid]
            self._positions[vid] = (x + sim.speed * fx, y + sim.speed * fy)

    def advance(self, steps: int, excluded: Optional[VertexId] = None) -> None:
        """Run *steps* sequential steps, each seeing the previous one's output."""
        if steps < 0:
            raise ValueError(f"steps must be >= 0, got {steps}")
        for _ in range(steps):
            self.step(excluded)

    # ── Dragging ────────────────────────────────────────────────────

    @property
    def dragged(self) -> Optional[VertexId]:
        return self._dragged

    def begin_drag(self, vertex_id: VertexId) -> None:
        self._require_bound()
        self._dragged = self._require_vertex(vertex_id)
        logger.debug("Dragging vertex %s", vertex_id)

    def update_drag(self, point: Point) -> None:
        """Move the dragged vertex to model point *point*."""
        if self._dragged is None:
            raise RuntimeError("No vertex is being dragged")
        self.set_position(self._dragged, point)

    def end_drag(self) -> None:
        if self._dragged is not None:
            logger.debug("Released vertex %s", self._dragged)
        self._dragged = None

    # ── Geometry for renderers and input ────────────────────────────

    def edge_curves(self) -> List[EdgeCurve]:
        curves: List[EdgeCurve] = []
        for spot in self._edge_spots:
            curves.extend(spot_geometry(spot, self._edges, self._positions, self.config.fan))
        return curves

    def candidates(self) -> Iterator[Candidate]:
        """``(vertex_id, position, size)`` in graph insertion order."""
        for vid, point in self._positions.items():
            yield vid, point, self.vertex_size(vid)

    def pick(self, viewport: Viewport, pointer: Point) -> Optional[VertexId]:
        """Vertex under screen point *pointer*; the last inserted wins ties."""
        return hit_test(self.candidates(), viewport, pointer, self.config.nodes)

    def fit(self, viewport: Viewport) -> bool:
        """Auto-fit *viewport* to the current layout (needs two vertices)."""
        return viewport.fit_points(self._positions.values(), self.config.canvas)

    # ── Internals ───────────────────────────────────────────────────

    def _require_bound(self) -> None:
        if self._graph is None:
            raise NotBoundError("No graph is bound to the layout engine")

    def _require_vertex(self, vertex_id: VertexId) -> VertexId:
        if vertex_id not in self._positions:
            raise KeyError(f"Vertex {vertex_id} is not part of the layout")
        return vertex_id
