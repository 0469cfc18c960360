from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol, runtime_checkable

from .models import Edge, EdgeId, Vertex, VertexId


@runtime_checkable
class GraphProvider(Protocol):
    """What the layout engine needs from a graph.

    Any object exposing these methods can be bound to a
    :class:`~forcegraph.layout.LayoutEngine`.  Vertex and edge handles must
    be stable for as long as the graph stays bound.
    """

    def vertex_ids(self) -> List[VertexId]:
        ...

    def edge_list(self) -> List[Edge]:
        ...

    def vertex_count(self) -> int:
        ...

    def degree(self, vertex_id: VertexId) -> int:
        ...

    def are_adjacent(self, a: VertexId, b: VertexId) -> bool:
        ...

    def element(self, vertex_id: VertexId) -> Any:
        ...


class Graph:
    """Mutable multigraph that owns its vertex and edge handles.

    Handles are integers handed out in insertion order and never reused,
    so they stay valid as keys in position maps even after removals.
    Parallel edges are allowed; self-loops are not.
    """

    VERSION = "1.0"

    def __init__(self) -> None:
        self.vertices: Dict[VertexId, Vertex] = {}
        self.edges: Dict[EdgeId, Edge] = {}
        self._incidence: Dict[VertexId, List[EdgeId]] = {}
        self._next_vertex_id = 0
        self._next_edge_id = 0
        self._frozen = False

    # ── Provider interface ──────────────────────────────────────────

    def vertex_ids(self) -> List[VertexId]:
        return list(self.vertices.keys())

    def edge_list(self) -> List[Edge]:
        return list(self.edges.values())

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    def degree(self, vertex_id: VertexId) -> int:
        return len(self._incidence[self._require_vertex(vertex_id)])

    def are_adjacent(self, a: VertexId, b: VertexId) -> bool:
        self._require_vertex(a)
        self._require_vertex(b)
        # Scan the shorter incidence list.
        if len(self._incidence[a]) > len(self._incidence[b]):
            a, b = b, a
        return any(self.edges[eid].touches(b) for eid in self._incidence[a])

    def element(self, vertex_id: VertexId) -> Any:
        return self.vertices[self._require_vertex(vertex_id)].element

    # ── Queries ─────────────────────────────────────────────────────

    def __iter__(self) -> Iterator[Vertex]:
        return iter(self.vertices.values())

    def __len__(self) -> int:
        return len(self.vertices)

    def __contains__(self, vertex_id: object) -> bool:
        return vertex_id in self.vertices

    def incident_edges(self, vertex_id: VertexId) -> List[Edge]:
        return [self.edges[eid] for eid in self._incidence[self._require_vertex(vertex_id)]]

    def opposite(self, vertex_id: VertexId, edge_id: EdgeId) -> VertexId:
        self._require_vertex(vertex_id)
        edge = self.edges[self._require_edge(edge_id)]
        a, b = edge.vertex_ids
        if a == vertex_id:
            return b
        if b == vertex_id:
            return a
        raise ValueError(f"Edge {edge_id} is not incident to vertex {vertex_id}")

    def find_vertex(self, element: Any) -> Optional[VertexId]:
        """Return the handle of the first vertex holding *element*, if any."""
        for vertex in self.vertices.values():
            if vertex.element == element:
                return vertex.id
        return None

    # ── Mutation ────────────────────────────────────────────────────

    def add_vertex(self, element: Any) -> VertexId:
        self._check_mutable()
        if element is None:
            raise ValueError("Vertex element must not be None")
        vid = self._next_vertex_id
        self._insert_vertex(Vertex(vid, element))
        return vid

    def add_edge(self, u: VertexId, v: VertexId, element: Any) -> EdgeId:
        self._check_mutable()
        eid = self._next_edge_id
        self._insert_edge(Edge(eid, element, (u, v)))
        return eid

    def remove_vertex(self, vertex_id: VertexId) -> Any:
        """Remove a vertex and every edge incident to it; return its element."""
        self._check_mutable()
        self._require_vertex(vertex_id)
        for eid in list(self._incidence[vertex_id]):
            self.remove_edge(eid)
        del self._incidence[vertex_id]
        return self.vertices.pop(vertex_id).element

    def remove_edge(self, edge_id: EdgeId) -> Any:
        self._check_mutable()
        edge = self.edges.pop(self._require_edge(edge_id))
        for vid in edge.vertex_ids:
            self._incidence[vid].remove(edge_id)
        return edge.element

    def replace_vertex_element(self, vertex_id: VertexId, element: Any) -> Any:
        self._check_mutable()
        if element is None:
            raise ValueError("Vertex element must not be None")
        old = self.vertices[self._require_vertex(vertex_id)]
        self.vertices[vertex_id] = Vertex(vertex_id, element)
        return old.element

    def replace_edge_element(self, edge_id: EdgeId, element: Any) -> Any:
        self._check_mutable()
        if element is None:
            raise ValueError("Edge element must not be None")
        old = self.edges[self._require_edge(edge_id)]
        self.edges[edge_id] = Edge(edge_id, element, old.vertex_ids)
        return old.element

    def freeze(self) -> "FrozenGraph":
        return FrozenGraph(self)

    def validate(self) -> list[str]:
        """Check internal consistency between edges and the incidence index."""
        errors: list[str] = []
        for edge in self.edges.values():
            a, b = edge.vertex_ids
            if a == b:
                errors.append(f"Edge {edge.id} is a self-loop on vertex {a}")
            for vid in edge.vertex_ids:
                if vid not in self.vertices:
                    errors.append(f"Edge {edge.id} references missing vertex {vid}")
                elif edge.id not in self._incidence.get(vid, []):
                    errors.append(f"Vertex {vid} does not list incident edge {edge.id}")
        for vid, eids in self._incidence.items():
            for eid in eids:
                if eid not in self.edges:
                    errors.append(f"Vertex {vid} lists missing edge {eid}")
        return errors

    # ── Serialisation (topology only) ───────────────────────────────

    def to_dict(self) -> dict:
        return {
            "version": self.VERSION,
            "vertices": [
                {"id": v.id, "element": v.element} for v in self.vertices.values()
            ],
            "edges": [
                {"id": e.id, "element": e.element, "vertices": list(e.vertex_ids)}
                for e in self.edges.values()
            ],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Graph":
        errors = validate_payload(payload)
        if errors:
            raise ValueError("Invalid graph payload:\n" + "\n".join(errors))
        graph = cls()
        for vertex in payload.get("vertices", []):
            graph._insert_vertex(Vertex(int(vertex["id"]), vertex["element"]))
        for edge in payload.get("edges", []):
            a, b = edge["vertices"]
            graph._insert_edge(Edge(int(edge["id"]), edge["element"], (int(a), int(b))))
        return graph

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_data: str) -> "Graph":
        return cls.from_dict(json.loads(json_data))

    # ── Internals ───────────────────────────────────────────────────

    def _insert_vertex(self, vertex: Vertex) -> None:
        if vertex.id in self.vertices:
            raise ValueError(f"Vertex {vertex.id} already exists")
        self.vertices[vertex.id] = vertex
        self._incidence[vertex.id] = []
        self._next_vertex_id = max(self._next_vertex_id, vertex.id + 1)

    def _insert_edge(self, edge: Edge) -> None:
        a, b = edge.vertex_ids
        if edge.element is None:
            raise ValueError("Edge element must not be None")
        if a not in self.vertices or b not in self.vertices:
            raise KeyError(
                f"Vertices {a} and {b} must be part of the graph before edge {edge.id} is built"
            )
        if a == b:
            raise ValueError(f"Self-loops are not supported (vertex {a})")
        if edge.id in self.edges:
            raise ValueError(f"Edge {edge.id} already exists")
        self.edges[edge.id] = edge
        self._incidence[a].append(edge.id)
        self._incidence[b].append(edge.id)
        self._next_edge_id = max(self._next_edge_id, edge.id + 1)

    def _require_vertex(self, vertex_id: VertexId) -> VertexId:
        if vertex_id not in self.vertices:
            raise KeyError(f"Vertex {vertex_id} is not contained in the graph")
        return vertex_id

    def _require_edge(self, edge_id: EdgeId) -> EdgeId:
        if edge_id not in self.edges:
            raise KeyError(f"Edge {edge_id} is not contained in the graph")
        return edge_id

    def _check_mutable(self) -> None:
        if self._frozen:
            raise TypeError(f"{type(self).__name__} cannot be modified")


class FrozenGraph(Graph):
    """Read-only snapshot of a :class:`Graph`, sharing its handles."""

    def __init__(self, source: Graph) -> None:
        super().__init__()
        for vertex in source.vertices.values():
            self._insert_vertex(vertex)
        for edge in source.edges.values():
            self._insert_edge(edge)
        self._frozen = True


def validate_payload(payload: dict) -> list[str]:
    """Return a list of problems with a raw graph payload (empty if valid)."""
    errors: list[str] = []
    vertex_ids: set[int] = set()
    for i, vertex in enumerate(payload.get("vertices", [])):
        if "id" not in vertex:
            errors.append(f"Vertex #{i} has no id")
            continue
        if vertex["id"] in vertex_ids:
            errors.append(f"Vertex {vertex['id']} is defined twice")
        if vertex.get("element") is None:
            errors.append(f"Vertex {vertex['id']} has no element")
        vertex_ids.add(vertex["id"])

    edge_ids: set[int] = set()
    for i, edge in enumerate(payload.get("edges", [])):
        if "id" not in edge:
            errors.append(f"Edge #{i} has no id")
            continue
        eid = edge["id"]
        if eid in edge_ids:
            errors.append(f"Edge {eid} is defined twice")
        edge_ids.add(eid)
        if edge.get("element") is None:
            errors.append(f"Edge {eid} has no element")
        ends = edge.get("vertices", [])
        if len(ends) != 2:
            errors.append(f"Edge {eid} must reference exactly two vertices")
            continue
        for vid in ends:
            if vid not in vertex_ids:
                errors.append(f"Edge {eid} references missing vertex {vid}")
        if ends[0] == ends[1]:
            errors.append(f"Edge {eid} is a self-loop on vertex {ends[0]}")
    return errors


def build_graph(elements: Iterable[Any], links: Iterable[tuple[Any, Any, Any]]) -> Graph:
    """Build a graph from vertex elements and ``(u, v, element)`` links.

    *u* and *v* are vertex elements, resolved to handles by lookup.
    """
    graph = Graph()
    handles: Dict[Any, VertexId] = {}
    for element in elements:
        if element in handles:
            raise ValueError(f"{element!r} already exists")
        handles[element] = graph.add_vertex(element)
    for u, v, element in links:
        graph.add_edge(handles[u], handles[v], element)
    return graph


def demo_graph() -> Graph:
    """Five points joined by seven paths, two of the pairs doubled."""
    return build_graph(
        ["a", "b", "c", "d", "e"],
        [
            ("a", "b", "1"),
            ("b", "c", "2"),
            ("c", "d", "3"),
            ("d", "a", "4"),
            ("d", "e", "5"),
            ("e", "d", "6"),
            ("d", "a", "7"),
        ],
    )
