"""forcegraph: force-directed graph layout with interactive viewport support.

Public API is organised into layers:

- **Core**: models, graph container, I/O
- **Geometry**: vector helpers and the force model
- **Layout**: simulation engine and its configuration
- **Edges**: parallel-edge spot grouping and curve placement
- **View**: viewport transform, hit-testing, frames, interaction
- **Rendering**: PNG output (requires matplotlib)
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import DegreeBounds, Edge, EdgeSpot, Point, Vertex
from .graph import FrozenGraph, Graph, GraphProvider, build_graph, demo_graph, validate_payload
from .io import load_json, save_json

# ── Geometry ────────────────────────────────────────────────────────
from .geometry import (
    DegenerateGeometryError,
    angle,
    bounding_box,
    difference,
    distance,
    midpoint,
    normalize,
    reciprocal_angle,
    shift_along_angle,
)
from .forces import (
    STABILIZER,
    attractive_force,
    attractive_function,
    pairwise_repulsion,
    repelling_force,
    repelling_function,
    vectorized_repulsion,
)

# ── Layout ──────────────────────────────────────────────────────────
from .config import (
    CanvasConfig,
    ConfigError,
    FanConfig,
    LayoutConfig,
    NodeStyle,
    SimulationConfig,
    load_config,
    save_config,
)
from .layout import LayoutEngine, NotBoundError

# ── Edges ───────────────────────────────────────────────────────────
from .edge_spots import EdgeCurve, build_edge_spots, build_vertex_edges, fan_offsets, spot_geometry

# ── View ────────────────────────────────────────────────────────────
from .viewport import Viewport
from .hit_test import hit_test, vertex_hitbox, vertex_size
from .frame import CurvedEdge, Frame, StraightEdge, VertexGlyph, build_frame
from .interaction import InteractionController

# ── Rendering (requires matplotlib at call time) ────────────────────
from .render import render_png

__all__ = [
    # Core
    "Vertex", "Edge", "EdgeSpot", "DegreeBounds", "Point",
    "Graph", "FrozenGraph", "GraphProvider", "build_graph", "demo_graph", "validate_payload",
    "load_json", "save_json",
    # Geometry
    "DegenerateGeometryError", "difference", "normalize", "distance", "midpoint",
    "angle", "reciprocal_angle", "shift_along_angle", "bounding_box",
    "STABILIZER", "repelling_function", "attractive_function",
    "repelling_force", "attractive_force", "pairwise_repulsion", "vectorized_repulsion",
    # Layout
    "SimulationConfig", "CanvasConfig", "NodeStyle", "FanConfig", "LayoutConfig",
    "ConfigError", "load_config", "save_config",
    "LayoutEngine", "NotBoundError",
    # Edges
    "EdgeCurve", "build_vertex_edges", "build_edge_spots", "fan_offsets", "spot_geometry",
    # View
    "Viewport", "vertex_size", "vertex_hitbox", "hit_test",
    "VertexGlyph", "StraightEdge", "CurvedEdge", "Frame", "build_frame",
    "InteractionController",
    # Rendering
    "render_png",
]
