"""Tests for ``forcegraph.layout``: binding, stepping and dragging."""

from __future__ import annotations

import math
from dataclasses import replace

import pytest

from forcegraph.config import CanvasConfig, ConfigError, LayoutConfig, SimulationConfig
from forcegraph.forces import attractive_force, pairwise_repulsion, repelling_force, vectorized_repulsion
from forcegraph.geometry import distance
from forcegraph.graph import Graph, demo_graph
from forcegraph.layout import LayoutEngine, NotBoundError
from forcegraph.models import DegreeBounds, Edge
from forcegraph.viewport import Viewport

A = (239.46457081379975, 239.46457081379975)
B = (239.46457081379975, 518.3937124413992)


# ── helpers ─────────────────────────────────────────────────────────

@pytest.fixture()
def pair():
    graph = Graph()
    a, b = graph.add_vertex("a"), graph.add_vertex("b")
    graph.add_edge(a, b, 1)
    return graph, a, b


@pytest.fixture()
def engine():
    return LayoutEngine(seed=7)


def _place(engine, positions):
    for vid, point in positions.items():
        engine.set_position(vid, point)


class _LoopProvider:
    """Minimal provider that carries a self-loop next to a normal edge."""

    def vertex_ids(self):
        return [0, 1]

    def edge_list(self):
        return [Edge(0, "loop", (0, 0)), Edge(1, "ab", (0, 1))]

    def vertex_count(self):
        return 2

    def degree(self, vertex_id):
        return 3 if vertex_id == 0 else 1

    def are_adjacent(self, a, b):
        return {a, b} == {0, 1}

    def element(self, vertex_id):
        return "ab"[vertex_id]


# ═══════════════════════════════════════════════════════════════════
# Binding
# ═══════════════════════════════════════════════════════════════════


class TestBinding:
    def test_starts_idle(self, engine):
        assert not engine.is_bound
        assert engine.positions == {}
        with pytest.raises(NotBoundError):
            engine.step()

    def test_bind_places_every_vertex(self, engine):
        graph = demo_graph()
        engine.bind(graph)
        assert engine.is_bound
        assert set(engine.positions) == set(graph.vertex_ids())
        assert all(engine.force(vid) == (0.0, 0.0) for vid in graph.vertex_ids())

    def test_spawn_region_scales_with_vertex_count(self, engine):
        graph = Graph()
        for i in range(3):
            graph.add_vertex(i)
        engine.bind(graph)
        canvas = engine.config.canvas
        span = 3 ** 0.3 * canvas.width - 2 * canvas.padding_factor * canvas.width
        pad = canvas.padding_factor * canvas.width
        for x, y in engine.positions.values():
            assert pad <= x <= pad + span
            assert pad <= y <= pad + span

    def test_same_seed_same_spawn(self):
        first = LayoutEngine(seed=3)
        second = LayoutEngine(seed=3)
        first.bind(demo_graph())
        second.bind(demo_graph())
        assert dict(first.positions) == dict(second.positions)

    def test_empty_spawn_region_fails_fast(self):
        graph = Graph()
        graph.add_vertex("only")
        config = LayoutConfig(canvas=CanvasConfig(padding_factor=0.6))
        with pytest.raises(ConfigError, match="Spawn region"):
            LayoutEngine(config).bind(graph)

    def test_degree_bounds(self, engine):
        engine.bind(demo_graph())
        assert engine.degree_bounds == DegreeBounds(2, 5)

    def test_rebind_rebuilds_caches(self, engine, pair):
        engine.bind(demo_graph())
        assert len(engine.edge_spots) == 5
        graph, a, b = pair
        engine.bind(graph)
        assert len(engine.edge_spots) == 1
        assert engine.degree_bounds == DegreeBounds(1, 1)
        assert set(engine.positions) == {a, b}

    def test_topology_changes_need_rebind(self, engine, pair):
        graph, a, b = pair
        engine.bind(graph)
        graph.add_edge(a, b, 2)
        assert len(engine.edge_spots[0].edge_ids) == 1
        engine.bind(graph)
        assert len(engine.edge_spots[0].edge_ids) == 2

    def test_unbind_discards_state(self, engine):
        engine.bind(demo_graph())
        engine.begin_drag(0)
        engine.unbind()
        assert not engine.is_bound
        assert engine.positions == {}
        assert engine.edge_spots == []
        assert engine.dragged is None

    def test_rejects_non_graphs(self, engine):
        with pytest.raises(TypeError):
            engine.bind(object())

    def test_rejects_self_loops_from_any_provider(self, engine, pair):
        engine.bind(pair[0])
        with pytest.raises(ValueError, match="Self-loop"):
            engine.bind(_LoopProvider())
        assert engine.graph is pair[0]
        assert [c.edge_id for c in engine.edge_curves()] == [e.id for e in pair[0].edge_list()]

    def test_positions_are_read_only(self, engine, pair):
        engine.bind(pair[0])
        with pytest.raises(TypeError):
            engine.positions[0] = (1.0, 1.0)


# ═══════════════════════════════════════════════════════════════════
# Stepping
# ═══════════════════════════════════════════════════════════════════


class TestStep:
    def test_force_on_connected_pair(self, engine, pair):
        graph, a, b = pair
        engine.bind(graph)
        _place(engine, {a: A, b: B})

        engine.step()

        attraction = attractive_force(A, B, 2, 1.0, 1.0)
        repulsion = repelling_force(A, B, 5000.0)
        expected = (attraction[0] + repulsion[0], attraction[1] + repulsion[1])
        assert engine.force(a) == pytest.approx(expected)
        assert engine.position(a) == pytest.approx((A[0] + expected[0], A[1] + expected[1]))

    def test_unconnected_vertices_only_repel(self, engine):
        graph = Graph()
        a, b = graph.add_vertex("a"), graph.add_vertex("b")
        engine.bind(graph)
        _place(engine, {a: (0.0, 0.0), b: (10.0, 0.0)})
        engine.step()
        assert engine.force(a) == pytest.approx((-50.0, 0.0))
        assert distance(engine.position(a), engine.position(b)) > 10.0

    def test_parallel_edges_do_not_multiply_attraction(self, pair):
        graph, a, b = pair
        doubled = Graph.from_dict(graph.to_dict())
        doubled.add_edge(a, b, 2)

        single_engine = LayoutEngine(seed=1)
        double_engine = LayoutEngine(seed=1)
        single_engine.bind(graph)
        double_engine.bind(doubled)
        _place(single_engine, {a: (0.0, 0.0), b: (100.0, 0.0)})
        _place(double_engine, {a: (0.0, 0.0), b: (100.0, 0.0)})
        single_engine.step()
        double_engine.step()
        assert single_engine.force(a) == pytest.approx(double_engine.force(a))

    def test_excluded_vertex_stays_put(self, engine):
        engine.bind(demo_graph())
        before = dict(engine.positions)
        engine.step(excluded=3)
        assert engine.position(3) == before[3]
        assert engine.force(3) != (0.0, 0.0)
        assert any(engine.position(v) != before[v] for v in before if v != 3)

    def test_unknown_excluded_vertex(self, engine, pair):
        engine.bind(pair[0])
        with pytest.raises(KeyError):
            engine.step(excluded=99)

    def test_advance_equals_repeated_steps(self):
        batched = LayoutEngine(seed=11)
        stepped = LayoutEngine(seed=11)
        batched.bind(demo_graph())
        stepped.bind(demo_graph())

        batched.advance(5)
        for _ in range(5):
            stepped.step()

        for vid, point in batched.positions.items():
            assert point == pytest.approx(stepped.position(vid))

    def test_advance_zero_is_a_no_op(self, engine):
        engine.bind(demo_graph())
        before = dict(engine.positions)
        engine.advance(0)
        assert dict(engine.positions) == before

    def test_advance_rejects_negative_counts(self, engine):
        engine.bind(demo_graph())
        with pytest.raises(ValueError):
            engine.advance(-1)

    def test_empty_graph_steps_quietly(self, engine):
        engine.bind(Graph())
        engine.advance(3)
        assert engine.bounds() is None

    def test_speed_scales_displacement(self, pair):
        graph, a, b = pair
        config = LayoutConfig(simulation=SimulationConfig(speed=0.5))
        slow = LayoutEngine(config, seed=2)
        slow.bind(graph)
        _place(slow, {a: A, b: B})
        slow.step()
        fx, fy = slow.force(a)
        assert slow.position(a) == pytest.approx((A[0] + 0.5 * fx, A[1] + 0.5 * fy))

    def test_long_run_stays_finite(self, engine):
        engine.bind(demo_graph())
        engine.advance(300)
        for x, y in engine.positions.values():
            assert math.isfinite(x) and math.isfinite(y)

    def test_custom_repulsion_pass(self, pair):
        calls = []

        def no_repulsion(positions, scale):
            calls.append(scale)
            return {vid: (0.0, 0.0) for vid in positions}

        graph, a, b = pair
        engine = LayoutEngine(seed=5, repulsion=no_repulsion)
        engine.bind(graph)
        _place(engine, {a: A, b: B})
        engine.step()
        assert calls == [5000.0]
        assert engine.force(a) == pytest.approx(attractive_force(A, B, 2, 1.0, 1.0))

    def test_vectorized_pass_matches_default(self):
        pytest.importorskip("numpy")
        slow = LayoutEngine(seed=9, repulsion=pairwise_repulsion)
        fast = LayoutEngine(seed=9, repulsion=vectorized_repulsion)
        slow.bind(demo_graph())
        fast.bind(demo_graph())
        slow.advance(10)
        fast.advance(10)
        for vid, point in slow.positions.items():
            assert fast.position(vid) == pytest.approx(point, rel=1e-6)


# ═══════════════════════════════════════════════════════════════════
# Dragging
# ═══════════════════════════════════════════════════════════════════


class TestDrag:
    def test_dragged_vertex_is_excluded(self, engine):
        engine.bind(demo_graph())
        engine.begin_drag(1)
        engine.update_drag((10.0, 20.0))
        engine.advance(4)
        assert engine.position(1) == (10.0, 20.0)
        engine.end_drag()
        assert engine.dragged is None
        engine.step()
        assert engine.position(1) != (10.0, 20.0)

    def test_update_without_drag(self, engine):
        engine.bind(demo_graph())
        with pytest.raises(RuntimeError):
            engine.update_drag((0.0, 0.0))

    def test_only_one_vertex_dragged(self, engine):
        engine.bind(demo_graph())
        engine.begin_drag(1)
        engine.begin_drag(2)
        assert engine.dragged == 2

    def test_drag_unknown_vertex(self, engine):
        engine.bind(demo_graph())
        with pytest.raises(KeyError):
            engine.begin_drag(42)


# ═══════════════════════════════════════════════════════════════════
# Sizing, picking and fitting
# ═══════════════════════════════════════════════════════════════════


def test_vertex_size_tracks_degree(engine):
    engine.bind(demo_graph())
    style = engine.config.nodes
    assert engine.vertex_size(3) == style.node_size + 5 * style.degree_scaler
    assert engine.vertex_size(1) == style.node_size + 2 * style.degree_scaler


def test_vertex_size_uniform_when_degrees_match(engine, pair):
    engine.bind(pair[0])
    assert engine.vertex_size(0) == engine.vertex_size(1) == engine.config.nodes.node_size


def test_edge_curves_cover_every_edge(engine):
    graph = demo_graph()
    engine.bind(graph)
    curves = engine.edge_curves()
    assert sorted(c.edge_id for c in curves) == sorted(graph.edges)
    assert sum(1 for c in curves if not c.is_straight) == 4


def test_pick_and_fit(engine, pair):
    graph, a, b = pair
    engine.bind(graph)
    _place(engine, {a: (0.0, 0.0), b: (2.0, 2.0)})
    viewport = Viewport()
    assert engine.fit(viewport)
    assert engine.pick(viewport, viewport.to_screen((0.0, 0.0))) == a
    assert engine.pick(viewport, viewport.to_screen((2.0, 2.0))) == b
    assert engine.pick(viewport, (250.0, 250.0)) is None


def test_config_is_replaceable(pair):
    graph, a, b = pair
    config = replace(LayoutConfig(), simulation=SimulationConfig(repulsion_scale=0.0))
    engine = LayoutEngine(config, seed=4)
    engine.bind(graph)
    _place(engine, {a: (0.0, 0.0), b: (10.0, 0.0)})
    engine.step()
    assert engine.force(a) == pytest.approx((math.log(10.0) / 2, 0.0))
