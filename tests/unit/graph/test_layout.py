"""
Unit tests for the layout engine.
"""

import math

import pytest

from codeorbit.core.types import Position3D
from codeorbit.graph.layout import (
    ForceDirectedLayout,
    GridLayout,
    SphericalLayout,
    apply_layout,
    clear_positions,
    get_layout,
)


@pytest.fixture
def chain_graph(graph_builder):
    """Twenty nodes in a chain, none placed."""
    nodes = [{"id": f"n{i}", "type": "function", "name": f"f{i}"} for i in range(20)]
    edges = [{"source": f"n{i}", "target": f"n{i + 1}", "type": "calls"} for i in range(19)]
    return graph_builder(nodes, edges)


class TestSphericalLayout:
    """Fibonacci sphere placement."""

    @pytest.mark.parametrize("total", [1, 2, 7, 100])
    def test_positions_are_distinct(self, total):
        positions = [p.as_tuple() for p in SphericalLayout().positions(total)]
        assert len(set(positions)) == total

    def test_deterministic(self):
        assert SphericalLayout().positions(50) == SphericalLayout().positions(50)

    def test_radius_within_jitter(self):
        layout = SphericalLayout(radius=20.0, jitter=2.0)
        for p in layout.positions(64):
            r = math.sqrt(p.x ** 2 + p.y ** 2 + p.z ** 2)
            assert 19.0 <= r <= 21.0

    def test_single_node_is_on_the_shell(self):
        (p,) = SphericalLayout(radius=10.0, jitter=0.0).positions(1)
        assert p.z == pytest.approx(-10.0)


class TestGridLayout:
    """Square grid placement."""

    def test_positions_are_distinct(self):
        positions = [(p.x, p.y) for p in GridLayout().positions(10)]
        assert len(set(positions)) == 10

    def test_columns_are_ceil_sqrt(self):
        positions = GridLayout(spacing=3.0).positions(10)
        xs = sorted({p.x for p in positions})
        assert len(xs) == 4
        assert xs[1] - xs[0] == pytest.approx(3.0)

    def test_depth_jitter_bounded(self):
        for p in GridLayout(depth_jitter=5.0).positions(30):
            assert -2.5 <= p.z <= 2.5

    def test_deterministic(self):
        assert GridLayout().positions(12) == GridLayout().positions(12)


class TestIndexLayoutApplication:
    """Layouts fill gaps and never move placed nodes."""

    def test_every_node_gets_a_position(self, chain_graph):
        placed = apply_layout(chain_graph)
        assert all(n.position is not None for n in placed.nodes)

    def test_existing_positions_kept(self, graph_builder):
        graph = graph_builder([
            {"id": "a", "type": "module", "name": "A", "position": {"x": 1, "y": 2, "z": 3}},
            {"id": "b", "type": "module", "name": "B"},
        ])
        placed = apply_layout(graph, GridLayout())
        assert placed.find_node("a").position == Position3D(x=1, y=2, z=3)
        assert placed.find_node("b").position is not None

    def test_fully_placed_graph_returned_as_is(self, chain_graph):
        placed = apply_layout(chain_graph)
        assert apply_layout(placed) is placed

    def test_clear_positions(self, chain_graph):
        cleared = clear_positions(apply_layout(chain_graph))
        assert all(n.position is None for n in cleared.nodes)


class TestForceDirectedLayout:
    """networkx spring layout in three dimensions."""

    def test_places_every_node(self, chain_graph):
        placed = ForceDirectedLayout(iterations=20).layout(chain_graph)
        assert all(n.position is not None for n in placed.nodes)

    def test_seeded_runs_are_identical(self, chain_graph):
        first = ForceDirectedLayout(seed=7, iterations=20).layout(chain_graph)
        second = ForceDirectedLayout(seed=7, iterations=20).layout(chain_graph)
        assert [n.position for n in first.nodes] == [n.position for n in second.nodes]

    def test_pinned_nodes_do_not_move(self, graph_builder):
        graph = graph_builder(
            [
                {"id": "a", "type": "module", "name": "A", "position": {"x": 5, "y": 5, "z": 5}},
                {"id": "b", "type": "module", "name": "B"},
                {"id": "c", "type": "module", "name": "C"},
            ],
            [
                {"source": "a", "target": "b", "type": "uses"},
                {"source": "b", "target": "c", "type": "uses"},
                {"source": "c", "target": "c", "type": "calls"},
            ],
        )
        placed = ForceDirectedLayout(iterations=10).layout(graph)
        assert placed.find_node("a").position == Position3D(x=5, y=5, z=5)
        assert placed.find_node("c").position is not None


class TestGetLayout:
    def test_known_names(self):
        assert isinstance(get_layout("spherical"), SphericalLayout)
        assert isinstance(get_layout("grid", spacing=1.0), GridLayout)
        assert isinstance(get_layout("force", seed=3), ForceDirectedLayout)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown layout 'hexagon'"):
            get_layout("hexagon")
