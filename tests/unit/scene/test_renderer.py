"""
Unit tests for the SceneRenderer.
"""

import pytest

from codeorbit.config import EDGE_COLOR, SELECTED_EDGE_COLOR
from codeorbit.scene.renderer import EdgeMode, SceneRenderer


@pytest.fixture
def renderer(store, appearance):
    r = SceneRenderer(store, appearance)
    yield r
    r.close()


def by_id(frame):
    return {p.node_id: p for p in frame.nodes}


class TestEmptyStates:
    def test_placeholder_without_graph(self, renderer):
        frame = renderer.frame()
        assert frame.placeholder
        assert not frame.no_results
        assert frame.nodes == ()

    def test_placeholder_for_empty_graph(self, renderer, store, graph_builder):
        store.set_graph(graph_builder([]))
        assert renderer.frame().placeholder

    def test_no_results_when_filtered_away(self, renderer, loaded_store):
        loaded_store.set_search_query("nothing matches")
        frame = renderer.frame()
        assert frame.no_results
        assert not frame.placeholder


class TestSync:
    """Primitives are rebuilt only when their visual key changes."""

    def test_first_sync_adds_every_node(self, renderer, loaded_store):
        renderer.frame()
        assert set(renderer.last_sync.added) == {"n1", "n2"}
        assert not renderer.is_dirty

    def test_clean_sync_changes_nothing(self, renderer, loaded_store):
        renderer.frame()
        assert not renderer.sync().changed

    def test_selection_updates_selected_and_connected(self, renderer, loaded_store):
        renderer.frame()
        loaded_store.select_node("n1")
        assert renderer.is_dirty
        renderer.frame()
        assert set(renderer.last_sync.updated) == {"n1", "n2"}
        assert renderer.last_sync.added == ()

    def test_hover_updates_only_hovered(self, renderer, store, star_graph):
        store.set_graph(star_graph)
        renderer.frame()
        store.hover_node("lonely")
        renderer.frame()
        assert renderer.last_sync.updated == ("lonely",)

    def test_filter_removes(self, renderer, loaded_store):
        renderer.frame()
        loaded_store.toggle_node_type("form")
        renderer.frame()
        assert renderer.last_sync.removed == ("n2",)

    def test_annotation_does_not_dirty(self, renderer, loaded_store):
        renderer.frame()
        loaded_store.annotate("n1", notes="x")
        assert not renderer.is_dirty

    def test_color_change_updates(self, renderer, loaded_store, appearance):
        renderer.frame()
        appearance.set_color("module", "#123456")
        frame = renderer.frame()
        assert renderer.last_sync.updated == ("n1",)
        assert by_id(frame)["n1"].color == "#123456"

    def test_size_multiplier_updates_all(self, renderer, loaded_store, appearance):
        renderer.frame()
        appearance.set_node_size_multiplier(2.0)
        frame = renderer.frame()
        assert set(renderer.last_sync.updated) == {"n1", "n2"}
        assert by_id(frame)["n1"].radius == pytest.approx(4.0 * 0.08 * 2.0)

    def test_close_unsubscribes(self, store, appearance):
        renderer = SceneRenderer(store, appearance)
        renderer.close()
        assert store.subscriber_count == 0
        assert appearance.subscriber_count == 0


class TestVisuals:
    def test_selected_primitive(self, renderer, loaded_store):
        loaded_store.select_node("n1")
        nodes = by_id(renderer.frame())
        assert nodes["n1"].radius == pytest.approx(4.0 * 0.08 * 1.5)
        assert nodes["n1"].show_ring
        assert nodes["n1"].emissive_intensity == 0.5
        assert nodes["n2"].emissive_intensity == 0.2
        assert renderer.connected_ids == {"n2"}

    def test_default_color_from_appearance(self, renderer, loaded_store, appearance):
        nodes = by_id(renderer.frame())
        assert nodes["n2"].color == appearance.color_for("form")

    def test_labels_for_selected_and_hovered(self, renderer, store, star_graph):
        store.set_graph(star_graph)
        store.select_node("hub")
        store.hover_node("c")
        frame = renderer.frame()
        assert {label.node_id for label in frame.labels} == {"hub", "c"}

        label = next(l for l in frame.labels if l.node_id == "hub")
        node = store.get_node("hub")
        assert label.text == "UserService"
        assert label.position[1] == pytest.approx(node.position.y + 4.0 * 0.15)


class TestEdges:
    def test_no_edges_without_selection(self, renderer, loaded_store):
        assert renderer.frame().edges == ()

    def test_selection_edges(self, renderer, store, star_graph):
        store.set_graph(star_graph)
        store.select_node("c")
        edges = renderer.frame().edges
        assert {e.edge_id for e in edges} == {"a->c:instantiates", "hub->c:uses"}
        assert all(e.color == SELECTED_EDGE_COLOR for e in edges)

    def test_edges_respect_filters(self, renderer, store, star_graph):
        store.set_graph(star_graph)
        store.select_node("hub")
        store.toggle_node_type("model")
        edges = renderer.frame().edges
        assert {e.edge_id for e in edges} == {"hub->a:contains", "hub->b:contains"}

    def test_all_mode(self, store, appearance, star_graph):
        store.set_graph(star_graph)
        renderer = SceneRenderer(store, appearance, edge_mode=EdgeMode.ALL)
        edges = renderer.frame().edges
        assert len(edges) == 4
        assert all(e.color == EDGE_COLOR for e in edges)

    def test_edge_endpoints_follow_primitives(self, renderer, loaded_store):
        loaded_store.select_node("n1")
        frame = renderer.frame()
        (edge,) = frame.edges
        nodes = by_id(frame)
        assert edge.source == nodes["n1"].position
        assert edge.target == nodes["n2"].position


class TestFrameLoop:
    def test_auto_rotation_uses_appearance_speed(self, renderer, appearance):
        appearance.set_rotation_speed(0.5)
        frame = renderer.frame(dt=2.0)
        assert frame.group_rotation == pytest.approx(1.0)

    def test_camera_in_frame(self, renderer):
        frame = renderer.frame()
        assert frame.camera.fov == 60.0
        assert frame.camera.position == pytest.approx((0.0, 0.0, 40.0), abs=1e-9)
