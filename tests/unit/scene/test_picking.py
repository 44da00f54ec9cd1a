"""
Unit tests for ray picking and pointer dispatch.
"""

import math

import pytest

from codeorbit.scene.camera import OrbitCamera
from codeorbit.scene.picking import PointerDispatcher, Ray, intersect_sphere, pick
from codeorbit.scene.renderer import NodePrimitive, SceneRenderer


def primitive(node_id, position, radius=1.0):
    return NodePrimitive(
        node_id=node_id,
        position=position,
        radius=radius,
        color="#ffffff",
        emissive_intensity=0.1,
        show_ring=False,
        type_label="module",
    )


class TestRay:
    def test_center_ray_looks_down_negative_z(self):
        ray = Ray.from_camera(OrbitCamera(), 0.0, 0.0)
        assert ray.origin == pytest.approx((0.0, 0.0, 40.0), abs=1e-9)
        assert ray.direction == pytest.approx((0.0, 0.0, -1.0), abs=1e-9)

    def test_corner_ray_spreads_by_fov(self):
        ray = Ray.from_camera(OrbitCamera(), 1.0, 0.0)
        angle = math.degrees(math.atan2(ray.direction[0], -ray.direction[2]))
        assert angle == pytest.approx(30.0)


class TestIntersect:
    """Ray-sphere hit testing."""

    def test_hit_distance(self):
        ray = Ray((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        assert intersect_sphere(ray, (0.0, 0.0, 0.0), 1.0) == pytest.approx(9.0)

    def test_miss(self):
        ray = Ray((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        assert intersect_sphere(ray, (5.0, 0.0, 0.0), 1.0) is None

    def test_sphere_behind_origin(self):
        ray = Ray((0.0, 0.0, 10.0), (0.0, 0.0, 1.0))
        assert intersect_sphere(ray, (0.0, 0.0, 0.0), 1.0) is None

    def test_origin_inside_sphere(self):
        ray = Ray((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert intersect_sphere(ray, (0.0, 0.0, 0.0), 2.0) == pytest.approx(2.0)

    def test_pick_nearest(self):
        ray = Ray((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        far = primitive("far", (0.0, 0.0, -5.0))
        near = primitive("near", (0.0, 0.0, 2.0))
        assert pick(ray, [far, near]).node_id == "near"

    def test_pick_nothing(self):
        ray = Ray((0.0, 0.0, 10.0), (0.0, 0.0, -1.0))
        assert pick(ray, []) is None


@pytest.fixture
def placed_store(store, graph_builder):
    store.set_graph(graph_builder(
        [
            {"id": "center", "type": "module", "name": "Center", "position": {"x": 0, "y": 0, "z": 0}},
            {"id": "corner", "type": "form", "name": "Corner", "position": {"x": 10, "y": 10, "z": 0}},
        ],
        [{"source": "center", "target": "corner", "type": "uses"}],
    ))
    return store


@pytest.fixture
def dispatcher(placed_store, appearance):
    renderer = SceneRenderer(placed_store, appearance)
    renderer.frame()
    return PointerDispatcher(renderer)


class TestPointerDispatcher:
    """Pointer events write selection and hover into the store."""

    def test_click_hit_selects_and_stops(self, dispatcher, placed_store):
        event = dispatcher.click(0.0, 0.0)
        assert event.stopped
        assert event.hit.node_id == "center"
        assert placed_store.selected_node.id == "center"

    def test_background_click_clears(self, dispatcher, placed_store):
        placed_store.select_node("corner")
        event = dispatcher.click(0.9, -0.9)
        assert not event.stopped
        assert placed_store.selected_node is None

    def test_move_hovers(self, dispatcher, placed_store):
        dispatcher.move(0.0, 0.0)
        assert placed_store.hovered_node.id == "center"
        dispatcher.move(0.9, -0.9)
        assert placed_store.hovered_node is None

    def test_leave_clears_hover(self, dispatcher, placed_store):
        dispatcher.move(0.0, 0.0)
        dispatcher.leave()
        assert placed_store.hovered_node is None

    def test_hover_keeps_selection(self, dispatcher, placed_store):
        dispatcher.click(0.0, 0.0)
        dispatcher.move(0.9, -0.9)
        assert placed_store.selected_node.id == "center"

    def test_picking_follows_group_rotation(self, store, graph_builder, appearance):
        store.set_graph(graph_builder([
            {"id": "side", "type": "module", "name": "Side", "position": {"x": 10, "y": 0, "z": 0}},
        ]))
        renderer = SceneRenderer(store, appearance)
        renderer.frame()
        pointer = PointerDispatcher(renderer)

        assert pointer.click(0.0, 0.0).hit is None

        renderer.group.rotation_y = math.pi / 2
        assert pointer.click(0.0, 0.0).hit.node_id == "side"
