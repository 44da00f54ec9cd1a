"""
Pointer picking.

Each node primitive is an independent hit target. ``PointerDispatcher``
routes pointer input to the graph store the way a scene graph bubbles DOM
events: the node handler runs first and stops propagation on a hit, and
the background handler (which clears the selection) only runs for events
nobody stopped.

Coordinates are normalised device coordinates: x and y in [-1, 1], +y up.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from .camera import OrbitCamera, SceneGroup
from .geometry import Vec3, add, dot, normalize, scale, sub
from .renderer import NodePrimitive, SceneRenderer


@dataclass(frozen=True)
class Ray:
    origin: Vec3
    direction: Vec3

    @classmethod
    def from_camera(cls, camera: OrbitCamera, ndc_x: float, ndc_y: float, aspect: float = 1.0) -> "Ray":
        """Ray from the camera through a point on the view plane."""
        forward, right, up = camera.basis()
        half = math.tan(math.radians(camera.fov) / 2)
        direction = add(
            forward,
            add(scale(right, ndc_x * half * aspect), scale(up, ndc_y * half)),
        )
        return cls(origin=camera.position, direction=normalize(direction))

    def to_local(self, group: SceneGroup) -> "Ray":
        """The same ray expressed in the rotating group's frame."""
        return Ray(group.to_local(self.origin), group.to_local(self.direction))

    def point_at(self, t: float) -> Vec3:
        return add(self.origin, scale(self.direction, t))


@dataclass(frozen=True)
class Hit:
    primitive: NodePrimitive
    distance: float

    @property
    def node_id(self) -> str:
        return self.primitive.node_id


def intersect_sphere(ray: Ray, center: Vec3, radius: float) -> Optional[float]:
    """Distance along ``ray`` to the first sphere intersection, or None."""
    to_center = sub(center, ray.origin)
    t_closest = dot(to_center, ray.direction)
    d2 = dot(to_center, to_center) - t_closest * t_closest
    r2 = radius * radius
    if d2 > r2:
        return None
    half_chord = math.sqrt(r2 - d2)
    near, far = t_closest - half_chord, t_closest + half_chord
    if far < 0:
        return None
    return near if near >= 0 else far


def pick(ray: Ray, primitives: Iterable[NodePrimitive]) -> Optional[Hit]:
    """Nearest primitive hit by ``ray``."""
    best: Optional[Hit] = None
    for primitive in primitives:
        t = intersect_sphere(ray, primitive.position, primitive.radius)
        if t is not None and (best is None or t < best.distance):
            best = Hit(primitive, t)
    return best


@dataclass
class PointerEvent:
    x: float
    y: float
    stopped: bool = False
    hit: Optional[Hit] = None

    def stop_propagation(self) -> None:
        self.stopped = True


class PointerDispatcher:
    """Translates pointer input into store selection and hover."""

    def __init__(self, renderer: SceneRenderer, aspect: float = 1.0):
        self.renderer = renderer
        self.aspect = aspect

    def _hit(self, x: float, y: float) -> Optional[Hit]:
        ray = Ray.from_camera(self.renderer.camera, x, y, self.aspect)
        return pick(ray.to_local(self.renderer.group), self.renderer.primitives)

    def click(self, x: float, y: float) -> PointerEvent:
        event = PointerEvent(x, y)
        event.hit = self._hit(x, y)
        if event.hit is not None:
            self.renderer.store.select_node(event.hit.node_id)
            event.stop_propagation()
        self._background_click(event)
        return event

    def _background_click(self, event: PointerEvent) -> None:
        if not event.stopped:
            self.renderer.store.select_node(None)

    def move(self, x: float, y: float) -> PointerEvent:
        event = PointerEvent(x, y)
        event.hit = self._hit(x, y)
        if event.hit is not None:
            self.renderer.store.hover_node(event.hit.node_id)
            event.stop_propagation()
        else:
            self.renderer.store.hover_node(None)
        return event

    def leave(self) -> None:
        """Pointer left the canvas."""
        self.renderer.store.hover_node(None)
