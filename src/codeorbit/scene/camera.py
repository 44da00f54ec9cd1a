"""
Camera rig.

``OrbitCamera`` orbits a target point: rotate, pan and zoom requests are
accumulated and then eased in by ``update()`` with a damping factor, the
way orbit controls behave in a browser 3D scene.

``SceneGroup`` holds the rotation of the whole node group. Auto-rotation
advances by ``speed * dt`` so it does not depend on the frame rate.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from ..config import (
    CAMERA_DAMPING,
    CAMERA_FOV,
    CAMERA_MAX_DISTANCE,
    CAMERA_MIN_DISTANCE,
    CAMERA_POSITION,
    CAMERA_ROTATE_SPEED,
    CAMERA_ZOOM_SPEED,
)
from .geometry import Vec3, add, cross, length, normalize, rotate_y, scale, sub

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)

# Keeps the polar angle away from the poles where the basis degenerates
_PHI_EPSILON = 1e-6


@dataclass(frozen=True)
class CameraState:
    """Snapshot of the camera for a rendered frame."""
    position: Vec3
    target: Vec3
    fov: float


class OrbitCamera:
    """
    Orbit-style camera with damping.

    Spherical coordinates are measured around ``target``: ``theta`` is the
    azimuth around +Y, ``phi`` the polar angle from +Y.
    """

    def __init__(
        self,
        position: Vec3 = CAMERA_POSITION,
        target: Vec3 = (0.0, 0.0, 0.0),
        fov: float = CAMERA_FOV,
        damping: float = CAMERA_DAMPING,
        rotate_speed: float = CAMERA_ROTATE_SPEED,
        zoom_speed: float = CAMERA_ZOOM_SPEED,
        min_distance: float = CAMERA_MIN_DISTANCE,
        max_distance: float = CAMERA_MAX_DISTANCE,
    ):
        self.fov = fov
        self.damping = damping
        self.rotate_speed = rotate_speed
        self.zoom_speed = zoom_speed
        self.min_distance = min_distance
        self.max_distance = max_distance

        self.target: Vec3 = target
        offset = sub(position, target)
        distance = length(offset) or 1.0
        self.radius = min(max_distance, max(min_distance, distance))
        self.theta = math.atan2(offset[0], offset[2])
        self.phi = math.acos(max(-1.0, min(1.0, offset[1] / distance)))

        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._zoom_scale = 1.0
        self._pan: Vec3 = (0.0, 0.0, 0.0)

    # =========================================================================
    # Derived
    # =========================================================================

    @property
    def position(self) -> Vec3:
        sin_phi = math.sin(self.phi)
        offset = (
            self.radius * sin_phi * math.sin(self.theta),
            self.radius * math.cos(self.phi),
            self.radius * sin_phi * math.cos(self.theta),
        )
        return add(self.target, offset)

    def basis(self) -> Tuple[Vec3, Vec3, Vec3]:
        """(forward, right, up) unit vectors of the view."""
        forward = normalize(sub(self.target, self.position))
        right = normalize(cross(forward, WORLD_UP))
        up = cross(right, forward)
        return forward, right, up

    def state(self) -> CameraState:
        return CameraState(position=self.position, target=self.target, fov=self.fov)

    @property
    def is_settled(self) -> bool:
        """True when no damped motion is pending."""
        return (
            abs(self._delta_theta) < 1e-9
            and abs(self._delta_phi) < 1e-9
            and abs(self._zoom_scale - 1.0) < 1e-9
            and length(self._pan) < 1e-9
        )

    # =========================================================================
    # Input
    # =========================================================================

    def rotate(self, dx: float, dy: float) -> None:
        """Queue an orbit by pointer deltas in radians before speed scaling."""
        self._delta_theta -= dx * self.rotate_speed
        self._delta_phi -= dy * self.rotate_speed

    def zoom(self, steps: float) -> None:
        """Queue a dolly; positive steps move towards the target."""
        self._zoom_scale *= 0.95 ** (self.zoom_speed * steps)

    def pan(self, dx: float, dy: float) -> None:
        """Queue a target shift in view-plane units scaled by distance."""
        _, right, up = self.basis()
        factor = self.radius * math.tan(math.radians(self.fov) / 2)
        shift = add(scale(right, -dx * factor), scale(up, dy * factor))
        self._pan = add(self._pan, shift)

    # =========================================================================
    # Frame update
    # =========================================================================

    def update(self) -> None:
        """Ease pending motion in by the damping factor."""
        d = self.damping if self.damping > 0 else 1.0

        self.theta += self._delta_theta * d
        self.phi += self._delta_phi * d
        self.phi = max(_PHI_EPSILON, min(math.pi - _PHI_EPSILON, self.phi))

        self.target = add(self.target, scale(self._pan, d))

        step = self._zoom_scale ** d
        self.radius = max(self.min_distance, min(self.max_distance, self.radius * step))

        remaining = 1.0 - d
        self._delta_theta *= remaining
        self._delta_phi *= remaining
        self._pan = scale(self._pan, remaining)
        self._zoom_scale = self._zoom_scale ** remaining


class SceneGroup:
    """The rotating group that holds every node primitive."""

    def __init__(self, rotation_y: float = 0.0):
        self.rotation_y = rotation_y

    def advance(self, dt: float, speed: float) -> float:
        """Rotate by ``speed`` radians per second over ``dt`` seconds."""
        if speed and dt > 0:
            self.rotation_y = (self.rotation_y + speed * dt) % math.tau
        return self.rotation_y

    def to_world(self, point: Vec3) -> Vec3:
        return rotate_y(point, self.rotation_y)

    def to_local(self, point: Vec3, rotation: Optional[float] = None) -> Vec3:
        return rotate_y(point, -(self.rotation_y if rotation is None else rotation))
