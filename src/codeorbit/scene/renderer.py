"""
Scene Renderer.

Turns the store's filtered view into scene primitives: one sphere per
visible node, lines for the visible edges and floating labels for the
selected and hovered node.

The renderer owns no graph state. It only keeps render-side derived data:
the primitives of the last sync, their visual keys, and the ids connected
to the current selection. Store notifications mark it dirty; the next
``frame(dt)`` re-syncs and rebuilds only the primitives whose visual key
changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from ..config import EDGE_COLOR, LABEL_OFFSET_FACTOR, NODE_RADIUS_FACTOR, SELECTED_EDGE_COLOR
from ..core.types import Edge, Node
from ..store.appearance import AppearanceStore
from ..store.events import StoreEvent
from ..store.graph_store import GraphStore
from .camera import CameraState, OrbitCamera, SceneGroup
from .geometry import Vec3
from .visuals import NodeVisualState, visual_state

logger = logging.getLogger(__name__)

_ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class EdgeMode(StrEnum):
    """Which filtered edges become line primitives."""
    SELECTION = "selection"  # only edges touching the selected node
    ALL = "all"


@dataclass(frozen=True)
class NodePrimitive:
    node_id: str
    position: Vec3
    radius: float
    color: str
    emissive_intensity: float
    show_ring: bool
    type_label: str


@dataclass(frozen=True)
class EdgeLine:
    edge_id: str
    source: Vec3
    target: Vec3
    color: str
    type_label: str


@dataclass(frozen=True)
class Label:
    node_id: str
    text: str
    position: Vec3


@dataclass(frozen=True)
class SyncReport:
    """Node primitive ids touched by one sync."""
    added: Tuple[str, ...] = ()
    updated: Tuple[str, ...] = ()
    removed: Tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)


@dataclass(frozen=True)
class RenderFrame:
    """One immutable snapshot of the scene."""
    nodes: Tuple[NodePrimitive, ...]
    edges: Tuple[EdgeLine, ...]
    labels: Tuple[Label, ...]
    group_rotation: float
    camera: CameraState
    placeholder: bool
    no_results: bool


def _position(node: Node) -> Vec3:
    return node.position.as_tuple() if node.position is not None else _ORIGIN


class SceneRenderer:
    """
    Projects a GraphStore and an AppearanceStore onto scene primitives.

    Usage:
        renderer = SceneRenderer(store, appearance)
        frame = renderer.frame(dt)   # once per display frame
        renderer.close()
    """

    def __init__(
        self,
        store: GraphStore,
        appearance: AppearanceStore,
        edge_mode: EdgeMode = EdgeMode.SELECTION,
        camera: Optional[OrbitCamera] = None,
        group: Optional[SceneGroup] = None,
    ):
        self.store = store
        self.appearance = appearance
        self.edge_mode = EdgeMode(edge_mode)
        self.camera = camera or OrbitCamera()
        self.group = group or SceneGroup()

        self._dirty = True
        self._connected: FrozenSet[str] = frozenset()
        self._primitives: Dict[str, NodePrimitive] = {}
        self._keys: Dict[str, tuple] = {}
        self._edges: Tuple[EdgeLine, ...] = ()
        self._labels: Tuple[Label, ...] = ()
        self.last_sync = SyncReport()

        self._unsubscribers: List[Callable[[], None]] = [
            store.subscribe(self._on_store_change),
            appearance.subscribe(self._on_appearance_change),
        ]
        self._refresh_connected()

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def _on_store_change(self, store: GraphStore, event: StoreEvent) -> None:
        if event in (StoreEvent.SELECTION, StoreEvent.GRAPH):
            self._refresh_connected()
        if event != StoreEvent.ANNOTATION:
            self._dirty = True

    def _on_appearance_change(self, appearance: AppearanceStore, event: StoreEvent) -> None:
        self._dirty = True

    def _refresh_connected(self) -> None:
        selected = self.store.selected_node
        self._connected = self.store.connected_node_ids(selected.id if selected else None)

    def close(self) -> None:
        """Stop listening to both stores."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def connected_ids(self) -> FrozenSet[str]:
        return self._connected

    # =========================================================================
    # Frame loop
    # =========================================================================

    def frame(self, dt: float = 0.0) -> RenderFrame:
        """
        Advance one display frame by ``dt`` seconds.

        Camera damping and auto-rotation advance every frame; primitives are
        re-synced only when a store changed since the last frame.
        """
        self.camera.update()
        self.group.advance(dt, self.appearance.rotation_speed)
        if self._dirty:
            self.sync()
        return self.snapshot()

    def sync(self) -> SyncReport:
        """Rebuild primitives whose visual key changed."""
        nodes = self.store.filtered_nodes()
        selected = self.store.selected_node
        hovered = self.store.hovered_node
        selected_id = selected.id if selected else None
        hovered_id = hovered.id if hovered else None
        multiplier = self.appearance.node_size_multiplier

        added: List[str] = []
        updated: List[str] = []
        primitives: Dict[str, NodePrimitive] = {}
        keys: Dict[str, tuple] = {}
        states: Dict[str, NodeVisualState] = {}

        for node in nodes:
            state = visual_state(
                node.id == selected_id,
                node.id == hovered_id,
                node.id in self._connected,
            )
            states[node.id] = state
            color = self.appearance.color_for(node.type_label)
            key = (_position(node), node.size, color, multiplier, state)
            keys[node.id] = key

            if self._keys.get(node.id) == key:
                primitives[node.id] = self._primitives[node.id]
                continue

            if node.id in self._primitives:
                updated.append(node.id)
            else:
                added.append(node.id)
            primitives[node.id] = NodePrimitive(
                node_id=node.id,
                position=_position(node),
                radius=node.size * NODE_RADIUS_FACTOR * multiplier * state.scale,
                color=color,
                emissive_intensity=state.emissive_intensity,
                show_ring=state.show_ring,
                type_label=node.type_label,
            )

        removed = tuple(node_id for node_id in self._primitives if node_id not in primitives)

        self._primitives = primitives
        self._keys = keys
        self._edges = self._build_edges(primitives, selected_id)
        self._labels = self._build_labels(nodes, states, multiplier)
        self._dirty = False

        self.last_sync = SyncReport(tuple(added), tuple(updated), removed)
        if self.last_sync.changed:
            logger.debug(
                f"Scene sync: {len(added)} added, {len(updated)} updated, "
                f"{len(removed)} removed"
            )
        return self.last_sync

    def _edge_visible(self, edge: Edge, selected_id: Optional[str]) -> bool:
        if self.edge_mode == EdgeMode.ALL:
            return True
        return selected_id is not None and edge.touches(selected_id)

    def _build_edges(
        self, primitives: Dict[str, NodePrimitive], selected_id: Optional[str]
    ) -> Tuple[EdgeLine, ...]:
        lines = []
        for edge in self.store.filtered_edges():
            if not self._edge_visible(edge, selected_id):
                continue
            highlighted = selected_id is not None and edge.touches(selected_id)
            lines.append(EdgeLine(
                edge_id=edge.id,
                source=primitives[edge.source].position,
                target=primitives[edge.target].position,
                color=SELECTED_EDGE_COLOR if highlighted else EDGE_COLOR,
                type_label=edge.type_label,
            ))
        return tuple(lines)

    def _build_labels(
        self,
        nodes: Tuple[Node, ...],
        states: Dict[str, NodeVisualState],
        multiplier: float,
    ) -> Tuple[Label, ...]:
        labels = []
        for node in nodes:
            if not states[node.id].show_label:
                continue
            x, y, z = _position(node)
            offset = node.size * LABEL_OFFSET_FACTOR * multiplier
            labels.append(Label(node_id=node.id, text=node.label or node.name, position=(x, y + offset, z)))
        return tuple(labels)

    # =========================================================================
    # Snapshot
    # =========================================================================

    @property
    def primitives(self) -> Tuple[NodePrimitive, ...]:
        return tuple(self._primitives.values())

    def snapshot(self) -> RenderFrame:
        graph = self.store.graph
        placeholder = graph is None or graph.node_count == 0
        return RenderFrame(
            nodes=self.primitives,
            edges=self._edges,
            labels=self._labels,
            group_rotation=self.group.rotation_y,
            camera=self.camera.state(),
            placeholder=placeholder,
            no_results=not placeholder and not self._primitives,
        )
