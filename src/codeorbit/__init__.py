"""
codeorbit - Interactive 3D explorer for scanned source-code graphs.

codeorbit takes the graph produced by an external source scanner (files,
modules, classes, forms, tables... connected by uses/calls/extends/...)
and turns it into an explorable 3D scene.

Key Components:
- core: Graph value types, validation and the Result type
- graph: Layout engine and graph payload loading
- store: Reactive graph store and persisted appearance settings
- scene: Scene renderer, camera rig, picking and the HTML viewer

Usage:
    from codeorbit import GraphStore, load_graph

    store = GraphStore()
    store.set_graph(load_graph("graph.json"))
    store.toggle_node_type("form")
    visible = store.filtered_nodes()
"""

__version__ = "0.1.0"

from .core.types import (
    CustomType, Edge, EdgeType, Graph, GraphMetadata,
    Node, NodeStatus, NodeType, Position3D,
)
from .core.validation import GraphIntegrityError, validate
from .graph.layout import ForceDirectedLayout, GridLayout, SphericalLayout, apply_layout
from .graph.loader import GraphLoadError, load_graph
from .store.appearance import AppearanceStore
from .scene.renderer import EdgeMode, SceneRenderer
from .store.graph_store import GraphStore

__all__ = [
    "__version__",
    "AppearanceStore",
    "CustomType",
    "Edge",
    "EdgeMode",
    "EdgeType",
    "ForceDirectedLayout",
    "Graph",
    "GraphIntegrityError",
    "GraphLoadError",
    "GraphMetadata",
    "GraphStore",
    "GridLayout",
    "Node",
    "NodeStatus",
    "NodeType",
    "Position3D",
    "SceneRenderer",
    "SphericalLayout",
    "apply_layout",
    "load_graph",
    "validate",
]
