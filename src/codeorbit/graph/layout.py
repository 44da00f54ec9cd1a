"""
Layout Engine.

Assigns a 3D position to every node that lacks one. Placement is
deterministic: the index-based policies are pure functions of
``(node index, node count)`` and seed any jitter from the node index, so
re-laying out the same graph always yields the same coordinates.

Policies:
- spherical: golden-angle spiral over a sphere with a small radius jitter
- grid: square grid with a small depth jitter
- force: seeded force-directed relaxation (networkx) that consults edges

Existing positions are never moved.
"""

from __future__ import annotations

import logging
import math
import random
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import networkx as nx

from ..config import (
    FORCE_ITERATIONS,
    FORCE_SCALE,
    GRID_DEPTH_JITTER,
    GRID_SPACING,
    SPHERE_JITTER,
    SPHERE_RADIUS,
)
from ..core.types import Graph, Node, Position3D

logger = logging.getLogger(__name__)


class LayoutPolicy(ABC):
    """Strategy interface shared by every layout."""

    name: str = ""

    @abstractmethod
    def layout(self, graph: Graph) -> Graph:
        """Return a graph in which every node has a position."""


class IndexLayout(LayoutPolicy):
    """
    Base for layouts that ignore edges.

    Subclasses only decide where the i-th of n nodes goes.
    """

    @abstractmethod
    def position_for(self, index: int, total: int) -> Position3D:
        """Position of node ``index`` out of ``total``."""

    def positions(self, total: int) -> List[Position3D]:
        return [self.position_for(i, total) for i in range(total)]

    def layout(self, graph: Graph) -> Graph:
        total = graph.node_count
        missing = sum(1 for n in graph.nodes if n.position is None)
        if not missing:
            return graph

        nodes = tuple(
            node if node.position is not None
            else node.with_position(self.position_for(index, total))
            for index, node in enumerate(graph.nodes)
        )
        logger.debug(f"{self.name} layout placed {missing} of {total} nodes")
        return graph.with_nodes(nodes)


class SphericalLayout(IndexLayout):
    """
    Fibonacci spiral over a sphere surface.

    ``phi = acos(-1 + 2i/n)`` and ``theta = sqrt(n*pi) * phi``; the radius
    is perturbed by at most ``jitter / 2`` so the shell is not perfectly flat.
    """

    name = "spherical"

    def __init__(self, radius: float = SPHERE_RADIUS, jitter: float = SPHERE_JITTER):
        self.radius = radius
        self.jitter = jitter

    def position_for(self, index: int, total: int) -> Position3D:
        rng = random.Random(index)
        phi = math.acos(-1 + (2 * index) / total)
        theta = math.sqrt(total * math.pi) * phi
        r = self.radius + (rng.random() - 0.5) * self.jitter
        return Position3D(
            x=r * math.cos(theta) * math.sin(phi),
            y=r * math.sin(theta) * math.sin(phi),
            z=r * math.cos(phi),
        )


class GridLayout(IndexLayout):
    """
    Square grid centred on the origin.

    ``cols = ceil(sqrt(n))``; depth is jittered by at most
    ``depth_jitter / 2``.
    """

    name = "grid"

    def __init__(self, spacing: float = GRID_SPACING, depth_jitter: float = GRID_DEPTH_JITTER):
        self.spacing = spacing
        self.depth_jitter = depth_jitter

    def position_for(self, index: int, total: int) -> Position3D:
        rng = random.Random(index)
        cols = math.ceil(math.sqrt(total))
        rows = math.ceil(total / cols)
        row, col = divmod(index, cols)
        return Position3D(
            x=(col - cols / 2) * self.spacing,
            y=(row - rows / 2) * self.spacing,
            z=(rng.random() - 0.5) * self.depth_jitter,
        )


class ForceDirectedLayout(LayoutPolicy):
    """
    Seeded Fruchterman-Reingold relaxation in three dimensions.

    Unlike the index layouts this consults edges: connected nodes are pulled
    together, weighted by edge weight. Nodes that already have a position
    are pinned in place.
    """

    name = "force"

    def __init__(
        self,
        scale: float = FORCE_SCALE,
        seed: int = 0,
        iterations: int = FORCE_ITERATIONS,
    ):
        self.scale = scale
        self.seed = seed
        self.iterations = iterations

    def _build(self, graph: Graph) -> nx.Graph:
        g = nx.Graph()
        g.add_nodes_from(n.id for n in graph.nodes)
        for edge in graph.edges:
            if edge.source == edge.target:
                continue
            if g.has_edge(edge.source, edge.target):
                g[edge.source][edge.target]["weight"] += edge.weight
            else:
                g.add_edge(edge.source, edge.target, weight=edge.weight)
        return g

    def layout(self, graph: Graph) -> Graph:
        if all(n.position is not None for n in graph.nodes):
            return graph

        pinned: Dict[str, tuple] = {
            n.id: n.position.as_tuple() for n in graph.nodes if n.position is not None
        }
        coords = nx.spring_layout(
            self._build(graph),
            dim=3,
            seed=self.seed,
            iterations=self.iterations,
            weight="weight",
            scale=self.scale,
            pos=pinned or None,
            fixed=list(pinned) or None,
        )

        nodes = tuple(
            node if node.position is not None
            else node.with_position(_to_position(coords[node.id]))
            for node in graph.nodes
        )
        logger.debug(f"force layout placed {len(nodes) - len(pinned)} nodes ({len(pinned)} pinned)")
        return graph.with_nodes(nodes)


def _to_position(coords) -> Position3D:
    x, y, z = (float(c) for c in coords)
    return Position3D(x=x, y=y, z=z)


LAYOUTS: Dict[str, Type[LayoutPolicy]] = {
    SphericalLayout.name: SphericalLayout,
    GridLayout.name: GridLayout,
    ForceDirectedLayout.name: ForceDirectedLayout,
}


def get_layout(name: str, **options) -> LayoutPolicy:
    """Instantiate a layout policy by name."""
    try:
        return LAYOUTS[name](**options)
    except KeyError:
        raise ValueError(
            f"Unknown layout '{name}'. Choose from: {', '.join(sorted(LAYOUTS))}"
        ) from None


def apply_layout(graph: Graph, policy: Optional[LayoutPolicy] = None) -> Graph:
    """Fill in missing positions, defaulting to the spherical layout."""
    return (policy or SphericalLayout()).layout(graph)


def clear_positions(graph: Graph) -> Graph:
    """Drop every position so the next layout places all nodes afresh."""
    nodes = tuple(_unplaced(n) for n in graph.nodes)
    return graph.with_nodes(nodes)


def _unplaced(node: Node) -> Node:
    if node.position is None:
        return node
    return node.model_copy(update={"position": None})
