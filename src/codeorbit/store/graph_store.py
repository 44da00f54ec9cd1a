"""
Graph Store.

The reactive single source of truth for the explorer. It holds:

- the current graph (immutable, replaced wholesale),
- the visible node/edge type sets and the free-text search query,
- the selected and hovered node,
- a side table of user annotations keyed by node id.

Filtered views are derived on read from (graph, type sets, query); they are
never stored as independent mutable state. A memo keyed by those inputs plus
a graph generation counter avoids recomputation between mutations, and
every mutation of an input produces a new key.

"No graph loaded" is a normal state: every accessor returns an empty result
instead of raising.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple, Union

from ..config import CUSTOM_TYPE_LABEL
from ..core.types import CustomType, Edge, Graph, Node, NodeStatus
from ..core.validation import GraphIntegrityError, validate
from ..graph.layout import LayoutPolicy, SphericalLayout
from .events import Observable, StoreEvent

logger = logging.getLogger(__name__)

NodeRef = Union[Node, str, None]
TypeRef = Union[str, Enum, CustomType]


@dataclass(frozen=True)
class Annotation:
    """User notes, tags and review status for one node."""
    notes: Optional[str] = None
    tags: Tuple[str, ...] = ()
    status: Optional[NodeStatus] = None

    @property
    def is_empty(self) -> bool:
        return self.notes is None and not self.tags and self.status is None


@dataclass(frozen=True)
class GraphStats:
    """Totals versus what currently passes the filters."""
    total_nodes: int
    total_edges: int
    visible_nodes: int
    visible_edges: int

    @property
    def is_filtered(self) -> bool:
        return self.visible_nodes != self.total_nodes or self.visible_edges != self.total_edges


def _label(kind: TypeRef) -> str:
    if isinstance(kind, CustomType):
        return CUSTOM_TYPE_LABEL
    if isinstance(kind, Enum):
        return str(kind.value)
    return str(kind)


class GraphStore(Observable):
    """
    Holds the current graph, filters and interaction state.

    Mutators notify subscribers with a ``StoreEvent`` after the change has
    been applied. ``set_graph`` is the only operation meant to be called
    from another thread; its state swap is atomic.
    """

    def __init__(self, layout: Optional[LayoutPolicy] = None, memoize: bool = True):
        super().__init__()
        self._layout = layout or SphericalLayout()
        self._memoize = memoize
        self._lock = threading.RLock()

        self._graph: Optional[Graph] = None
        self._node_index: Dict[str, Node] = {}
        self._generation = 0

        self._selected: Optional[Node] = None
        self._hovered: Optional[Node] = None

        self._visible_node_types: FrozenSet[str] = frozenset()
        self._visible_edge_types: FrozenSet[str] = frozenset()
        self._search_query = ""

        self._annotations: Dict[str, Annotation] = {}

        self._memo_key: Optional[tuple] = None
        self._memo: Tuple[Tuple[Node, ...], Tuple[Edge, ...]] = ((), ())

    # =========================================================================
    # State
    # =========================================================================

    @property
    def graph(self) -> Optional[Graph]:
        return self._graph

    @property
    def has_graph(self) -> bool:
        return self._graph is not None

    @property
    def selected_node(self) -> Optional[Node]:
        return self._selected

    @property
    def hovered_node(self) -> Optional[Node]:
        return self._hovered

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def visible_node_types(self) -> FrozenSet[str]:
        return self._visible_node_types

    @property
    def visible_edge_types(self) -> FrozenSet[str]:
        return self._visible_edge_types

    @property
    def layout(self) -> LayoutPolicy:
        return self._layout

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._node_index.get(node_id)

    # =========================================================================
    # Graph lifecycle
    # =========================================================================

    def set_graph(self, graph: Graph) -> None:
        """
        Validate, lay out and install a new graph.

        Every type present in the graph starts visible and any selection or
        hover from the previous graph is cleared.

        Raises:
            GraphIntegrityError: the graph has dangling edges or duplicate
                node ids. The store is left untouched.
        """
        result = validate(graph)
        if result.is_err():
            logger.debug(f"Rejected graph with {len(result.error)} integrity issue(s)")
            raise GraphIntegrityError(result.error)

        placed = self._layout.layout(graph)
        index = {node.id: node for node in placed.nodes}

        with self._lock:
            self._graph = placed
            self._node_index = index
            self._generation += 1
            self._visible_node_types = frozenset(placed.node_types())
            self._visible_edge_types = frozenset(placed.edge_types())
            self._selected = None
            self._hovered = None

        logger.debug(
            f"Installed graph '{placed.metadata.project_name}' "
            f"({placed.node_count} nodes, {placed.edge_count} edges)"
        )
        self._notify(StoreEvent.GRAPH)

    def clear_graph(self) -> None:
        """Remove the graph together with selection and hover."""
        with self._lock:
            self._graph = None
            self._node_index = {}
            self._generation += 1
            self._selected = None
            self._hovered = None
        self._notify(StoreEvent.GRAPH)

    # =========================================================================
    # Interaction
    # =========================================================================

    def _resolve(self, ref: NodeRef) -> Optional[Node]:
        if ref is None:
            return None
        if isinstance(ref, Node):
            if self._graph is None or ref.id in self._node_index:
                return ref
            ref = ref.id
        node = self._node_index.get(ref)
        if node is None:
            logger.debug(f"Node '{ref}' is not in the current graph; clearing")
        return node

    def select_node(self, ref: NodeRef) -> None:
        """
        Select a node, or clear the selection with None.

        A Node is stored as given when no graph is loaded, or when its id is
        in the current graph (even if filtered out). A node id is looked up in
        the current graph. Anything not in a loaded graph clears the selection.
        """
        node = self._resolve(ref)
        if node == self._selected:
            return
        with self._lock:
            self._selected = node
        self._notify(StoreEvent.SELECTION)

    def hover_node(self, ref: NodeRef) -> None:
        """Set or clear the hovered node. Hover never touches the selection."""
        node = self._resolve(ref)
        if node == self._hovered:
            return
        with self._lock:
            self._hovered = node
        self._notify(StoreEvent.HOVER)

    def set_search_query(self, query: str) -> None:
        """Set the free-text filter. An empty string disables it."""
        if query == self._search_query:
            return
        with self._lock:
            self._search_query = query
        self._notify(StoreEvent.SEARCH)

    def toggle_node_type(self, kind: TypeRef) -> None:
        """Show the node type if hidden, hide it if shown."""
        with self._lock:
            self._visible_node_types = self._visible_node_types ^ {_label(kind)}
        self._notify(StoreEvent.FILTER)

    def toggle_edge_type(self, kind: TypeRef) -> None:
        """Show the edge type if hidden, hide it if shown."""
        with self._lock:
            self._visible_edge_types = self._visible_edge_types ^ {_label(kind)}
        self._notify(StoreEvent.FILTER)

    def is_visible_type(self, kind: TypeRef) -> bool:
        return _label(kind) in self._visible_node_types

    # =========================================================================
    # Derived views
    # =========================================================================

    def _filtered(self) -> Tuple[Tuple[Node, ...], Tuple[Edge, ...]]:
        with self._lock:
            graph = self._graph
            node_types = self._visible_node_types
            edge_types = self._visible_edge_types
            query = self._search_query
            key = (self._generation, node_types, edge_types, query)

        if self._memoize and key == self._memo_key:
            return self._memo

        if graph is None:
            result: Tuple[Tuple[Node, ...], Tuple[Edge, ...]] = ((), ())
        else:
            nodes = tuple(
                n for n in graph.nodes
                if n.type_label in node_types and n.matches(query)
            )
            visible_ids = {n.id for n in nodes}
            edges = tuple(
                e for e in graph.edges
                if e.type_label in edge_types
                and e.source in visible_ids
                and e.target in visible_ids
            )
            result = (nodes, edges)

        if self._memoize:
            self._memo_key, self._memo = key, result
        return result

    def filtered_nodes(self) -> Tuple[Node, ...]:
        """
        Nodes whose type is visible and that match the search query.

        Graph order is preserved.
        """
        return self._filtered()[0]

    def filtered_edges(self) -> Tuple[Edge, ...]:
        """
        Edges whose type is visible and whose endpoints are both in
        ``filtered_nodes()``.
        """
        return self._filtered()[1]

    def node_type_counts(self) -> List[Tuple[str, int]]:
        """Node type labels with counts, most frequent first."""
        if self._graph is None:
            return []
        counts = self._graph.node_type_counts()
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    def edge_type_counts(self) -> List[Tuple[str, int]]:
        """Edge type labels with counts, most frequent first."""
        if self._graph is None:
            return []
        counts = self._graph.edge_type_counts()
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    def connections(self, ref: NodeRef, query: str = "") -> List[Edge]:
        """
        Edges of the full graph touching a node.

        ``query`` narrows the list to edges whose opposite endpoint name
        contains it, case-insensitively.
        """
        if self._graph is None or ref is None:
            return []
        node_id = ref.id if isinstance(ref, Node) else ref
        edges = [e for e in self._graph.edges if e.touches(node_id)]
        if not query:
            return edges

        needle = query.lower()
        matched = []
        for edge in edges:
            other_id = edge.other_end(node_id)
            other = self._node_index.get(other_id)
            name = other.name if other is not None else other_id
            if needle in name.lower():
                matched.append(edge)
        return matched

    def connected_node_ids(self, node_id: Optional[str]) -> FrozenSet[str]:
        """Ids of every node sharing an edge with ``node_id``."""
        if self._graph is None or node_id is None:
            return frozenset()
        return frozenset(
            e.other_end(node_id)
            for e in self._graph.edges
            if e.touches(node_id) and e.source != e.target
        )

    def stats(self) -> GraphStats:
        graph = self._graph
        return GraphStats(
            total_nodes=graph.node_count if graph else 0,
            total_edges=graph.edge_count if graph else 0,
            visible_nodes=len(self.filtered_nodes()),
            visible_edges=len(self.filtered_edges()),
        )

    # =========================================================================
    # Annotations
    # =========================================================================

    def annotate(
        self,
        node_id: str,
        notes: Optional[str] = None,
        tags: Optional[Sequence[str]] = None,
        status: Union[NodeStatus, str, None] = None,
    ) -> Annotation:
        """
        Record user notes, tags or status for a node id.

        Only the arguments given replace the stored values. The graph itself
        is never modified.
        """
        current = self._annotations.get(node_id, Annotation())
        changes = {}
        if notes is not None:
            changes["notes"] = notes
        if tags is not None:
            changes["tags"] = tuple(tags)
        if status is not None:
            changes["status"] = NodeStatus(status)

        updated = replace(current, **changes)
        with self._lock:
            self._annotations[node_id] = updated
        self._notify(StoreEvent.ANNOTATION)
        return updated

    def annotation_for(self, node_id: str) -> Annotation:
        """
        The effective annotation of a node.

        User annotations take precedence over notes, tags and status the
        producer placed in the node metadata.
        """
        stored = self._annotations.get(node_id, Annotation())
        node = self._node_index.get(node_id)
        if node is None:
            return stored

        raw_tags = node.metadata.get("tags") or ()
        if isinstance(raw_tags, str):
            raw_tags = (raw_tags,)
        return Annotation(
            notes=stored.notes if stored.notes is not None else node.metadata.get("notes"),
            tags=stored.tags or tuple(str(t) for t in raw_tags),
            status=stored.status if stored.status is not None else node.status,
        )

    def clear_annotations(self, node_id: Optional[str] = None) -> None:
        """Forget the annotation of one node, or of every node."""
        with self._lock:
            if node_id is None:
                self._annotations.clear()
            else:
                self._annotations.pop(node_id, None)
        self._notify(StoreEvent.ANNOTATION)
