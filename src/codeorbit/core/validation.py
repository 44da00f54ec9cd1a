"""
Graph integrity validation.

A graph delivered by a producer is checked before it may enter the store.
Two defects make a graph invalid:

- an edge whose source or target id is not a node of the graph,
- two nodes sharing an id.

Every issue is collected in graph order so the caller can report all of
them at once; nothing is partially accepted.
"""

from dataclasses import dataclass
from typing import List, Sequence, Set, Union

from .result import Err, Ok, Result
from .types import Graph


@dataclass(frozen=True)
class DanglingEdge:
    """An edge references a node id absent from the graph."""
    edge_id: str
    node_id: str

    def __str__(self) -> str:
        return f"edge '{self.edge_id}' references unknown node '{self.node_id}'"


@dataclass(frozen=True)
class DuplicateNodeId:
    """Two or more nodes share an id."""
    node_id: str

    def __str__(self) -> str:
        return f"duplicate node id '{self.node_id}'"


IntegrityIssue = Union[DanglingEdge, DuplicateNodeId]


class GraphIntegrityError(ValueError):
    """Raised when an invalid graph is offered to the store."""

    def __init__(self, issues: Sequence[IntegrityIssue]):
        self.issues = tuple(issues)
        preview = "; ".join(str(i) for i in self.issues[:5])
        more = f" (+{len(self.issues) - 5} more)" if len(self.issues) > 5 else ""
        super().__init__(f"Graph failed validation: {preview}{more}")


def validate(graph: Graph) -> Result[Graph, List[IntegrityIssue]]:
    """
    Check node id uniqueness and edge endpoint existence.

    Returns:
        Ok(graph) when the graph is sound, otherwise Err with every issue.
    """
    issues: List[IntegrityIssue] = []
    seen: Set[str] = set()
    reported: Set[str] = set()

    for node in graph.nodes:
        if node.id in seen:
            if node.id not in reported:
                issues.append(DuplicateNodeId(node.id))
                reported.add(node.id)
        else:
            seen.add(node.id)

    for edge in graph.edges:
        for endpoint in dict.fromkeys((edge.source, edge.target)):
            if endpoint not in seen:
                issues.append(DanglingEdge(edge.id, endpoint))

    if issues:
        return Err(issues)
    return Ok(graph)
