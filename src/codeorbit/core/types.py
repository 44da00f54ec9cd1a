"""
Core type definitions for codeorbit.

The graph payload delivered by an external scanner is described here as
immutable pydantic models. Node and edge kinds are open enumerations: a
closed set of named variants plus a ``CustomType`` escape variant that
carries any label a parser produces but the core does not enumerate.
"""

from collections import Counter
from enum import StrEnum
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..config import (
    CUSTOM_TYPE_LABEL,
    DEFAULT_NODE_SIZE,
    NODE_SIZE_MAX,
    NODE_SIZE_MIN,
)


class NodeType(StrEnum):
    """Categories of source-code entities."""
    # Files
    SOURCE_FILE = "source_file"
    CONFIG_FILE = "config_file"
    FORM_FILE = "form_file"

    # Code structures
    MODULE = "module"
    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    ENUM = "enum"
    STRUCT = "struct"

    # Functions
    FUNCTION = "function"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    DESTRUCTOR = "destructor"

    # UI components
    COMPONENT = "component"
    FORM = "form"
    PAGE = "page"
    VIEW = "view"

    # Web/API
    ROUTE = "route"
    CONTROLLER = "controller"
    MIDDLEWARE = "middleware"

    # Data
    MODEL = "model"
    MIGRATION = "migration"
    TABLE = "table"
    QUERY = "query"

    # Other
    PACKAGE = "package"
    VARIABLE = "variable"
    CONSTANT = "constant"


class EdgeType(StrEnum):
    """Types of relations between entities."""
    USES = "uses"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    INCLUDES = "includes"
    CONTAINS = "contains"
    DEFINES = "defines"
    BELONGS_TO = "belongs_to"
    CALLS = "calls"
    INSTANTIATES = "instantiates"
    FILE_PAIR = "file_pair"
    ROUTES = "routes"
    RENDERS = "renders"
    QUERIES_TABLE = "queries_table"
    HAS_RELATION = "has_relation"
    REFERENCES = "references"


class NodeStatus(StrEnum):
    """Review status a user or parser can attach to a node."""
    OK = "ok"
    REVIEW = "review"
    DEPRECATED = "deprecated"
    CRITICAL = "critical"
    TODO = "todo"


class CustomType(BaseModel):
    """
    Escape variant for node/edge kinds the enumerations do not cover.

    Serialized as ``{"custom": "<label>"}``.
    """
    model_config = ConfigDict(frozen=True)

    custom: str

    def __str__(self) -> str:
        return self.custom


NodeKind = Union[NodeType, CustomType]
EdgeKind = Union[EdgeType, CustomType]


def type_label(kind: Union[NodeKind, EdgeKind]) -> str:
    """
    Filter label of a node or edge kind.

    Named variants use their enum value; every custom kind shares the
    ``custom`` label.
    """
    if isinstance(kind, CustomType):
        return CUSTOM_TYPE_LABEL
    return kind.value


def _coerce_kind(value: Any, enum_cls: type) -> Any:
    """Map a raw producer value onto a named variant or the escape variant."""
    if isinstance(value, (enum_cls, CustomType)):
        return value
    if isinstance(value, str):
        try:
            return enum_cls(value)
        except ValueError:
            return CustomType(custom=value)
    if isinstance(value, dict) and "custom" in value:
        return CustomType(custom=str(value["custom"]))
    return value


class Position3D(BaseModel):
    """A point in scene space."""
    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


class Node(BaseModel):
    """
    A source-code entity.

    ``id`` is opaque and unique within a graph. ``qualified_name`` and
    ``label`` default to ``name`` when a producer omits them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    type: NodeKind = Field(alias="node_type")
    name: str
    qualified_name: str = ""
    label: str = ""
    size: float = DEFAULT_NODE_SIZE
    language: str = ""
    file_path: Optional[str] = None
    line_start: Optional[int] = None
    line_end: Optional[int] = None
    position: Optional[Position3D] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_names(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("name") is not None:
            data = dict(data)
            if not data.get("qualified_name"):
                data["qualified_name"] = data["name"]
            if not data.get("label"):
                data["label"] = data["name"]
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        return _coerce_kind(value, NodeType)

    @field_validator("size")
    @classmethod
    def _clamp_size(cls, value: float) -> float:
        return min(NODE_SIZE_MAX, max(NODE_SIZE_MIN, value))

    @property
    def type_label(self) -> str:
        return type_label(self.type)

    @property
    def status(self) -> Optional[NodeStatus]:
        """Review status from metadata, or None when absent or unknown."""
        raw = self.metadata.get("status")
        try:
            return NodeStatus(raw) if raw is not None else None
        except ValueError:
            return None

    def with_position(self, position: Position3D) -> "Node":
        return self.model_copy(update={"position": position})

    def matches(self, query: str) -> bool:
        """
        Case-insensitive substring match on name, qualified name or file path.

        An empty query matches every node.
        """
        if not query:
            return True
        needle = query.lower()
        return (
            needle in self.name.lower()
            or needle in self.qualified_name.lower()
            or (self.file_path is not None and needle in self.file_path.lower())
        )

    def __hash__(self):
        return hash((Node, self.id))


class Edge(BaseModel):
    """
    Directed relation between two nodes.

    When a producer omits the id, it is derived from the endpoints and the
    relation label.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    source: str
    target: str
    type: EdgeKind = Field(alias="edge_type")
    weight: float = 1.0
    label: Optional[str] = None
    detail: Optional[str] = None
    bidirectional: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("id"):
            raw_type = data.get("edge_type", data.get("type"))
            kind = _coerce_kind(raw_type, EdgeType)
            if isinstance(kind, (EdgeType, CustomType)):
                data = dict(data)
                data["id"] = f"{data.get('source')}->{data.get('target')}:{type_label(kind)}"
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        return _coerce_kind(value, EdgeType)

    @property
    def type_label(self) -> str:
        return type_label(self.type)

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def other_end(self, node_id: str) -> str:
        """The endpoint opposite ``node_id``."""
        return self.target if self.source == node_id else self.source

    def __hash__(self):
        return hash((Edge, self.id))


class GraphMetadata(BaseModel):
    """Producer-supplied facts about the scanned project."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    project_name: str = ""
    root_path: str = ""
    language: str = ""
    total_files: int = 0
    total_lines: Optional[int] = None
    scanned_at: Optional[str] = None
    parser_version: str = ""


class Graph(BaseModel):
    """
    Complete graph payload.

    Node and edge order is insertion order. It is preserved for stable
    iteration and carries no priority.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    metadata: GraphMetadata = Field(default_factory=GraphMetadata)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def find_node(self, node_id: str) -> Optional[Node]:
        """Find a node by ID."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def edges_from(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.source == node_id]

    def edges_to(self, node_id: str) -> List[Edge]:
        return [e for e in self.edges if e.target == node_id]

    def in_degree(self, node_id: str) -> int:
        return len(self.edges_to(node_id))

    def out_degree(self, node_id: str) -> int:
        return len(self.edges_from(node_id))

    def node_types(self) -> List[str]:
        """Distinct node type labels, in first-seen order."""
        return list(dict.fromkeys(n.type_label for n in self.nodes))

    def edge_types(self) -> List[str]:
        """Distinct edge type labels, in first-seen order."""
        return list(dict.fromkeys(e.type_label for e in self.edges))

    def node_type_counts(self) -> Dict[str, int]:
        return dict(Counter(n.type_label for n in self.nodes))

    def edge_type_counts(self) -> Dict[str, int]:
        return dict(Counter(e.type_label for e in self.edges))

    def with_nodes(self, nodes: Tuple[Node, ...]) -> "Graph":
        return self.model_copy(update={"nodes": tuple(nodes)})
