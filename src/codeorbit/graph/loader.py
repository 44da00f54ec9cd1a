"""
Graph payload loading.

The scanner that produces graphs lives outside codeorbit; this module only
reads its JSON payload from disk:

{
    "nodes": [{"id": "...", "node_type": "module", "name": "...", ...}, ...],
    "edges": [{"id": "...", "source": "...", "target": "...", "edge_type": "uses", ...}, ...],
    "metadata": {"project_name": "...", ...}
}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from ..core.types import Graph

logger = logging.getLogger(__name__)


class GraphLoadError(Exception):
    """Raised when a graph payload cannot be read or does not fit the schema."""


def parse_graph(data: Dict[str, Any]) -> Graph:
    """Build a Graph from an already-decoded payload."""
    if not isinstance(data, dict):
        raise GraphLoadError(f"Graph payload must be an object, got {type(data).__name__}")
    try:
        return Graph.model_validate(data)
    except ValidationError as e:
        raise GraphLoadError(f"Invalid graph payload: {e.error_count()} error(s)\n{e}") from e


def load_graph(path: Union[str, Path]) -> Graph:
    """
    Read a graph payload from a JSON file.

    Raises:
        GraphLoadError: if the file is missing or unreadable, is not UTF-8 JSON,
            or does not match the graph schema.
    """
    graph_path = Path(path)
    if not graph_path.is_file():
        raise GraphLoadError(f"Graph file not found: {graph_path}")

    try:
        text = graph_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise GraphLoadError(f"{graph_path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise GraphLoadError(f"Cannot read {graph_path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"{graph_path} is not valid JSON: {e}") from e

    graph = parse_graph(data)
    logger.debug(f"Loaded {graph.node_count} nodes and {graph.edge_count} edges from {graph_path}")
    return graph


def dump_graph(graph: Graph, path: Union[str, Path]) -> Path:
    """Write a graph in the producer's wire format."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    payload = graph.model_dump(mode="json", by_alias=True, exclude_none=True)
    out.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return out
