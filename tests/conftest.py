"""
Shared fixtures for codeorbit tests.
"""

import json

import pytest

from codeorbit.core.types import Edge, Graph, Node
from codeorbit.store.appearance import AppearanceStore, MemorySettingsBackend
from codeorbit.store.graph_store import GraphStore


def make_graph(nodes, edges=(), **metadata) -> Graph:
    """Build a Graph from plain payload dicts."""
    return Graph.model_validate({"nodes": list(nodes), "edges": list(edges), "metadata": metadata})


SCENARIO_NODES = [
    {"id": "n1", "type": "module", "name": "Main"},
    {"id": "n2", "type": "form", "name": "Login"},
]
SCENARIO_EDGES = [
    {"id": "e1", "source": "n1", "target": "n2", "type": "uses"},
]


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the real ~/.codeorbit."""
    home = tmp_path / "codeorbit-home"
    monkeypatch.setenv("CODEORBIT_HOME", str(home))
    return home


@pytest.fixture
def scenario_graph() -> Graph:
    """Two nodes (module, form) joined by one 'uses' edge."""
    return make_graph(SCENARIO_NODES, SCENARIO_EDGES, project_name="demo")


@pytest.fixture
def star_graph() -> Graph:
    """A hub with three spokes of different types plus one isolated node."""
    return make_graph(
        [
            {"id": "hub", "type": "class", "name": "UserService", "file_path": "src/users/service.py"},
            {"id": "a", "type": "function", "name": "create_user"},
            {"id": "b", "type": "function", "name": "delete_user"},
            {"id": "c", "type": "model", "name": "User"},
            {"id": "lonely", "type": "route", "name": "/health"},
        ],
        [
            {"source": "hub", "target": "a", "type": "contains"},
            {"source": "hub", "target": "b", "type": "contains"},
            {"source": "a", "target": "c", "type": "instantiates"},
            {"source": "hub", "target": "c", "type": "uses"},
        ],
        project_name="users",
    )


@pytest.fixture
def store() -> GraphStore:
    return GraphStore()


@pytest.fixture
def loaded_store(store, scenario_graph) -> GraphStore:
    store.set_graph(scenario_graph)
    return store


@pytest.fixture
def memory_backend() -> MemorySettingsBackend:
    return MemorySettingsBackend()


@pytest.fixture
def appearance(memory_backend) -> AppearanceStore:
    return AppearanceStore(backend=memory_backend).open()


@pytest.fixture
def graph_file(tmp_path, star_graph):
    """The star graph written as a producer payload."""
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(star_graph.model_dump(mode="json", by_alias=True, exclude_none=True)))
    return path


@pytest.fixture
def graph_builder():
    """The make_graph helper as a fixture."""
    return make_graph


@pytest.fixture
def node_factory():
    def _make(node_id: str, node_type: str = "module", name: str = None, **fields) -> Node:
        return Node(id=node_id, type=node_type, name=name or node_id, **fields)
    return _make


@pytest.fixture
def edge_factory():
    def _make(source: str, target: str, edge_type: str = "uses", **fields) -> Edge:
        return Edge(source=source, target=target, type=edge_type, **fields)
    return _make
