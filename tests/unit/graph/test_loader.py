"""
Unit tests for graph payload loading.
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from codeorbit.core.types import CustomType, NodeType
from codeorbit.graph.loader import GraphLoadError, dump_graph, load_graph, parse_graph


class TestParseGraph:
    """Payload dict to Graph."""

    def test_wire_aliases(self):
        graph = parse_graph({
            "nodes": [{"id": "n1", "node_type": "module", "name": "Main"}],
            "edges": [],
            "metadata": {"project_name": "demo", "total_files": 3},
        })
        assert graph.nodes[0].type is NodeType.MODULE
        assert graph.metadata.project_name == "demo"

    def test_missing_sections_default_to_empty(self):
        graph = parse_graph({})
        assert graph.node_count == 0
        assert graph.edge_count == 0

    def test_custom_types_survive(self):
        graph = parse_graph({"nodes": [{"id": "n1", "node_type": {"custom": "hook"}, "name": "h"}]})
        assert graph.nodes[0].type == CustomType(custom="hook")

    def test_schema_error(self):
        with pytest.raises(GraphLoadError, match="Invalid graph payload"):
            parse_graph({"nodes": [{"id": "n1"}]})

    def test_non_object_payload(self):
        with pytest.raises(GraphLoadError, match="must be an object"):
            parse_graph([1, 2, 3])


class TestLoadGraph:
    """Reading and writing graph files."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(GraphLoadError, match="not found"):
            load_graph(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(GraphLoadError, match="not valid JSON"):
            load_graph(path)

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "latin1.json"
        path.write_bytes(b'{"nodes": [{"id": "\xff", "type": "module", "name": "m"}]}')
        with pytest.raises(GraphLoadError, match="not UTF-8"):
            load_graph(path)

    def test_unreadable_file(self, graph_file):
        with patch.object(Path, "read_text", side_effect=PermissionError("denied")):
            with pytest.raises(GraphLoadError, match="Cannot read"):
                load_graph(graph_file)

    def test_load_file(self, graph_file):
        graph = load_graph(graph_file)
        assert graph.node_count == 5
        assert graph.find_node("hub").file_path == "src/users/service.py"

    def test_dump_uses_wire_names(self, tmp_path, scenario_graph):
        out = dump_graph(scenario_graph, tmp_path / "out" / "graph.json")
        data = json.loads(out.read_text())
        assert data["nodes"][0]["node_type"] == "module"
        assert data["edges"][0]["edge_type"] == "uses"
        assert "position" not in data["nodes"][0]

    def test_dump_then_load_keeps_graph(self, tmp_path, star_graph):
        path = dump_graph(star_graph, tmp_path / "graph.json")
        assert load_graph(path).model_dump() == star_graph.model_dump()
