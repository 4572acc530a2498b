"""Tests for flattening a DependencyGraph into its GAV-keyed wire form."""

from __future__ import annotations

import json

import pytest

from depotgraph.core.dependency import (
    Coordinate,
    DependencyGraph,
    ProjectDependencyVersionNode,
    ProjectVersion,
    SerializedGraph,
    flatten,
)
from depotgraph.exceptions import SerializationError


def _v(gav: str) -> ProjectVersion:
    return ProjectVersion.parse(gav)


def _diamond() -> DependencyGraph:
    g = DependencyGraph()
    g.add_node(_v("g:a:1"))
    for parent, child in (("g:a:1", "g:b:1"), ("g:a:1", "g:c:1"), ("g:b:1", "g:d:1"), ("g:c:1", "g:d:2")):
        g.set_edges(_v(parent), _v(child))
        g.add_node(_v(child), _v(parent))
    return g


class TestFlatten:
    """flatten() preserves nodes, roots and both edge directions."""

    def test_nodes_keyed_by_gav(self) -> None:
        flat = flatten(_diamond())
        assert set(flat.nodes) == {"g:a:1", "g:b:1", "g:c:1", "g:d:1", "g:d:2"}
        assert flat.root_nodes == {"g:a:1"}

    def test_node_ids_match_keys(self) -> None:
        flat = flatten(_diamond())
        for gav, node in flat.nodes.items():
            assert node.id == gav == node.gav

    def test_edges_as_gav_strings(self) -> None:
        flat = flatten(_diamond())
        assert flat.nodes["g:a:1"].forward_edges == {"g:b:1", "g:c:1"}
        assert flat.nodes["g:d:2"].back_edges == {"g:c:1"}
        assert flat.nodes["g:a:1"].back_edges == set()

    def test_project_ids(self) -> None:
        flat = flatten(_diamond(), {Coordinate("g", "d"): "PROD-4"})
        assert flat.nodes["g:d:1"].project_id == "PROD-4"
        assert flat.nodes["g:d:2"].project_id == "PROD-4"
        assert flat.nodes["g:a:1"].project_id is None

    def test_cyclic_graph_flattens(self) -> None:
        g = DependencyGraph()
        g.add_node(_v("g:a:1"))
        g.add_node(_v("g:b:1"), _v("g:a:1"))
        g.set_edges(_v("g:a:1"), _v("g:b:1"))
        g.set_edges(_v("g:b:1"), _v("g:a:1"))
        flat = flatten(g)
        assert flat.nodes["g:a:1"].back_edges == {"g:b:1"}
        json.loads(flat.to_json())


class TestReconstruct:
    """to_dependency_graph() rebuilds the same topology."""

    def test_round_trip(self) -> None:
        original = _diamond()
        rebuilt = flatten(original).to_dependency_graph()
        assert set(rebuilt.nodes) == set(original.nodes)
        assert set(rebuilt.root_nodes) == set(original.root_nodes)
        assert rebuilt.forward_edges == original.forward_edges
        assert rebuilt.back_edges == original.back_edges

    def test_json_round_trip(self) -> None:
        flat = flatten(_diamond(), {Coordinate("g", "a"): "P1"})
        again = SerializedGraph.from_json(flat.to_json())
        assert again == flat


class TestWireForm:
    """Field names and determinism of the JSON form."""

    def test_field_names(self) -> None:
        data = flatten(_diamond()).to_dict()
        assert set(data) == {"nodes", "rootNodes"}
        assert set(data["nodes"]["g:a:1"]) == {
            "groupId", "artifactId", "versionId", "projectId", "forwardEdges", "backEdges",
        }
        assert data["nodes"]["g:a:1"]["forwardEdges"] == ["g:b:1", "g:c:1"]

    def test_deterministic_json(self) -> None:
        assert flatten(_diamond()).to_json() == flatten(_diamond()).to_json()

    def test_get_node(self) -> None:
        flat = flatten(_diamond())
        assert flat.get_node("g:b:1").project_version == _v("g:b:1")
        assert flat.get_node("g:x:1") is None

    def test_node_key_mismatch_rejected(self) -> None:
        data = flatten(_diamond()).to_dict()
        data["nodes"]["g:z:9"] = data["nodes"].pop("g:b:1")
        with pytest.raises(SerializationError, match="does not match"):
            SerializedGraph.from_dict(data)

    def test_node_missing_field_rejected(self) -> None:
        with pytest.raises(SerializationError):
            ProjectDependencyVersionNode.from_dict({"groupId": "g", "artifactId": "a"})

    def test_node_non_string_field_rejected(self) -> None:
        with pytest.raises(SerializationError):
            ProjectDependencyVersionNode.from_dict({"groupId": "g", "artifactId": "a", "versionId": 1.0})

    def test_nodes_must_be_mapping(self) -> None:
        with pytest.raises(SerializationError):
            SerializedGraph.from_dict({"nodes": ["g:a:1"]})
