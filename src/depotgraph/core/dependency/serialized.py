"""Flattened, GAV-keyed form of a dependency graph.

The live ``DependencyGraph`` can share a node across many parents (diamond
dependencies), so a structural dump would either duplicate shared subtrees or
loop on a cycle. ``flatten`` re-keys the graph by GAV string and stores
adjacency as sets of GAV strings instead, which makes every reference O(1)
and the structure trivially safe to serialize.

Wire format (field names are a compatibility surface)::

    {
      "nodes": {
        "g:a:1.0": {
          "groupId": "g", "artifactId": "a", "versionId": "1.0",
          "projectId": null,
          "forwardEdges": ["g:b:1.0"],
          "backEdges": []
        }
      },
      "rootNodes": ["g:a:1.0"]
    }

Output is deterministic: edge and root lists are sorted and ``to_json``
sorts keys, so the same graph always produces byte-identical JSON.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from depotgraph.core.dependency.graph import DependencyGraph
from depotgraph.core.dependency.versions import (
    GAV_SEPARATOR,
    Coordinate,
    ProjectVersion,
)
from depotgraph.exceptions import SerializationError


# ---------------------------------------------------------------------------
# ProjectDependencyVersionNode
# ---------------------------------------------------------------------------


@dataclass
class ProjectDependencyVersionNode:
    """One flattened graph node with neighbours referenced by GAV string.

    Attributes:
        group_id: Group identifier.
        artifact_id: Artifact identifier.
        version_id: Version string.
        project_id: Repository-internal project id, when known.
        forward_edges: GAVs of the versions this node depends on.
        back_edges: GAVs of the versions that depend on this node.
    """

    group_id: str
    artifact_id: str
    version_id: str
    project_id: str | None = None
    forward_edges: set[str] = field(default_factory=set)
    back_edges: set[str] = field(default_factory=set)

    @classmethod
    def from_project_version(cls, version: ProjectVersion) -> ProjectDependencyVersionNode:
        return cls(version.group_id, version.artifact_id, version.version_id)

    @property
    def gav(self) -> str:
        return GAV_SEPARATOR.join((self.group_id, self.artifact_id, self.version_id))

    @property
    def id(self) -> str:
        """Node id; identical to ``gav``."""
        return self.gav

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}{GAV_SEPARATOR}{self.artifact_id}"

    @property
    def project_version(self) -> ProjectVersion:
        return ProjectVersion(self.group_id, self.artifact_id, self.version_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "versionId": self.version_id,
            "projectId": self.project_id,
            "forwardEdges": sorted(self.forward_edges),
            "backEdges": sorted(self.back_edges),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectDependencyVersionNode:
        """Build a node from its wire form.

        Raises:
            SerializationError: If a coordinate field is missing or not a string.
        """
        try:
            group_id = data["groupId"]
            artifact_id = data["artifactId"]
            version_id = data["versionId"]
        except (KeyError, TypeError) as exc:
            raise SerializationError(f"Node is missing field {exc}") from exc
        for name, value in (("groupId", group_id), ("artifactId", artifact_id), ("versionId", version_id)):
            if not isinstance(value, str):
                raise SerializationError(f"Node field {name!r} must be a string, got {value!r}")
        return cls(
            group_id=group_id,
            artifact_id=artifact_id,
            version_id=version_id,
            project_id=data.get("projectId"),
            forward_edges=set(data.get("forwardEdges") or ()),
            back_edges=set(data.get("backEdges") or ()),
        )


# ---------------------------------------------------------------------------
# SerializedGraph
# ---------------------------------------------------------------------------


@dataclass
class SerializedGraph:
    """GAV-keyed adjacency form of a ``DependencyGraph``.

    Attributes:
        nodes: Mapping of GAV string to flattened node.
        root_nodes: GAV strings of the directly requested versions.
    """

    nodes: dict[str, ProjectDependencyVersionNode] = field(default_factory=dict)
    root_nodes: set[str] = field(default_factory=set)

    def get_node(self, gav: str) -> ProjectDependencyVersionNode | None:
        return self.nodes.get(gav)

    def to_dependency_graph(self) -> DependencyGraph:
        """Rebuild a live ``DependencyGraph`` by GAV-id lookup.

        Every node is registered, roots as roots, and every forward and back
        edge recorded on any node is restored. Because ``set_edges`` is
        idempotent, an edge seen from both of its ends is stored once.

        Raises:
            InvalidCoordinateError: If an edge holds a malformed GAV.
        """
        graph = DependencyGraph()
        for gav in sorted(self.root_nodes):
            graph.add_node(ProjectVersion.parse(gav))
        for gav, node in self.nodes.items():
            version = node.project_version
            if gav not in self.root_nodes:
                # Any non-None parent keeps the node out of the roots.
                parent = min(node.back_edges) if node.back_edges else gav
                graph.add_node(version, ProjectVersion.parse(parent))
            for target in node.forward_edges:
                graph.set_edges(version, ProjectVersion.parse(target))
            for source in node.back_edges:
                graph.set_edges(ProjectVersion.parse(source), version)
        return graph

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": {gav: self.nodes[gav].to_dict() for gav in sorted(self.nodes)},
            "rootNodes": sorted(self.root_nodes),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SerializedGraph:
        """Deserialize the wire form produced by ``to_dict``.

        Raises:
            SerializationError: If ``nodes`` is not a mapping or a node is
                malformed, or a node's key disagrees with its coordinates.
        """
        raw_nodes = data.get("nodes") or {}
        if not isinstance(raw_nodes, Mapping):
            raise SerializationError("'nodes' must be an object keyed by GAV")
        graph = cls(root_nodes=set(data.get("rootNodes") or ()))
        for gav, raw in raw_nodes.items():
            node = ProjectDependencyVersionNode.from_dict(raw)
            if node.id != gav:
                raise SerializationError(f"Node key {gav!r} does not match node id {node.id!r}")
            graph.nodes[gav] = node
        return graph

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, json_str: str) -> SerializedGraph:
        return cls.from_dict(json.loads(json_str))


# ---------------------------------------------------------------------------
# Flattening
# ---------------------------------------------------------------------------


def flatten(
    graph: DependencyGraph,
    project_ids: Mapping[Coordinate, str] | None = None,
) -> SerializedGraph:
    """Convert a ``DependencyGraph`` into a ``SerializedGraph``.

    Every registered node becomes a ``ProjectDependencyVersionNode`` keyed by
    its GAV, carrying the GAVs of its neighbours. Edge endpoints that were
    never registered as nodes still appear in their neighbours' adjacency,
    so no topology is lost.

    Args:
        graph: The finished graph of one resolution.
        project_ids: Optional mapping of coordinate to repository project id
            used to fill ``project_id`` on matching nodes.

    Returns:
        The flattened graph.
    """
    result = SerializedGraph()
    forward = graph.forward_edges
    back = graph.back_edges
    for version in graph.nodes:
        node = ProjectDependencyVersionNode.from_project_version(version)
        if project_ids is not None:
            node.project_id = project_ids.get(version.coordinate)
        node.forward_edges.update(v.gav for v in forward.get(version, ()))
        node.back_edges.update(v.gav for v in back.get(version, ()))
        result.nodes.setdefault(node.id, node)
    result.root_nodes.update(v.gav for v in graph.root_nodes)
    return result
