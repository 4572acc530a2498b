"""Version conflict detection over a finished dependency graph.

A conflict is a coordinate (group, artifact) whose nodes in the graph span
more than one distinct version. Detection only reports; choosing a winning
version is left to the caller.
"""

from __future__ import annotations

from depotgraph.core.dependency.graph import DependencyGraph
from depotgraph.core.dependency.report import (
    ProjectDependencyConflict,
    ProjectDependencyReport,
)
from depotgraph.core.dependency.versions import Coordinate


def versions_by_coordinate(graph: DependencyGraph) -> dict[Coordinate, list[str]]:
    """Group the graph's nodes by coordinate.

    Args:
        graph: A finished dependency graph.

    Returns:
        Mapping of coordinate to its distinct version strings, both in the
        order the nodes were discovered.
    """
    grouped: dict[Coordinate, dict[str, None]] = {}
    for version in graph.nodes:
        grouped.setdefault(version.coordinate, {})[version.version_id] = None
    return {coord: list(versions) for coord, versions in grouped.items()}


def detect_conflicts(
    graph: DependencyGraph,
    report: ProjectDependencyReport | None = None,
) -> list[ProjectDependencyConflict]:
    """Find every coordinate present at more than one version.

    Exactly one conflict is produced per conflicting coordinate, carrying the
    full set of versions found. Conflicts follow coordinate discovery order.

    Args:
        graph: A finished dependency graph.
        report: If given, each conflict is also appended to it.

    Returns:
        The conflicts found (empty when every coordinate has one version).
    """
    conflicts: list[ProjectDependencyConflict] = []
    for coord, versions in versions_by_coordinate(graph).items():
        if len(versions) <= 1:
            continue
        if report is not None:
            conflict = report.add_conflict(coord.group_id, coord.artifact_id, versions)
        else:
            conflict = ProjectDependencyConflict(coord.group_id, coord.artifact_id, frozenset(versions))
        conflicts.append(conflict)
    return conflicts
