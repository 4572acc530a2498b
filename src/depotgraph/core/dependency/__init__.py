"""Dependency graph construction, conflict detection, and serialization.

This package implements the resolution core: version identity types, the
mutable per-request dependency graph, the store-driven resolution walker,
coordinate-level conflict detection, and the GAV-keyed flattened graph used
for storage and transport. All public names are re-exported here, so
``from depotgraph.core.dependency import X`` works for every one of them.

Formal Definition
-----------------
A resolution graph is a 4-tuple G = (N, R, F, B) where:

- **N** = set of visited ProjectVersions
- **R** subset of N = directly requested (root) versions, never shrinking
- **F**: N -> 2^N = "depends on" relation
- **B**: N -> 2^N = "depended on by", with ``b in F(a) <=> a in B(b)``
"""

from depotgraph.core.dependency.versions import (
    Coordinate,
    ProjectVersion,
    is_release_version,
    is_snapshot_version,
    project_version_key,
    sort_versions,
    version_key,
)
from depotgraph.core.dependency.graph import DependencyGraph
from depotgraph.core.dependency.serialized import (
    ProjectDependencyVersionNode,
    SerializedGraph,
    flatten,
)
from depotgraph.core.dependency.report import (
    IssueKind,
    ProjectDependencyConflict,
    ProjectDependencyReport,
    ResolutionIssue,
    VersionDependencyReport,
)
from depotgraph.core.dependency.conflicts import detect_conflicts, versions_by_coordinate
from depotgraph.core.dependency.walker import (
    DEFAULT_MAX_CONCURRENCY,
    ResolutionOutcome,
    ResolutionWalker,
    build_graph,
)
from depotgraph.core.dependency.validation import validate_dependencies

__all__ = [
    "Coordinate",
    "ProjectVersion",
    "is_release_version",
    "is_snapshot_version",
    "project_version_key",
    "sort_versions",
    "version_key",
    "DependencyGraph",
    "ProjectDependencyVersionNode",
    "SerializedGraph",
    "flatten",
    "IssueKind",
    "ProjectDependencyConflict",
    "ProjectDependencyReport",
    "ResolutionIssue",
    "VersionDependencyReport",
    "detect_conflicts",
    "versions_by_coordinate",
    "DEFAULT_MAX_CONCURRENCY",
    "ResolutionOutcome",
    "ResolutionWalker",
    "build_graph",
    "validate_dependencies",
]
