"""Resolution reports: conflicts, traversal issues, and their wire forms.

- ``ProjectDependencyConflict`` -- one coordinate reached at several versions.
- ``ProjectDependencyReport`` -- ordered conflicts plus the flattened graph.
- ``VersionDependencyReport`` -- flat transitive list plus a validity flag.
- ``ResolutionIssue`` -- a data condition recorded while walking the graph.

Conflicts are data, never failures: they do not affect validity. Only
missing dependency data and cycles make a resolution invalid.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from depotgraph.core.dependency.serialized import SerializedGraph
from depotgraph.core.dependency.versions import ProjectVersion, sort_versions
from depotgraph.exceptions import InvalidConflictError, SerializationError


# ---------------------------------------------------------------------------
# Traversal issues
# ---------------------------------------------------------------------------


class IssueKind(Enum):
    """Data conditions that invalidate a resolution."""

    MISSING_DEPENDENCY_DATA = "MISSING_DEPENDENCY_DATA"
    CYCLE_DETECTED = "CYCLE_DETECTED"


@dataclass(frozen=True)
class ResolutionIssue:
    """A condition recorded during traversal.

    Attributes:
        kind: What went wrong.
        version: The version the condition is about (the one without data,
            or the one re-entered while still being expanded).
        parent: The version whose declaration led to ``version``; None when
            ``version`` was requested directly.
        path: For cycles, the expansion chain closing the loop, starting and
            ending at ``version``. Empty for missing data.
        message: Human-readable description.
    """

    kind: IssueKind
    version: ProjectVersion
    parent: ProjectVersion | None = None
    path: tuple[ProjectVersion, ...] = ()
    message: str = ""


# ---------------------------------------------------------------------------
# ProjectDependencyConflict
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectDependencyConflict:
    """A coordinate whose reachable nodes span more than one version.

    Attributes:
        group_id: Group identifier of the conflicting coordinate.
        artifact_id: Artifact identifier of the conflicting coordinate.
        versions: The distinct version strings found (always two or more).

    Raises:
        InvalidConflictError: On construction with fewer than two versions.
    """

    group_id: str
    artifact_id: str
    versions: frozenset[str]

    def __post_init__(self) -> None:
        versions = frozenset(self.versions)
        if len(versions) <= 1:
            raise InvalidConflictError("Conflicts must have more than one version")
        object.__setattr__(self, "versions", versions)

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "versions": sort_versions(self.versions),
        }


# ---------------------------------------------------------------------------
# ProjectDependencyReport
# ---------------------------------------------------------------------------


class ProjectDependencyReport:
    """Outcome of resolving one or more requested versions.

    Holds the ordered conflict list and the flattened graph. The two have
    independent lifecycles: removing a conflict never touches the graph.

    ``issues`` carries traversal conditions for callers that need them; it
    is not part of the wire form, which stays ``{"conflicts", "graph"}``.
    """

    def __init__(self, graph: SerializedGraph | None = None) -> None:
        self._conflicts: list[ProjectDependencyConflict] = []
        self._graph = graph if graph is not None else SerializedGraph()
        self.issues: list[ResolutionIssue] = []

    @property
    def conflicts(self) -> list[ProjectDependencyConflict]:
        """Conflicts in insertion order (a copy; use add/remove to change)."""
        return list(self._conflicts)

    @property
    def graph(self) -> SerializedGraph:
        return self._graph

    @property
    def valid(self) -> bool:
        """False when traversal recorded missing data or a cycle."""
        return not self.issues

    def add_conflict(
        self, group_id: str, artifact_id: str, versions: Iterable[str]
    ) -> ProjectDependencyConflict:
        """Append a conflict for ``group_id:artifact_id``.

        Raises:
            InvalidConflictError: If ``versions`` holds fewer than two
                distinct values.
        """
        conflict = ProjectDependencyConflict(group_id, artifact_id, frozenset(versions))
        self._conflicts.append(conflict)
        return conflict

    def remove_conflict(self, conflict: ProjectDependencyConflict) -> None:
        """Remove ``conflict`` by value. No effect if it is not present."""
        try:
            self._conflicts.remove(conflict)
        except ValueError:
            pass

    def to_dict(self) -> dict[str, Any]:
        return {
            "conflicts": [c.to_dict() for c in self._conflicts],
            "graph": self._graph.to_dict(),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def write(self, path: Path) -> None:
        """Write the report to disk as JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectDependencyReport:
        """Deserialize the wire form.

        Raises:
            SerializationError: On malformed conflicts or graph.
            InvalidConflictError: If a stored conflict has fewer than two
                versions.
        """
        report = cls(SerializedGraph.from_dict(data.get("graph") or {}))
        for raw in data.get("conflicts") or ():
            try:
                report.add_conflict(raw["groupId"], raw["artifactId"], raw["versions"])
            except (KeyError, TypeError) as exc:
                raise SerializationError(f"Conflict is missing field {exc}") from exc
        return report

    @classmethod
    def from_json(cls, json_str: str) -> ProjectDependencyReport:
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def read(cls, path: Path) -> ProjectDependencyReport:
        return cls.from_json(path.read_text(encoding="utf-8"))

    def __repr__(self) -> str:
        return (
            f"ProjectDependencyReport(conflicts={len(self._conflicts)}, "
            f"nodes={len(self._graph.nodes)}, valid={self.valid})"
        )


# ---------------------------------------------------------------------------
# VersionDependencyReport
# ---------------------------------------------------------------------------


@dataclass
class VersionDependencyReport:
    """Flat transitive dependency list of a version.

    Attributes:
        transitive_dependencies: Every version reachable from the requested
            one(s), excluding the requested version(s), in discovery order.
        valid: False when traversal hit missing data or a cycle.
    """

    transitive_dependencies: list[ProjectVersion] = field(default_factory=list)
    valid: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "transitiveDependencies": [
                {"groupId": v.group_id, "artifactId": v.artifact_id, "versionId": v.version_id}
                for v in self.transitive_dependencies
            ],
            "valid": self.valid,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VersionDependencyReport:
        try:
            deps = [
                ProjectVersion(d["groupId"], d["artifactId"], d["versionId"])
                for d in data.get("transitiveDependencies") or ()
            ]
        except (KeyError, TypeError) as exc:
            raise SerializationError(f"Dependency is missing field {exc}") from exc
        return cls(transitive_dependencies=deps, valid=bool(data.get("valid", True)))
