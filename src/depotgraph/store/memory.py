"""Dict-backed store and repository, loadable from YAML or JSON files.

Store file format::

    versions:
      org.example:app:1.0.0:
        - org.example:lib:1.0.0
      org.example:lib:1.0.0: []
    projects:
      org.example:app: PROD-1

Repository file format::

    org.example:app: ["1.0.0", "1.1.0"]
    org.example:lib: ["1.0.0"]

YAML is a superset of JSON, so both formats load through ``yaml.safe_load``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from depotgraph.core.dependency.versions import Coordinate, ProjectVersion
from depotgraph.exceptions import RepositoryProbeError, SerializationError
from depotgraph.store.base import ArtifactRepository, ProjectVersionStore

logger = logging.getLogger(__name__)


def _load_mapping(path: Path) -> Mapping[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise SerializationError(f"Cannot parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise SerializationError(f"{path} must contain a mapping at top level")
    return data


class InMemoryProjectVersionStore(ProjectVersionStore):
    """Project version store held in memory.

    Args:
        dependencies: Mapping of version to its direct dependencies.
        project_ids: Mapping of coordinate to repository project id.
    """

    def __init__(
        self,
        dependencies: Mapping[ProjectVersion, Iterable[ProjectVersion]] | None = None,
        project_ids: Mapping[Coordinate, str] | None = None,
    ) -> None:
        self._dependencies: dict[ProjectVersion, list[ProjectVersion]] = {}
        self._project_ids: dict[Coordinate, str] = dict(project_ids or {})
        for version, deps in (dependencies or {}).items():
            self.add_version(version, deps)

    def add_version(
        self, version: ProjectVersion, dependencies: Iterable[ProjectVersion] = ()
    ) -> None:
        """Add or replace a version and its declared dependencies."""
        self._dependencies[version] = list(dependencies)

    def remove_version(self, version: ProjectVersion) -> None:
        self._dependencies.pop(version, None)

    def set_project_id(self, coordinate: Coordinate, project_id: str) -> None:
        self._project_ids[coordinate] = project_id

    async def get_direct_dependencies(
        self, version: ProjectVersion
    ) -> list[ProjectVersion] | None:
        deps = self._dependencies.get(version)
        return None if deps is None else list(deps)

    async def list_versions(self, group_id: str, artifact_id: str) -> set[str]:
        return {
            v.version_id
            for v in self._dependencies
            if v.group_id == group_id and v.artifact_id == artifact_id
        }

    async def list_coordinates(self) -> list[Coordinate]:
        return list(dict.fromkeys(v.coordinate for v in self._dependencies))

    async def project_id(self, group_id: str, artifact_id: str) -> str | None:
        return self._project_ids.get(Coordinate(group_id, artifact_id))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InMemoryProjectVersionStore:
        """Build a store from the documented mapping format.

        Raises:
            SerializationError: If a section has the wrong shape.
            InvalidCoordinateError: If a GAV or coordinate is malformed.
        """
        versions = data.get("versions") or {}
        projects = data.get("projects") or {}
        if not isinstance(versions, Mapping) or not isinstance(projects, Mapping):
            raise SerializationError("'versions' and 'projects' must be mappings")
        store = cls()
        for gav, deps in versions.items():
            if deps is not None and not (
                isinstance(deps, list) and all(isinstance(d, str) for d in deps)
            ):
                raise SerializationError(f"Dependencies of {gav!r} must be a list of GAV strings")
            store.add_version(
                ProjectVersion.parse(gav),
                [ProjectVersion.parse(d) for d in deps or ()],
            )
        for coordinates, project_id in projects.items():
            store.set_project_id(Coordinate.parse(coordinates), str(project_id))
        logger.debug("Loaded %d version(s) into memory store", len(store._dependencies))
        return store

    @classmethod
    def from_file(cls, path: Path) -> InMemoryProjectVersionStore:
        return cls.from_dict(_load_mapping(path))


class InMemoryArtifactRepository(ArtifactRepository):
    """Artifact repository held in memory.

    Args:
        versions: Mapping of coordinate to the versions it serves.
        failing: Coordinates whose probe raises ``RepositoryProbeError``.
    """

    def __init__(
        self,
        versions: Mapping[Coordinate, Iterable[str]] | None = None,
        failing: Iterable[Coordinate] = (),
    ) -> None:
        self._versions = {coord: set(vs) for coord, vs in (versions or {}).items()}
        self._failing = set(failing)

    @property
    def repository_name(self) -> str:
        return "in-memory"

    async def list_published_versions(self, group_id: str, artifact_id: str) -> set[str]:
        coordinate = Coordinate(group_id, artifact_id)
        if coordinate in self._failing:
            raise RepositoryProbeError(f"Repository unavailable for {coordinate}")
        return set(self._versions.get(coordinate, ()))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> InMemoryArtifactRepository:
        versions: dict[Coordinate, list[str]] = {}
        for coordinates, vs in data.items():
            if not isinstance(vs, list):
                raise SerializationError(f"Versions of {coordinates!r} must be a list")
            versions[Coordinate.parse(coordinates)] = [str(v) for v in vs]
        return cls(versions)

    @classmethod
    def from_file(cls, path: Path) -> InMemoryArtifactRepository:
        return cls.from_dict(_load_mapping(path))
