"""Collaborator interfaces consumed by the resolution core.

Defines the ``ProjectVersionStore`` abstract base class (the metadata store
the walker and reconciler read from) and the ``ArtifactRepository`` abstract
base class (the backing repository probed during reconciliation). Concrete
implementations live in ``memory``, ``depot`` and ``maven``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from depotgraph.core.dependency.versions import Coordinate, ProjectVersion


class ProjectVersionStore(ABC):
    """Abstract metadata store of published project versions.

    Subclasses must implement ``get_direct_dependencies``, ``list_versions``
    and ``list_coordinates``. ``project_id`` defaults to "unknown".
    """

    @abstractmethod
    async def get_direct_dependencies(
        self, version: ProjectVersion
    ) -> list[ProjectVersion] | None:
        """Return the dependencies ``version`` declares directly.

        Args:
            version: The version to look up.

        Returns:
            The declared dependencies (possibly empty), or None when the
            store has no data for ``version``.

        Raises:
            StoreError: On any failure other than "not found".
        """

    @abstractmethod
    async def list_versions(self, group_id: str, artifact_id: str) -> set[str]:
        """Return every version the store indexes for a coordinate."""

    @abstractmethod
    async def list_coordinates(self) -> list[Coordinate]:
        """Return every coordinate the store knows about."""

    async def project_id(self, group_id: str, artifact_id: str) -> str | None:
        """Return the repository project id of a coordinate, if known."""
        return None


class ArtifactRepository(ABC):
    """Abstract artifact repository probe used by reconciliation."""

    @property
    @abstractmethod
    def repository_name(self) -> str:
        """Human-readable name of this repository (e.g. 'Maven Central')."""

    @abstractmethod
    async def list_published_versions(self, group_id: str, artifact_id: str) -> set[str]:
        """Return every version the repository serves for a coordinate.

        An artifact the repository has never seen yields an empty set.

        Raises:
            RepositoryProbeError: If the repository could not be probed.
        """
