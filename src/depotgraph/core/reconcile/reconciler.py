"""Reconcile the store's version index against the artifact repository.

``reconcile`` is the pure set comparison for one coordinate. ``Reconciler``
drives it from live collaborators: it asks the store what it indexes, probes
the repository for what is really published, and records lookup failures as
soft errors instead of aborting.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from depotgraph.core.dependency.versions import Coordinate, sort_versions
from depotgraph.core.reconcile.models import VersionMismatch
from depotgraph.exceptions import RepositoryProbeError, StoreError

if TYPE_CHECKING:
    from depotgraph.store.base import ArtifactRepository, ProjectVersionStore

logger = logging.getLogger(__name__)

# Maximum number of coordinates probed at the same time.
DEFAULT_PROBE_CONCURRENCY: int = 4


def reconcile(
    group_id: str,
    artifact_id: str,
    store_versions: Iterable[str],
    repository_versions: Iterable[str],
    project_id: str = "",
    errors: Iterable[str] | None = None,
) -> VersionMismatch:
    """Compare one coordinate's store and repository version sets.

    Args:
        group_id: Group identifier.
        artifact_id: Artifact identifier.
        store_versions: Versions the store indexes.
        repository_versions: Versions the repository serves.
        project_id: Repository project id, if known.
        errors: Probe errors to attach to the result.

    Returns:
        A ``VersionMismatch`` whose version lists are sorted by version order.
    """
    store = set(store_versions)
    repository = set(repository_versions)
    return VersionMismatch(
        project_id=project_id,
        group_id=group_id,
        artifact_id=artifact_id,
        versions_not_in_store=tuple(sort_versions(repository - store)),
        versions_not_in_repository=tuple(sort_versions(store - repository)),
        errors=list(errors or ()),
    )


class Reconciler:
    """Computes version mismatches from a store and a repository probe.

    Args:
        store: Metadata store; source of the indexed version sets.
        repository: Artifact repository probe.
        max_concurrency: Upper bound on coordinates probed concurrently.
    """

    def __init__(
        self,
        store: ProjectVersionStore,
        repository: ArtifactRepository,
        *,
        max_concurrency: int = DEFAULT_PROBE_CONCURRENCY,
    ) -> None:
        self._store = store
        self._repository = repository
        self._max_concurrency = max_concurrency

    async def reconcile_coordinate(self, coordinate: Coordinate) -> VersionMismatch:
        """Reconcile one coordinate.

        A failed store lookup or repository probe is recorded in ``errors``.
        Since nothing reliable is then known about the two sides, no version
        is reported as missing from either.
        """
        project_id = ""
        try:
            project_id = (
                await self._store.project_id(coordinate.group_id, coordinate.artifact_id) or ""
            )
            store_versions = await self._store.list_versions(
                coordinate.group_id, coordinate.artifact_id
            )
            published = await self._repository.list_published_versions(
                coordinate.group_id, coordinate.artifact_id
            )
        except (StoreError, RepositoryProbeError) as exc:
            logger.warning("Could not get versions for %s: %s", coordinate, exc)
            return VersionMismatch(
                project_id=project_id,
                group_id=coordinate.group_id,
                artifact_id=coordinate.artifact_id,
                errors=[str(exc)],
            )
        return reconcile(
            coordinate.group_id,
            coordinate.artifact_id,
            store_versions,
            published,
            project_id=project_id,
        )

    async def find_mismatches(
        self,
        coordinates: Iterable[Coordinate] | None = None,
        *,
        include_matching: bool = False,
    ) -> list[VersionMismatch]:
        """Reconcile many coordinates.

        Args:
            coordinates: Coordinates to check. None checks every coordinate
                the store knows.
            include_matching: Also return results with an empty diff. Results
                that carry probe errors are always returned.

        Returns:
            Mismatches in the order the coordinates were given.
        """
        if coordinates is None:
            coordinates = await self._store.list_coordinates()
        targets = list(dict.fromkeys(coordinates))
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(coordinate: Coordinate) -> VersionMismatch:
            async with semaphore:
                return await self.reconcile_coordinate(coordinate)

        results = await asyncio.gather(*(_bounded(c) for c in targets))
        mismatches = [r for r in results if include_matching or r.has_mismatch or r.errors]
        logger.info(
            "Reconciled %d coordinate(s), %d with mismatches", len(targets), len(mismatches)
        )
        return mismatches
