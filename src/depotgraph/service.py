"""Dependency service: the operations the core exposes to its callers.

    service = DependencyService(store, repository)
    report = await service.resolve([ProjectVersion.parse("g:app:1.0.0")])
    flat = await service.resolve_transitive(ProjectVersion.parse("g:app:1.0.0"))
    mismatch = service.reconcile("g", "app", {"1.0.0"}, {"1.0.0", "1.1.0"})

Each call builds its own graph and reports; nothing is shared between
requests, so one service instance can serve concurrent callers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from depotgraph.core.dependency import (
    DEFAULT_MAX_CONCURRENCY,
    Coordinate,
    ProjectDependencyReport,
    ProjectVersion,
    ResolutionWalker,
    VersionDependencyReport,
    detect_conflicts,
    flatten,
    validate_dependencies,
)
from depotgraph.core.reconcile import Reconciler, VersionMismatch, reconcile
from depotgraph.exceptions import ResolutionError
from depotgraph.store.base import ArtifactRepository, ProjectVersionStore

logger = logging.getLogger(__name__)


class DependencyService:
    """Resolution, transitive listing, validation, and reconciliation.

    Args:
        store: Project version store the walker reads.
        repository: Artifact repository probe; only needed for
            ``find_mismatches``.
        max_concurrency: Upper bound on concurrent store lookups or repository
            probes per request.
    """

    def __init__(
        self,
        store: ProjectVersionStore,
        repository: ArtifactRepository | None = None,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        self._store = store
        self._repository = repository
        self._max_concurrency = max_concurrency
        self._walker = ResolutionWalker(store, max_concurrency=max_concurrency)

    async def resolve(self, requested_versions: Iterable[ProjectVersion]) -> ProjectDependencyReport:
        """Build the dependency report of one or more requested versions.

        The report carries the flattened graph (with project ids where the
        store knows them), one conflict per coordinate reached at several
        versions, and any missing-data or cycle issues.

        Raises:
            ResolutionError: If no version was requested.
            StoreError: If the store fails during the walk.
        """
        requested = list(requested_versions)
        if not requested:
            raise ResolutionError("At least one project version must be requested")
        outcome = await self._walker.walk(requested)
        graph = outcome.graph

        coordinates = list(dict.fromkeys(v.coordinate for v in graph.nodes))
        ids = await asyncio.gather(
            *(self._store.project_id(c.group_id, c.artifact_id) for c in coordinates)
        )
        project_ids = {c: pid for c, pid in zip(coordinates, ids) if pid}

        report = ProjectDependencyReport(flatten(graph, project_ids))
        conflicts = detect_conflicts(graph, report)
        report.issues.extend(outcome.issues)
        if conflicts:
            logger.info(
                "Found %d conflict(s): %s",
                len(conflicts),
                ", ".join(c.coordinates for c in conflicts),
            )
        return report

    async def resolve_transitive(self, requested_version: ProjectVersion) -> VersionDependencyReport:
        """List every transitive dependency of ``requested_version``.

        Returns:
            The dependencies in discovery order, excluding the requested
            version, with ``valid`` False if data was missing or a cycle
            was found. Conflicts do not affect ``valid``.

        Raises:
            ResolutionError: If ``requested_version`` is None.
        """
        if requested_version is None:
            raise ResolutionError("A project version must be requested")
        outcome = await self._walker.walk([requested_version])
        roots = set(outcome.requested)
        return VersionDependencyReport(
            transitive_dependencies=[v for v in outcome.graph.nodes if v not in roots],
            valid=outcome.valid,
        )

    async def validate(self, version: ProjectVersion) -> list[str]:
        """Check ``version``'s declared dependencies against publication rules.

        Raises:
            ResolutionError: If the store has no data for ``version``.
        """
        deps = await self._store.get_direct_dependencies(version)
        if deps is None:
            raise ResolutionError(f"No dependency data in store for {version.gav}")
        return validate_dependencies(deps, version.version_id)

    @staticmethod
    def reconcile(
        group_id: str,
        artifact_id: str,
        store_versions: Iterable[str],
        repository_versions: Iterable[str],
    ) -> VersionMismatch:
        """Diff one coordinate's store and repository version sets."""
        return reconcile(group_id, artifact_id, store_versions, repository_versions)

    async def find_mismatches(
        self, coordinates: Iterable[Coordinate] | None = None
    ) -> list[VersionMismatch]:
        """Reconcile coordinates against the configured repository.

        Raises:
            ResolutionError: If the service was built without a repository.
        """
        if self._repository is None:
            raise ResolutionError("An artifact repository is required for reconciliation")
        reconciler = Reconciler(
            self._store, self._repository, max_concurrency=self._max_concurrency
        )
        return await reconciler.find_mismatches(coordinates)
