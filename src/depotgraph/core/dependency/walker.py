"""Resolution walker: populates a DependencyGraph from a version store.

The walk runs in two phases:

1. **Fetch.** Dependency data is pulled from the store level by level. Each
   level's lookups fan out concurrently, bounded by an ``asyncio.Semaphore``,
   and every distinct version is fetched at most once.
2. **Build.** A single writer walks the fetched data depth-first and applies
   ``add_node`` / ``set_edges``. No graph mutation ever happens while a
   store call is in flight.

The build phase keeps a "currently expanding" set separate from the visited
set. Re-entering a version that is still being expanded is a cycle: it is
recorded and that branch is not descended. A version the store does not know
is recorded as missing data; the node stays in the graph and unaffected
branches carry on.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from depotgraph.core.dependency.graph import DependencyGraph
from depotgraph.core.dependency.report import IssueKind, ResolutionIssue
from depotgraph.core.dependency.versions import ProjectVersion

if TYPE_CHECKING:
    from depotgraph.store.base import ProjectVersionStore

logger = logging.getLogger(__name__)

# Maximum number of store lookups in flight for one resolution.
DEFAULT_MAX_CONCURRENCY: int = 8

DependencyData = dict[ProjectVersion, "list[ProjectVersion] | None"]


@dataclass
class ResolutionOutcome:
    """Everything one walk produced.

    Attributes:
        graph: The populated graph.
        requested: The requested versions, de-duplicated, in request order.
        issues: Missing-data and cycle conditions, in the order found.
    """

    graph: DependencyGraph
    requested: list[ProjectVersion] = field(default_factory=list)
    issues: list[ResolutionIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    def issues_of(self, kind: IssueKind) -> list[ResolutionIssue]:
        return [i for i in self.issues if i.kind is kind]


class ResolutionWalker:
    """Builds dependency graphs by querying a ``ProjectVersionStore``.

    Args:
        store: Source of direct dependencies.
        max_concurrency: Upper bound on concurrent store lookups.
    """

    def __init__(
        self,
        store: ProjectVersionStore,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._store = store
        self._max_concurrency = max_concurrency

    async def walk(self, requested: Iterable[ProjectVersion]) -> ResolutionOutcome:
        """Resolve ``requested`` into a populated graph.

        Args:
            requested: Versions asked for directly; they become root nodes.

        Returns:
            The graph plus every recorded issue.

        Raises:
            StoreError: If the store fails for a reason other than
                "not found". The partial graph is discarded.
        """
        roots = list(dict.fromkeys(requested))
        logger.info("Resolving dependencies for %s", ", ".join(v.gav for v in roots))
        data = await self.fetch(roots)
        outcome = build_graph(roots, data)
        logger.info(
            "Resolved %d node(s) from %d root(s) with %d issue(s)",
            outcome.graph.node_count,
            len(roots),
            len(outcome.issues),
        )
        return outcome

    async def fetch(self, roots: Iterable[ProjectVersion]) -> DependencyData:
        """Fetch dependency data for everything reachable from ``roots``.

        Returns:
            Mapping of version to its direct dependencies, or None where the
            store has no data for that version.

        Raises:
            StoreError: If any lookup fails. Lookups still in flight are
                cancelled.
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)
        data: DependencyData = {}
        frontier = list(dict.fromkeys(roots))
        while frontier:
            tasks = [
                asyncio.create_task(self._fetch_one(version, semaphore)) for version in frontier
            ]
            try:
                results = await asyncio.gather(*tasks)
            except BaseException:
                # One failed lookup ends the walk; stop the rest of the level.
                for task in tasks:
                    task.cancel()
                raise
            discovered: dict[ProjectVersion, None] = {}
            for version, deps in zip(frontier, results):
                data[version] = deps
                for dep in deps or ():
                    discovered.setdefault(dep, None)
            frontier = [v for v in discovered if v not in data]
        return data

    async def _fetch_one(
        self, version: ProjectVersion, semaphore: asyncio.Semaphore
    ) -> list[ProjectVersion] | None:
        async with semaphore:
            logger.debug("Fetching dependencies of %s", version.gav)
            deps = await self._store.get_direct_dependencies(version)
        return None if deps is None else list(deps)


# ---------------------------------------------------------------------------
# Build phase
# ---------------------------------------------------------------------------


def build_graph(roots: Iterable[ProjectVersion], data: DependencyData) -> ResolutionOutcome:
    """Populate a graph from already fetched dependency data.

    Iterative depth-first expansion, so deep chains never hit the
    interpreter's recursion limit. A version absent from ``data`` (or mapped
    to None) counts as missing.

    Args:
        roots: Directly requested versions.
        data: Version to direct dependencies, as returned by
            ``ResolutionWalker.fetch``.

    Returns:
        The populated graph and the issues recorded along the way.
    """
    outcome = ResolutionOutcome(graph=DependencyGraph(), requested=list(dict.fromkeys(roots)))
    graph = outcome.graph

    for root in outcome.requested:
        if graph.has_node(root):
            # Already reached transitively: promote to root, do not re-expand.
            graph.add_node(root)
            continue
        graph.add_node(root)
        _expand(root, data, outcome)
    return outcome


def _expand(root: ProjectVersion, data: DependencyData, outcome: ResolutionOutcome) -> None:
    graph = outcome.graph
    expanding: dict[ProjectVersion, None] = {}
    stack: list[tuple[ProjectVersion, Iterator[ProjectVersion]]] = []

    def enter(version: ProjectVersion, parent: ProjectVersion | None) -> None:
        deps = data.get(version)
        if deps is None:
            _record(outcome, ResolutionIssue(
                kind=IssueKind.MISSING_DEPENDENCY_DATA,
                version=version,
                parent=parent,
                message=f"No dependency data in store for {version.gav}",
            ))
            return
        expanding[version] = None
        stack.append((version, iter(deps)))

    enter(root, None)
    while stack:
        current, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            del expanding[current]
            continue

        graph.set_edges(current, child)
        if child in expanding:
            chain = list(expanding)
            path = tuple(chain[chain.index(child):]) + (child,)
            _record(outcome, ResolutionIssue(
                kind=IssueKind.CYCLE_DETECTED,
                version=child,
                parent=current,
                path=path,
                message="Dependency cycle: " + " -> ".join(v.gav for v in path),
            ))
            continue
        if graph.has_node(child):
            continue
        graph.add_node(child, current)
        enter(child, current)


def _record(outcome: ResolutionOutcome, issue: ResolutionIssue) -> None:
    logger.warning("%s: %s", issue.kind.value, issue.message)
    outcome.issues.append(issue)
