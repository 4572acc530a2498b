"""Dependency graph assembled during one resolution run.

Implements the working graph the resolution walker populates: the set of
visited versions, the sticky set of root (directly requested) versions, and
symmetric forward/back adjacency keyed by ``ProjectVersion`` values.

Edges and node registration are independent operations, so an edge may
reference a version that has not (yet) been registered as a node. This lets
the walker record what a version declares before deciding whether to descend.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, KeysView

from depotgraph.core.dependency.versions import ProjectVersion


class DependencyGraph:
    """Mutable dependency graph for a single resolution session.

    Mutation goes exclusively through ``add_node`` and ``set_edges``. Read
    access never hands out the underlying containers: ``nodes`` and
    ``root_nodes`` are live read-only views (insertion ordered), and edge
    accessors return frozen snapshots. This keeps the adjacency invariant

        ``to in forward[from]  <=>  from in back[to]``

    true at all times.

    Thread safety: This class is NOT thread-safe. A graph belongs to one
    resolution request; concurrent fetches must be merged by a single writer.
    """

    def __init__(self) -> None:
        self._nodes: dict[ProjectVersion, None] = {}
        self._roots: dict[ProjectVersion, None] = {}
        self._forward: dict[ProjectVersion, set[ProjectVersion]] = {}
        self._back: dict[ProjectVersion, set[ProjectVersion]] = {}

    # -- Mutation -----------------------------------------------------------

    def add_node(self, version: ProjectVersion, parent: ProjectVersion | None = None) -> None:
        """Register ``version`` as visited.

        Idempotent. When ``parent`` is None the version is also recorded as a
        root. Root membership is sticky: a later call with a parent never
        demotes it. No edge is created; ``parent`` only drives root
        classification.

        Args:
            version: The version to register.
            parent: The version that led here, or None for a direct request.
        """
        self._nodes.setdefault(version, None)
        if parent is None:
            self._roots.setdefault(version, None)

    def set_edges(self, from_: ProjectVersion, to: ProjectVersion) -> None:
        """Record that ``from_`` depends on ``to`` (both directions at once).

        Idempotent, and independent of ``add_node``: neither endpoint needs
        to be a registered node.
        """
        self._forward.setdefault(from_, set()).add(to)
        self._back.setdefault(to, set()).add(from_)

    # -- Queries ------------------------------------------------------------

    def has_node(self, version: ProjectVersion) -> bool:
        """O(1) membership test by value equality."""
        return version in self._nodes

    __contains__ = has_node

    @property
    def nodes(self) -> KeysView[ProjectVersion]:
        """Live read-only view of every visited version, in discovery order."""
        return self._nodes.keys()

    @property
    def root_nodes(self) -> KeysView[ProjectVersion]:
        """Live read-only view of the directly requested versions."""
        return self._roots.keys()

    @property
    def forward_edges(self) -> dict[ProjectVersion, frozenset[ProjectVersion]]:
        """Snapshot of the "depends on" relation."""
        return {k: frozenset(v) for k, v in self._forward.items()}

    @property
    def back_edges(self) -> dict[ProjectVersion, frozenset[ProjectVersion]]:
        """Snapshot of the "depended on by" relation."""
        return {k: frozenset(v) for k, v in self._back.items()}

    def successors(self, version: ProjectVersion) -> frozenset[ProjectVersion]:
        """Direct dependencies of ``version`` (empty if none recorded)."""
        return frozenset(self._forward.get(version, ()))

    def predecessors(self, version: ProjectVersion) -> frozenset[ProjectVersion]:
        """Versions that directly depend on ``version``."""
        return frozenset(self._back.get(version, ()))

    def edges(self) -> Iterator[tuple[ProjectVersion, ProjectVersion]]:
        """Iterate every ``(from, to)`` dependency edge."""
        for from_, targets in self._forward.items():
            for to in targets:
                yield from_, to

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._forward.values())

    # -- Closures -----------------------------------------------------------

    def transitive_dependencies(self, version: ProjectVersion) -> list[ProjectVersion]:
        """Compute everything reachable from ``version`` via forward edges.

        Uses BFS, so the result is ordered by distance from ``version``.
        The start version itself is excluded even if a cycle leads back to it.

        Args:
            version: Start of the walk.

        Returns:
            Reachable versions in BFS order.
        """
        return self._closure(version, self._forward)

    def dependants(self, version: ProjectVersion) -> list[ProjectVersion]:
        """Compute every version that depends on ``version``, directly or not.

        This is the reverse transitive closure over back edges: if A depends
        on B and B depends on ``version``, both B and A are returned.

        Args:
            version: The dependency whose dependants are wanted.

        Returns:
            Dependant versions in BFS order (nearest first).
        """
        return self._closure(version, self._back)

    @staticmethod
    def _closure(
        start: ProjectVersion,
        adjacency: dict[ProjectVersion, set[ProjectVersion]],
    ) -> list[ProjectVersion]:
        visited: dict[ProjectVersion, None] = {start: None}
        queue: deque[ProjectVersion] = deque([start])
        while queue:
            current = queue.popleft()
            for nxt in adjacency.get(current, ()):
                if nxt not in visited:
                    visited[nxt] = None
                    queue.append(nxt)
        del visited[start]
        return list(visited)

    def __repr__(self) -> str:
        return (
            f"DependencyGraph(nodes={self.node_count}, roots={len(self._roots)}, "
            f"edges={self.edge_count})"
        )
