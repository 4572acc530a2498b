"""Tests for DependencyService: the operations exposed to callers."""

from __future__ import annotations

import asyncio

import pytest

from depotgraph.core.dependency import Coordinate, IssueKind, ProjectVersion
from depotgraph.exceptions import ResolutionError, StoreError
from depotgraph.service import DependencyService
from depotgraph.store import InMemoryArtifactRepository, InMemoryProjectVersionStore


def _v(gav: str) -> ProjectVersion:
    return ProjectVersion.parse(gav)


# ---------------------------------------------------------------------------
# resolve
# ---------------------------------------------------------------------------


class TestResolve:
    """Full dependency reports."""

    def test_diamond_report(self, diamond_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(diamond_store).resolve([_v("g:a:1.0")]))
        assert len(report.conflicts) == 1
        assert report.conflicts[0].coordinates == "g:d"
        assert report.conflicts[0].versions == {"1.0", "2.0"}
        assert report.valid
        assert len(report.graph.nodes) == 5
        assert report.graph.root_nodes == {"g:a:1.0"}

    def test_project_ids_filled(self, diamond_store: InMemoryProjectVersionStore) -> None:
        diamond_store.set_project_id(Coordinate("g", "d"), "PROD-4")
        report = asyncio.run(DependencyService(diamond_store).resolve([_v("g:a:1.0")]))
        assert report.graph.nodes["g:d:2.0"].project_id == "PROD-4"
        assert report.graph.nodes["g:a:1.0"].project_id is None

    def test_cycle_invalid(self, cycle_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(cycle_store).resolve([_v("g:a:1.0")]))
        assert not report.valid
        assert [i.kind for i in report.issues] == [IssueKind.CYCLE_DETECTED]

    def test_missing_invalid(self, missing_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(missing_store).resolve([_v("g:a:1.0")]))
        assert not report.valid
        assert set(report.graph.nodes) == {"g:a:1.0", "g:b:1.0"}

    def test_empty_request_rejected(self, diamond_store: InMemoryProjectVersionStore) -> None:
        with pytest.raises(ResolutionError):
            asyncio.run(DependencyService(diamond_store).resolve([]))

    def test_independent_requests(self, diamond_store: InMemoryProjectVersionStore) -> None:
        """Concurrent requests share nothing."""
        service = DependencyService(diamond_store)

        async def both():
            return await asyncio.gather(
                service.resolve([_v("g:b:1.0")]), service.resolve([_v("g:c:1.0")])
            )

        left, right = asyncio.run(both())
        assert set(left.graph.nodes) == {"g:b:1.0", "g:d:1.0"}
        assert set(right.graph.nodes) == {"g:c:1.0", "g:d:2.0"}
        assert left.conflicts == right.conflicts == []


# ---------------------------------------------------------------------------
# resolve_transitive
# ---------------------------------------------------------------------------


class TestResolveTransitive:
    """Flat transitive dependency lists."""

    def test_diamond(self, diamond_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(diamond_store).resolve_transitive(_v("g:a:1.0")))
        assert set(report.transitive_dependencies) == {
            _v("g:b:1.0"), _v("g:c:1.0"), _v("g:d:1.0"), _v("g:d:2.0"),
        }
        assert _v("g:a:1.0") not in report.transitive_dependencies
        assert report.valid

    def test_conflicts_do_not_invalidate(self, diamond_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(diamond_store).resolve_transitive(_v("g:a:1.0")))
        assert report.valid

    def test_missing_data(self, missing_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(missing_store).resolve_transitive(_v("g:a:1.0")))
        assert report.transitive_dependencies == [_v("g:b:1.0")]
        assert not report.valid

    def test_cycle_excludes_requested(self, cycle_store: InMemoryProjectVersionStore) -> None:
        report = asyncio.run(DependencyService(cycle_store).resolve_transitive(_v("g:a:1.0")))
        assert report.transitive_dependencies == [_v("g:b:1.0")]
        assert not report.valid

    def test_none_rejected(self, diamond_store: InMemoryProjectVersionStore) -> None:
        with pytest.raises(ResolutionError):
            asyncio.run(DependencyService(diamond_store).resolve_transitive(None))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# validate / reconcile
# ---------------------------------------------------------------------------


class TestValidate:
    """Snapshot rule through the store."""

    def test_violation(self) -> None:
        store = InMemoryProjectVersionStore({_v("g:a:1.0"): [_v("g:b:2.0-SNAPSHOT")]})
        errors = asyncio.run(DependencyService(store).validate(_v("g:a:1.0")))
        assert errors == ["Snapshot dependency g-b-2.0-SNAPSHOT not allowed in versions"]

    def test_unknown_version(self) -> None:
        with pytest.raises(ResolutionError):
            asyncio.run(DependencyService(InMemoryProjectVersionStore()).validate(_v("g:a:1")))


class TestReconcile:
    """Reconciliation entry points."""

    def test_static_reconcile(self) -> None:
        m = DependencyService.reconcile("g", "a", ["1.0", "2.0"], ["1.0", "3.0"])
        assert m.versions_not_in_store == ("3.0",)
        assert m.versions_not_in_repository == ("2.0",)

    def test_find_mismatches(self, diamond_store: InMemoryProjectVersionStore) -> None:
        repo = InMemoryArtifactRepository(
            {Coordinate("g", c): ["1.0"] for c in "abc"} | {Coordinate("g", "d"): ["1.0", "2.0"]}
        )
        service = DependencyService(diamond_store, repo)
        assert asyncio.run(service.find_mismatches()) == []

    def test_find_mismatches_requires_repository(
        self, diamond_store: InMemoryProjectVersionStore
    ) -> None:
        with pytest.raises(ResolutionError):
            asyncio.run(DependencyService(diamond_store).find_mismatches())

    def test_find_mismatches_honours_max_concurrency(self) -> None:
        class _CountingRepository(InMemoryArtifactRepository):
            in_flight = 0
            peak = 0

            async def list_published_versions(self, group_id, artifact_id):
                self.in_flight += 1
                self.peak = max(self.peak, self.in_flight)
                await asyncio.sleep(0)
                try:
                    return await super().list_published_versions(group_id, artifact_id)
                finally:
                    self.in_flight -= 1

        store = InMemoryProjectVersionStore({_v(f"g:a{i}:1.0"): [] for i in range(6)})
        repo = _CountingRepository({Coordinate("g", f"a{i}"): ["1.0"] for i in range(6)})
        service = DependencyService(store, repo, max_concurrency=1)
        assert asyncio.run(service.find_mismatches()) == []
        assert repo.peak == 1

    def test_find_mismatches_survives_store_failure(self) -> None:
        class _FlakyStore(InMemoryProjectVersionStore):
            async def project_id(self, group_id, artifact_id):
                if artifact_id == "broken":
                    raise StoreError("HTTP 503 from store")
                return await super().project_id(group_id, artifact_id)

        store = _FlakyStore({_v("g:a:1.0"): [], _v("g:broken:1.0"): []})
        repo = InMemoryArtifactRepository(
            {Coordinate("g", "a"): ["1.0", "2.0"], Coordinate("g", "broken"): ["1.0"]}
        )
        mismatches = asyncio.run(DependencyService(store, repo).find_mismatches())
        by_coordinates = {m.coordinates: m for m in mismatches}
        assert by_coordinates["g:a"].versions_not_in_store == ("2.0",)
        assert by_coordinates["g:broken"].errors == ["HTTP 503 from store"]
