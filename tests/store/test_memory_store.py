"""Tests for the in-memory version store and artifact repository."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from depotgraph.core.dependency import Coordinate, ProjectVersion
from depotgraph.exceptions import InvalidCoordinateError, RepositoryProbeError, SerializationError
from depotgraph.store import InMemoryArtifactRepository, InMemoryProjectVersionStore


def _v(gav: str) -> ProjectVersion:
    return ProjectVersion.parse(gav)


class TestInMemoryProjectVersionStore:
    """Dict-backed store behaviour."""

    def test_known_version(self, diamond_store: InMemoryProjectVersionStore) -> None:
        deps = asyncio.run(diamond_store.get_direct_dependencies(_v("g:b:1.0")))
        assert deps == [_v("g:d:1.0")]

    def test_unknown_version_is_none(self, diamond_store: InMemoryProjectVersionStore) -> None:
        assert asyncio.run(diamond_store.get_direct_dependencies(_v("g:x:1"))) is None

    def test_leaf_is_empty_not_none(self, diamond_store: InMemoryProjectVersionStore) -> None:
        assert asyncio.run(diamond_store.get_direct_dependencies(_v("g:d:1.0"))) == []

    def test_returned_list_is_a_copy(self, diamond_store: InMemoryProjectVersionStore) -> None:
        deps = asyncio.run(diamond_store.get_direct_dependencies(_v("g:b:1.0")))
        deps.clear()
        assert asyncio.run(diamond_store.get_direct_dependencies(_v("g:b:1.0")))

    def test_list_versions(self, diamond_store: InMemoryProjectVersionStore) -> None:
        assert asyncio.run(diamond_store.list_versions("g", "d")) == {"1.0", "2.0"}
        assert asyncio.run(diamond_store.list_versions("g", "zz")) == set()

    def test_list_coordinates(self, diamond_store: InMemoryProjectVersionStore) -> None:
        coords = asyncio.run(diamond_store.list_coordinates())
        assert coords == [Coordinate("g", c) for c in "abcd"]

    def test_add_and_remove(self) -> None:
        store = InMemoryProjectVersionStore()
        store.add_version(_v("g:a:1"), [_v("g:b:1")])
        assert asyncio.run(store.get_direct_dependencies(_v("g:a:1"))) == [_v("g:b:1")]
        store.remove_version(_v("g:a:1"))
        store.remove_version(_v("g:a:1"))
        assert asyncio.run(store.get_direct_dependencies(_v("g:a:1"))) is None

    def test_project_id(self) -> None:
        store = InMemoryProjectVersionStore(project_ids={Coordinate("g", "a"): "P1"})
        assert asyncio.run(store.project_id("g", "a")) == "P1"
        assert asyncio.run(store.project_id("g", "b")) is None


class TestStoreLoading:
    """from_dict / from_file."""

    def test_from_file(self, store_file: Path) -> None:
        store = InMemoryProjectVersionStore.from_file(store_file)
        assert asyncio.run(store.get_direct_dependencies(_v("g:a:1.0"))) == [
            _v("g:b:1.0"), _v("g:c:1.0"),
        ]
        assert asyncio.run(store.project_id("g", "d")) == "PROD-4"

    def test_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "depot.json"
        path.write_text('{"versions": {"g:a:1": ["g:b:1"], "g:b:1": []}}')
        store = InMemoryProjectVersionStore.from_file(path)
        assert asyncio.run(store.list_versions("g", "b")) == {"1"}

    def test_null_dependencies_mean_leaf(self) -> None:
        store = InMemoryProjectVersionStore.from_dict({"versions": {"g:a:1": None}})
        assert asyncio.run(store.get_direct_dependencies(_v("g:a:1"))) == []

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        store = InMemoryProjectVersionStore.from_file(path)
        assert asyncio.run(store.list_coordinates()) == []

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("- g:a:1\n")
        with pytest.raises(SerializationError):
            InMemoryProjectVersionStore.from_file(path)

    def test_unparseable_yaml_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("versions: [unclosed\n")
        with pytest.raises(SerializationError):
            InMemoryProjectVersionStore.from_file(path)

    def test_dependencies_must_be_list(self) -> None:
        with pytest.raises(SerializationError):
            InMemoryProjectVersionStore.from_dict({"versions": {"g:a:1": "g:b:1"}})

    def test_malformed_gav(self) -> None:
        with pytest.raises(InvalidCoordinateError):
            InMemoryProjectVersionStore.from_dict({"versions": {"g:a": []}})

    def test_non_string_dependency_rejected(self) -> None:
        with pytest.raises(SerializationError):
            InMemoryProjectVersionStore.from_dict({"versions": {"g:a:1": [5]}})

    def test_non_string_gav_key_rejected(self) -> None:
        with pytest.raises(InvalidCoordinateError):
            InMemoryProjectVersionStore.from_dict({"versions": {1.0: []}})


class TestInMemoryArtifactRepository:
    """Dict-backed repository probe."""

    def test_published_versions(self) -> None:
        repo = InMemoryArtifactRepository({Coordinate("g", "a"): ["1.0", "2.0"]})
        assert asyncio.run(repo.list_published_versions("g", "a")) == {"1.0", "2.0"}
        assert asyncio.run(repo.list_published_versions("g", "b")) == set()
        assert repo.repository_name == "in-memory"

    def test_failing_coordinate(self) -> None:
        repo = InMemoryArtifactRepository(failing=[Coordinate("g", "a")])
        with pytest.raises(RepositoryProbeError):
            asyncio.run(repo.list_published_versions("g", "a"))

    def test_from_file(self, repository_file: Path) -> None:
        repo = InMemoryArtifactRepository.from_file(repository_file)
        assert asyncio.run(repo.list_published_versions("g", "d")) == {"1.0", "3.0"}
        assert asyncio.run(repo.list_published_versions("g", "f")) == {"1.0-SNAPSHOT"}

    def test_versions_must_be_list(self) -> None:
        with pytest.raises(SerializationError):
            InMemoryArtifactRepository.from_dict({"g:a": "1.0"})
