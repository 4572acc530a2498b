"""Shared fixtures for depotgraph tests."""

from __future__ import annotations

import pathlib

import pytest

from depotgraph.core.dependency import ProjectVersion
from depotgraph.store import InMemoryArtifactRepository, InMemoryProjectVersionStore


def _v(gav: str) -> ProjectVersion:
    return ProjectVersion.parse(gav)


@pytest.fixture
def diamond_store() -> InMemoryProjectVersionStore:
    """A -> {B, C}; B -> D:1.0; C -> D:2.0."""
    return InMemoryProjectVersionStore(
        {
            _v("g:a:1.0"): [_v("g:b:1.0"), _v("g:c:1.0")],
            _v("g:b:1.0"): [_v("g:d:1.0")],
            _v("g:c:1.0"): [_v("g:d:2.0")],
            _v("g:d:1.0"): [],
            _v("g:d:2.0"): [],
        }
    )


@pytest.fixture
def cycle_store() -> InMemoryProjectVersionStore:
    """A -> B -> A."""
    return InMemoryProjectVersionStore(
        {
            _v("g:a:1.0"): [_v("g:b:1.0")],
            _v("g:b:1.0"): [_v("g:a:1.0")],
        }
    )


@pytest.fixture
def missing_store() -> InMemoryProjectVersionStore:
    """A -> B, but the store has no record of B."""
    return InMemoryProjectVersionStore({_v("g:a:1.0"): [_v("g:b:1.0")]})


@pytest.fixture
def store_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """A YAML store file holding the diamond plus project ids."""
    path = tmp_path / "depot.yaml"
    path.write_text(
        "versions:\n"
        "  g:a:1.0: [g:b:1.0, g:c:1.0]\n"
        "  g:b:1.0: [g:d:1.0]\n"
        "  g:c:1.0: [g:d:2.0]\n"
        "  g:d:1.0: []\n"
        "  g:d:2.0: []\n"
        "  g:e:1.0: [g:b:1.0]\n"
        "  g:e:2.0: [g:f:1.0-SNAPSHOT]\n"
        "  g:f:1.0-SNAPSHOT: []\n"
        "projects:\n"
        "  g:a: PROD-1\n"
        "  g:d: PROD-4\n"
    )
    return path


@pytest.fixture
def repository_file(tmp_path: pathlib.Path) -> pathlib.Path:
    """A YAML repository file that agrees with ``store_file`` except for g:d."""
    path = tmp_path / "published.yaml"
    path.write_text(
        "g:a: ['1.0']\n"
        "g:b: ['1.0']\n"
        "g:c: ['1.0']\n"
        "g:d: ['1.0', '3.0']\n"
        "g:e: ['1.0', '2.0']\n"
        "g:f: [1.0-SNAPSHOT]\n"
    )
    return path


@pytest.fixture
def empty_repository() -> InMemoryArtifactRepository:
    return InMemoryArtifactRepository()
