"""Collaborators of the resolution core: version stores and repository probes.

Public API::

    from depotgraph.store import ProjectVersionStore, ArtifactRepository
    from depotgraph.store import InMemoryProjectVersionStore, InMemoryArtifactRepository
    from depotgraph.store.depot import HttpProjectVersionStore
    from depotgraph.store.maven import MavenArtifactRepository
"""

from __future__ import annotations

from depotgraph.store.base import ArtifactRepository, ProjectVersionStore
from depotgraph.store.memory import InMemoryArtifactRepository, InMemoryProjectVersionStore

__all__ = [
    "ArtifactRepository",
    "InMemoryArtifactRepository",
    "InMemoryProjectVersionStore",
    "ProjectVersionStore",
]
