"""Project version store backed by a depot-style metadata REST API.

Endpoints used (relative to ``base_url``)::

    GET /projects                                           -> [{groupId, artifactId, projectId}]
    GET /projects/{g}/{a}/versions                          -> ["1.0.0", ...]
    GET /projects/{g}/{a}/versions/{v}/projectDependencies  -> [{groupId, artifactId, versionId}]

A 404 on the dependencies endpoint means the store has no data for that
version and is reported as missing, not as an error.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from depotgraph.core.dependency.versions import Coordinate, ProjectVersion
from depotgraph.exceptions import StoreError
from depotgraph.store.base import ProjectVersionStore
from depotgraph.store.http_client import DEFAULT_TIMEOUT, fetch_json

logger = logging.getLogger(__name__)


def _to_project_version(item: Any, url: str) -> ProjectVersion:
    try:
        return ProjectVersion(item["groupId"], item["artifactId"], item["versionId"])
    except (KeyError, TypeError) as exc:
        raise StoreError(f"Unexpected dependency entry from {url}: {item!r}") from exc


class HttpProjectVersionStore(ProjectVersionStore):
    """Read-only client for a remote metadata store.

    Args:
        base_url: API root, e.g. "https://depot.example.com/api".
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._project_ids: dict[Coordinate, str] | None = None

    def _project_url(self, group_id: str, artifact_id: str) -> str:
        return f"{self._base_url}/projects/{quote(group_id)}/{quote(artifact_id)}"

    async def get_direct_dependencies(
        self, version: ProjectVersion
    ) -> list[ProjectVersion] | None:
        url = (
            f"{self._project_url(version.group_id, version.artifact_id)}"
            f"/versions/{quote(version.version_id)}/projectDependencies"
        )
        data = await fetch_json(url, timeout=self._timeout)
        if data is None:
            return None
        if not isinstance(data, list):
            raise StoreError(f"Expected a list of dependencies from {url}")
        return [_to_project_version(item, url) for item in data]

    async def list_versions(self, group_id: str, artifact_id: str) -> set[str]:
        url = f"{self._project_url(group_id, artifact_id)}/versions"
        data = await fetch_json(url, timeout=self._timeout)
        if data is None:
            return set()
        if not isinstance(data, list):
            raise StoreError(f"Expected a list of versions from {url}")
        return {str(v) for v in data}

    async def _load_projects(self) -> dict[Coordinate, str]:
        if self._project_ids is None:
            url = f"{self._base_url}/projects"
            data = await fetch_json(url, timeout=self._timeout) or []
            if not isinstance(data, list):
                raise StoreError(f"Expected a list of projects from {url}")
            projects: dict[Coordinate, str] = {}
            for item in data:
                try:
                    coordinate = Coordinate(item["groupId"], item["artifactId"])
                except (KeyError, TypeError) as exc:
                    raise StoreError(f"Unexpected project entry from {url}: {item!r}") from exc
                projects[coordinate] = str(item.get("projectId") or "")
            logger.debug("Loaded %d project(s) from %s", len(projects), url)
            self._project_ids = projects
        return self._project_ids

    async def list_coordinates(self) -> list[Coordinate]:
        return list(await self._load_projects())

    async def project_id(self, group_id: str, artifact_id: str) -> str | None:
        projects = await self._load_projects()
        return projects.get(Coordinate(group_id, artifact_id)) or None
