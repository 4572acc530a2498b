"""Artifact repository probe reading Maven ``maven-metadata.xml`` files.

The metadata file of a coordinate lives at
``{base_url}/{group/as/path}/{artifact}/maven-metadata.xml`` and lists every
published version under ``<versioning><versions>``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from depotgraph.exceptions import RepositoryProbeError, StoreError
from depotgraph.store.base import ArtifactRepository
from depotgraph.store.http_client import DEFAULT_TIMEOUT, fetch_text

logger = logging.getLogger(__name__)

MAVEN_CENTRAL_URL: str = "https://repo1.maven.org/maven2"


def metadata_url(base_url: str, group_id: str, artifact_id: str) -> str:
    """Return the ``maven-metadata.xml`` URL of a coordinate."""
    group_path = group_id.replace(".", "/")
    return f"{base_url.rstrip('/')}/{group_path}/{artifact_id}/maven-metadata.xml"


def parse_metadata_versions(xml_text: str) -> list[str]:
    """Extract versions from ``maven-metadata.xml`` content, in file order.

    Raises:
        RepositoryProbeError: If the content is not well-formed XML.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as exc:
        raise RepositoryProbeError(f"Malformed maven-metadata.xml: {exc}") from exc
    versions_elem = root.find("./versioning/versions")
    if versions_elem is None:
        return []
    return [v.text.strip() for v in versions_elem.findall("version") if v.text and v.text.strip()]


class MavenArtifactRepository(ArtifactRepository):
    """Probe for a Maven 2 layout repository.

    Args:
        base_url: Repository root (defaults to Maven Central).
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, base_url: str = MAVEN_CENTRAL_URL, *, timeout: float = DEFAULT_TIMEOUT) -> None:
        self._base_url = base_url
        self._timeout = timeout

    @property
    def repository_name(self) -> str:
        return f"Maven ({self._base_url})"

    async def list_published_versions(self, group_id: str, artifact_id: str) -> set[str]:
        url = metadata_url(self._base_url, group_id, artifact_id)
        try:
            text = await fetch_text(url, timeout=self._timeout)
        except StoreError as exc:
            raise RepositoryProbeError(str(exc)) from exc
        if text is None:
            logger.debug("No metadata for %s:%s in %s", group_id, artifact_id, self.repository_name)
            return set()
        return set(parse_metadata_versions(text))
