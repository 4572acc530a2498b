"""Publication rules for declared dependencies."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from depotgraph.core.dependency.versions import (
    ProjectVersion,
    is_release_version,
    is_snapshot_version,
)

logger = logging.getLogger(__name__)


def validate_dependencies(dependencies: Iterable[ProjectVersion], version_id: str) -> list[str]:
    """Check the dependencies a version declares against publication rules.

    A release version (e.g. "1.2.3") must not depend on a snapshot: the
    release would otherwise change underneath its consumers.

    Args:
        dependencies: Direct dependencies declared by the version.
        version_id: Version being published.

    Returns:
        One error message per violation. Empty when the version is valid.
    """
    if not is_release_version(version_id):
        return []
    errors: list[str] = []
    for dep in dependencies:
        if is_snapshot_version(dep.version_id):
            msg = (
                f"Snapshot dependency {dep.group_id}-{dep.artifact_id}-{dep.version_id} "
                "not allowed in versions"
            )
            logger.error(msg)
            errors.append(msg)
    return errors
