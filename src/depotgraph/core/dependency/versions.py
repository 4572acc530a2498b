"""Coordinate and version identity types for the dependency graph.

A ``ProjectVersion`` (group, artifact, version) is the universal identity of
a graph node and the key of every set and map in this package. A
``Coordinate`` (group, artifact) names a component family across versions
and is only used for grouping.

This module also provides Maven-style version ordering and the
snapshot/release classification used by dependency validation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from depotgraph.exceptions import InvalidCoordinateError

GAV_SEPARATOR = ":"
SNAPSHOT_SUFFIX = "-SNAPSHOT"


# ---------------------------------------------------------------------------
# Identity types
# ---------------------------------------------------------------------------


def _split(text: str, parts: int, what: str) -> list[str]:
    if not isinstance(text, str):
        raise InvalidCoordinateError(f"Invalid {what}: {text!r} is not a string")
    pieces = text.strip().split(GAV_SEPARATOR)
    if len(pieces) != parts or not all(p.strip() for p in pieces):
        raise InvalidCoordinateError(f"Invalid {what}: {text!r}")
    return [p.strip() for p in pieces]


@dataclass(frozen=True)
class Coordinate:
    """A ``group:artifact`` pair identifying a component family.

    Attributes:
        group_id: Maven-style group identifier (e.g., "org.finos.legend").
        artifact_id: Artifact identifier within the group.
    """

    group_id: str
    artifact_id: str

    @classmethod
    def parse(cls, text: str) -> Coordinate:
        """Parse a ``group:artifact`` string.

        Raises:
            InvalidCoordinateError: If the string does not have exactly two
                non-empty parts.
        """
        group_id, artifact_id = _split(text, 2, "coordinate")
        return cls(group_id, artifact_id)

    def __str__(self) -> str:
        return f"{self.group_id}{GAV_SEPARATOR}{self.artifact_id}"


@dataclass(frozen=True)
class ProjectVersion:
    """One published version of a component.

    Equality and hashing cover all three fields, so two instances carrying
    the same (group, artifact, version) are interchangeable as graph keys.

    Attributes:
        group_id: Group identifier.
        artifact_id: Artifact identifier.
        version_id: Version string (e.g., "1.0.0", "2.3.1-SNAPSHOT").
    """

    group_id: str
    artifact_id: str
    version_id: str

    @classmethod
    def parse(cls, gav: str) -> ProjectVersion:
        """Parse a ``group:artifact:version`` string.

        Raises:
            InvalidCoordinateError: If the string does not have exactly three
                non-empty parts.
        """
        group_id, artifact_id, version_id = _split(gav, 3, "GAV")
        return cls(group_id, artifact_id, version_id)

    @property
    def gav(self) -> str:
        """Return the ``group:artifact:version`` identity string."""
        return GAV_SEPARATOR.join((self.group_id, self.artifact_id, self.version_id))

    @property
    def coordinates(self) -> str:
        """Return the ``group:artifact`` string (version omitted)."""
        return f"{self.group_id}{GAV_SEPARATOR}{self.artifact_id}"

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.group_id, self.artifact_id)

    def __str__(self) -> str:
        return self.gav


# ---------------------------------------------------------------------------
# Version classification
# ---------------------------------------------------------------------------

_RELEASE_RE = re.compile(r"^\d+(?:\.\d+)*$")


def is_snapshot_version(version_id: str) -> bool:
    """Return True for ``-SNAPSHOT`` versions (e.g., "1.0.0-SNAPSHOT")."""
    return version_id.endswith(SNAPSHOT_SUFFIX)


def is_release_version(version_id: str) -> bool:
    """Return True for plain numeric releases such as "1.2.3"."""
    return bool(_RELEASE_RE.match(version_id))


# ---------------------------------------------------------------------------
# Version ordering
# ---------------------------------------------------------------------------

_NUMERIC_PREFIX_RE = re.compile(r"^(?P<num>\d+(?:\.\d+)*)(?P<rest>.*)$")
_QUALIFIER_RE = re.compile(r"^(?P<name>[a-z]*)[-.]?(?P<num>\d*)(?P<rest>.*)$")

# Lower rank sorts first. Unknown qualifiers sort after the plain release.
_QUALIFIER_RANK: dict[str, int] = {
    "alpha": 0,
    "a": 0,
    "beta": 1,
    "b": 1,
    "milestone": 2,
    "m": 2,
    "rc": 3,
    "cr": 3,
    "snapshot": 4,
    "": 5,
    "ga": 5,
    "final": 5,
    "release": 5,
    "sp": 6,
}
_UNKNOWN_QUALIFIER_RANK = 7


def version_key(version_id: str) -> tuple:
    """Sort key ordering Maven-style version strings ascending.

    Numeric segments compare as integers with trailing zeros ignored
    ("1.0" == "1.0.0" < "1.0.1" < "1.10"). A qualifier after the numeric part
    orders pre-releases before the release: alpha < beta < milestone < rc <
    snapshot < release < sp < anything unrecognised.

    Args:
        version_id: Version string, e.g. "2.1.0-rc1".

    Returns:
        A tuple usable as a ``sorted`` key. Never raises.
    """
    m = _NUMERIC_PREFIX_RE.match(version_id.strip())
    if m:
        numbers = [int(n) for n in m.group("num").split(".")]
        rest = m.group("rest")
    else:
        numbers = []
        rest = version_id.strip()
    while numbers and numbers[-1] == 0:
        numbers.pop()

    q = _QUALIFIER_RE.match(rest.lstrip("-.").lower())
    name = q.group("name") if q else rest.lower()
    q_num = int(q.group("num")) if q and q.group("num") else 0
    q_rest = q.group("rest") if q else ""
    rank = _QUALIFIER_RANK.get(name, _UNKNOWN_QUALIFIER_RANK)
    return (tuple(numbers), rank, name, q_num, q_rest)


def sort_versions(versions) -> list[str]:
    """Return version strings sorted ascending by ``version_key``."""
    return sorted(versions, key=lambda v: (version_key(v), v))


def project_version_key(version: ProjectVersion) -> tuple:
    """Deterministic sort key for ProjectVersion: coordinates, then version."""
    return (version.group_id, version.artifact_id, version_key(version.version_id), version.version_id)
