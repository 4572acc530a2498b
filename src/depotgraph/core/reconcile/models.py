"""Reconciliation result model.

``VersionMismatch`` records, for one coordinate, how the metadata store's
indexed version set differs from what the artifact repository actually
serves. Probe errors are attached for diagnosis but do not take part in
equality or hashing: two results that differ only in incidental error text
describe the same reconciliation outcome.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from depotgraph.exceptions import SerializationError


@dataclass(frozen=True)
class VersionMismatch:
    """Store-versus-repository version diff for one coordinate.

    Attributes:
        project_id: Repository project id ("" when unknown).
        group_id: Group identifier.
        artifact_id: Artifact identifier.
        versions_not_in_store: Versions the repository serves but the store
            does not index (under-indexing).
        versions_not_in_repository: Versions the store indexes but the
            repository no longer serves (stale index entries).
        errors: Soft failures collected while probing. Excluded from
            ``==`` and ``hash``.
    """

    project_id: str
    group_id: str
    artifact_id: str
    versions_not_in_store: tuple[str, ...] = ()
    versions_not_in_repository: tuple[str, ...] = ()
    errors: list[str] = field(default_factory=list, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "versions_not_in_store", tuple(self.versions_not_in_store))
        object.__setattr__(
            self, "versions_not_in_repository", tuple(self.versions_not_in_repository)
        )

    @property
    def coordinates(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def has_mismatch(self) -> bool:
        """True when either side holds a version the other lacks."""
        return bool(self.versions_not_in_store or self.versions_not_in_repository)

    def to_dict(self) -> dict[str, Any]:
        return {
            "projectId": self.project_id,
            "groupId": self.group_id,
            "artifactId": self.artifact_id,
            "versionsNotInStore": list(self.versions_not_in_store),
            "versionsNotInRepository": list(self.versions_not_in_repository),
            "errors": list(self.errors),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VersionMismatch:
        try:
            return cls(
                project_id=data.get("projectId") or "",
                group_id=data["groupId"],
                artifact_id=data["artifactId"],
                versions_not_in_store=tuple(data.get("versionsNotInStore") or ()),
                versions_not_in_repository=tuple(data.get("versionsNotInRepository") or ()),
                errors=list(data.get("errors") or ()),
            )
        except (KeyError, TypeError) as exc:
            raise SerializationError(f"Version mismatch is missing field {exc}") from exc
