"""depotgraph exception hierarchy.

All public exceptions inherit from DepotGraphError, giving callers a single
base class to catch when they want to handle any depotgraph-specific failure
without swallowing unrelated errors.

Data conditions found while walking a graph (missing dependency data,
cycles, version conflicts) are *recorded* on reports and never raised. The
exceptions below signal caller mistakes or collaborator failures.
"""


class DepotGraphError(Exception):
    """Base exception for all depotgraph errors."""


class InvalidCoordinateError(DepotGraphError, ValueError):
    """Raised when a GAV or coordinate string cannot be parsed.

    A GAV must have exactly three non-empty ``:``-separated parts
    (``group:artifact:version``); a coordinate exactly two.
    """


class InvalidConflictError(DepotGraphError, ValueError):
    """Raised when a conflict is built from fewer than two versions.

    This is a caller-contract violation, not a data condition: a coordinate
    reached at a single version is by definition not in conflict.
    """


class ResolutionError(DepotGraphError):
    """Raised when a resolution request itself is malformed.

    Covers empty requests and other invalid input handed to the resolver.
    Problems found *in the data* during traversal are recorded instead.
    """


class StoreError(DepotGraphError):
    """Raised when the project version store fails unrecoverably.

    A "not found" answer is not a StoreError; it is reported as missing
    dependency data. StoreError covers transport failures and unexpected
    responses, which abort the resolution so that a partially fetched
    graph is never mistaken for a complete one.
    """


class RepositoryProbeError(DepotGraphError):
    """Raised when the artifact repository cannot list published versions.

    Reconciliation treats this as a soft failure and records the message
    on the resulting ``VersionMismatch``.
    """


class SerializationError(DepotGraphError):
    """Raised when a wire document cannot be turned back into a model.

    Covers missing required fields and wrongly typed values in
    ``from_dict`` / ``from_json`` input.
    """
