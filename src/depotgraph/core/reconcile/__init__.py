"""Store-versus-repository version reconciliation.

Submodules:
    models      -- VersionMismatch
    reconciler  -- reconcile (pure diff) and Reconciler (live collaborators)
"""

from depotgraph.core.reconcile.models import VersionMismatch
from depotgraph.core.reconcile.reconciler import (
    DEFAULT_PROBE_CONCURRENCY,
    Reconciler,
    reconcile,
)

__all__ = [
    "DEFAULT_PROBE_CONCURRENCY",
    "Reconciler",
    "VersionMismatch",
    "reconcile",
]
