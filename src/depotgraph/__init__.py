"""depotgraph: dependency resolution core for an artifact metadata repository."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
