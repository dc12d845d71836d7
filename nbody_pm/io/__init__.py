"""I/O utilities for snapshots and state management."""

from nbody_pm.io.snapshot import save_projection
from nbody_pm.io.state_io import save_state, load_state

__all__ = ["save_projection", "save_state", "load_state"]
