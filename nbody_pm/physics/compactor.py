"""Removal of particles that left the world box."""

import logging
from typing import Any, Sequence
from nbody_pm.physics.particles import ParticleStore

logger = logging.getLogger(__name__)


def inside_bounds_mask(positions: Any, extent: Sequence[float]) -> Any:
    """Boolean mask of particles inside ``[0, extent]`` on every axis.

    Both walls are inclusive, so a particle sitting exactly on a wall is kept.
    """
    keep = None
    for axis in range(3):
        axis_ok = (positions[axis] >= 0.0) & (positions[axis] <= extent[axis])
        keep = axis_ok if keep is None else keep & axis_ok
    return keep


def drop_out_of_bounds(store: ParticleStore, extent: Sequence[float]) -> Any:
    """Compact the store down to in-bounds particles, preserving their order.

    Args:
        store: Particle store to filter in place
        extent: World size per axis

    Returns:
        Boolean keep mask over the pre-compaction indices (NumPy), so callers
        can remap indices they track
    """
    keep = inside_bounds_mask(store.positions, extent)
    removed = store.compact(keep)
    if removed:
        logger.debug("Dropped %d out-of-bounds particles, %d remain", removed, store.count)
    return store.backend.to_numpy(keep)
