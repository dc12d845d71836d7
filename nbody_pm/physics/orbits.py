"""Circular-orbit velocity assignment from a solved potential."""

import logging
from typing import Sequence
import numpy as np
from nbody_pm.physics.forces import sample_gradient
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.particles import ParticleStore

logger = logging.getLogger(__name__)

MIN_TOTAL_MASS = 1e-12
MIN_RADIUS = 1e-8
MIN_CROSS_LENGTH = 1e-8
FALLBACK_AXIS = (1.0, 0.0, 0.0)


def _safe_divide(numerator: np.ndarray, denominator: np.ndarray, valid: np.ndarray) -> np.ndarray:
    return np.divide(numerator, denominator, out=np.zeros_like(numerator), where=valid)


def set_circular_orbits(
    store: ParticleStore,
    mesh: Mesh,
    cross_base: Sequence[float] = (0.0, 0.0, 1.0),
) -> int:
    """Give every particle the speed of a circular orbit about the centre of mass.

    The speed balances the radial component of the mesh force,
    ``v = sqrt(|r| * |F_r| / m)``, and points along ``r x cross_base``
    (or ``r x (1, 0, 0)`` when ``r`` is parallel to ``cross_base``).
    Particles at the centre of mass, and particles whose radial force is not
    attractive, get zero velocity. Positions and masses are left untouched.

    Args:
        store: Particle store whose velocities are overwritten
        mesh: Mesh holding a potential solved for the current positions
        cross_base: Reference axis fixing the orbital plane orientation

    Returns:
        Number of particles that received a non-zero orbital velocity
    """
    b = store.backend
    masses = np.asarray(b.to_numpy(store.masses), dtype=np.float64)
    total_mass = float(masses.sum())
    if total_mass < MIN_TOTAL_MASS:
        logger.debug("Total mass %.3g too small, orbit setup skipped", total_mass)
        return 0

    positions = np.asarray(b.to_numpy(store.positions), dtype=np.float64)
    center = (positions * masses).sum(axis=1) / total_mass
    r = positions - center[:, None]
    r_len = np.linalg.norm(r, axis=0)
    off_center = r_len >= MIN_RADIUS

    grad = np.asarray(b.to_numpy(sample_gradient(mesh, store.positions)), dtype=np.float64)
    force = -masses * grad
    r_hat = _safe_divide(r, r_len, off_center)
    f_radial = (force * r_hat).sum(axis=0)

    attractive = off_center & (f_radial < 0.0) & (masses > 0.0)
    speed = np.sqrt(_safe_divide(r_len * np.abs(f_radial), masses, attractive))

    direction = np.cross(r.T, np.asarray(cross_base, dtype=np.float64)).T
    cross_len = np.linalg.norm(direction, axis=0)
    degenerate = cross_len < MIN_CROSS_LENGTH
    if np.any(degenerate & attractive):
        fallback = np.cross(r.T, np.asarray(FALLBACK_AXIS)).T
        direction = np.where(degenerate, fallback, direction)
        cross_len = np.linalg.norm(direction, axis=0)
    unit = _safe_divide(direction, cross_len, cross_len >= MIN_CROSS_LENGTH)

    velocities = np.where(attractive, unit * speed, 0.0)
    store.velocities = b.array(velocities)

    repelled = off_center & (masses > 0.0) & ~attractive
    if np.any(repelled):
        logger.warning(
            "%d particles feel no attractive radial force; their velocity was set to zero",
            int(repelled.sum()),
        )
    n_orbiting = int(attractive.sum())
    logger.info("Assigned circular orbits to %d of %d particles", n_orbiting, store.count)
    return n_orbiting
