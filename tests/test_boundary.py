"""Tests for boundary handling and population compaction."""

import numpy as np
import pytest
from nbody_pm.backends.numpy_backend import NumPyBackend
from nbody_pm.physics.boundary import BoundaryPolicy, clamp_to_walls
from nbody_pm.physics.compactor import drop_out_of_bounds, inside_bounds_mask
from nbody_pm.physics.particles import ParticleStore

EXTENT = (10.0, 10.0, 10.0)


def test_boundary_policy_values():
    """Test policies parse from their config strings."""
    assert BoundaryPolicy("clamp") is BoundaryPolicy.CLAMP
    assert BoundaryPolicy("drop") is BoundaryPolicy.DROP
    assert BoundaryPolicy("open") is BoundaryPolicy.OPEN
    with pytest.raises(ValueError):
        BoundaryPolicy("wrap")


def test_clamp_to_walls():
    """Test clamping pins positions and stops motion on touched axes only."""
    backend = NumPyBackend()
    positions = np.array([[-1.0, 5.0, 12.0], [5.0, 5.0, 5.0], [5.0, 10.0, 3.0]])
    velocities = np.array([[-2.0, 1.0, 3.0], [1.0, 1.0, 1.0], [1.0, 1.0, 1.0]])

    clamp_to_walls(positions, velocities, EXTENT, backend)

    assert np.allclose(positions[0], [0.0, 5.0, 10.0])
    assert np.allclose(velocities[0], [0.0, 1.0, 0.0])
    assert np.allclose(velocities[1], [1.0, 1.0, 1.0])
    # Sitting exactly on the wall is not outside
    assert np.allclose(velocities[2], [1.0, 1.0, 1.0])


def test_inside_bounds_mask_inclusive():
    """Test both walls count as inside."""
    positions = np.array([[0.0, 10.0, -1e-9, 10.0 + 1e-9, 5.0, np.nan]] * 3)
    mask = inside_bounds_mask(positions, EXTENT)
    assert list(mask) == [True, True, False, False, True, False]


def test_drop_out_of_bounds():
    """Test survivors are in bounds, keep their order and the count shrinks."""
    backend = NumPyBackend()
    rng = np.random.default_rng(1)
    n = 200
    positions = rng.uniform(-3.0, 13.0, (3, n))
    masses = np.arange(n, dtype=float)  # unique masses tag each particle
    store = ParticleStore(backend, positions=positions, masses=masses)

    keep = drop_out_of_bounds(store, EXTENT)

    expected = np.all((positions >= 0.0) & (positions <= 10.0), axis=0)
    assert np.array_equal(keep, expected)
    assert store.count == int(expected.sum())
    assert np.array_equal(store.masses, masses[expected])
    assert np.all(np.diff(store.masses) > 0)
    assert np.all((store.positions >= 0.0) & (store.positions <= 10.0))


def test_drop_out_of_bounds_empty():
    """Test compaction of an empty store is a no-op."""
    store = ParticleStore(NumPyBackend())
    keep = drop_out_of_bounds(store, EXTENT)
    assert keep.shape == (0,)
    assert store.count == 0
