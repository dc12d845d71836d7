"""Tests for particle records and the particle store."""

import math
import numpy as np
import pytest
from nbody_pm.backends.numpy_backend import NumPyBackend
from nbody_pm.physics.particles import Particle, ParticleStore


def test_particle_default_radius():
    """Test display radius defaults to sqrt(mass)."""
    assert Particle(0.0, 0.0, 0.0, m=4.0).r == 2.0
    assert Particle(0.0, 0.0, 0.0, m=4.0, r=0.5).r == 0.5


def test_particle_negative_mass():
    """Test negative masses are rejected."""
    with pytest.raises(ValueError):
        Particle(0.0, 0.0, 0.0, m=-1.0)


def test_nan_mass_rejected():
    """Test NaN masses are rejected everywhere a mass enters the store."""
    backend = NumPyBackend()
    with pytest.raises(ValueError):
        Particle(0.0, 0.0, 0.0, m=math.nan)
    with pytest.raises(ValueError):
        ParticleStore(backend, positions=np.zeros((3, 2)), masses=np.array([1.0, np.nan]))

    store = ParticleStore.from_particles([Particle(1.0, 1.0, 1.0, m=2.0)], backend)
    with pytest.raises(ValueError):
        store.set_mass(0, float("nan"))
    assert store.masses[0] == 2.0


def test_store_from_particles():
    """Test the store holds axis rows in particle order."""
    backend = NumPyBackend()
    store = ParticleStore.from_particles([
        Particle(1.0, 2.0, 3.0, 0.1, 0.2, 0.3, m=9.0),
        Particle(4.0, 5.0, 6.0, m=1.0, r=0.5),
    ], backend)

    assert store.count == 2
    assert len(store) == 2
    assert store.positions.shape == (3, 2)
    assert np.allclose(store.x, [1.0, 4.0])
    assert np.allclose(store.vz, [0.3, 0.0])
    assert np.allclose(store.radii, [3.0, 0.5])


def test_store_from_arrays_mismatched_lengths():
    """Test mismatched column lengths raise ValueError."""
    backend = NumPyBackend()
    with pytest.raises(ValueError, match="mismatched"):
        ParticleStore.from_arrays(backend, x=[0.0, 1.0], y=[0.0, 1.0], z=[0.0])


def test_store_from_arrays_defaults():
    """Test omitted columns get zero velocity and unit mass."""
    backend = NumPyBackend()
    store = ParticleStore.from_arrays(backend, x=[1.0, 2.0], y=[0.0, 0.0], z=[5.0, 5.0])
    assert np.allclose(store.velocities, 0.0)
    assert np.allclose(store.masses, 1.0)
    assert np.allclose(store.radii, 1.0)


def test_store_bad_shapes():
    """Test wrong array shapes and negative masses raise ValueError."""
    backend = NumPyBackend()
    with pytest.raises(ValueError):
        ParticleStore(backend, positions=np.zeros((2, 4)), masses=np.ones(4))
    with pytest.raises(ValueError):
        ParticleStore(backend, positions=np.zeros((3, 4)), masses=np.ones(3))
    with pytest.raises(ValueError):
        ParticleStore(backend, positions=np.zeros((3, 2)), masses=np.array([1.0, -1.0]))


def test_store_append_and_set_mass():
    """Test appending returns the new index and set_mass validates."""
    backend = NumPyBackend()
    store = ParticleStore(backend)
    assert store.count == 0

    index = store.append(Particle(1.0, 1.0, 1.0, m=2.0))
    assert index == 0
    assert store.append(Particle(2.0, 2.0, 2.0)) == 1

    store.set_mass(0, 5.0)
    assert store.masses[0] == 5.0
    with pytest.raises(IndexError):
        store.set_mass(2, 1.0)
    with pytest.raises(IndexError):
        store.set_mass(-1, 1.0)
    with pytest.raises(ValueError):
        store.set_mass(0, -1.0)


def test_store_compact_preserves_order():
    """Test compaction keeps survivors in their relative order."""
    backend = NumPyBackend()
    store = ParticleStore.from_arrays(
        backend, x=[0.0, 1.0, 2.0, 3.0], y=[0.0] * 4, z=[0.0] * 4, m=[1.0, 2.0, 3.0, 4.0]
    )
    removed = store.compact(np.array([True, False, True, True]))
    assert removed == 1
    assert np.allclose(store.masses, [1.0, 3.0, 4.0])
    assert np.allclose(store.x, [0.0, 2.0, 3.0])


def test_store_get_state_and_records():
    """Test host state export shapes and particle records."""
    backend = NumPyBackend()
    store = ParticleStore.from_arrays(backend, x=[1.0], y=[2.0], z=[3.0], vx=[4.0], m=[4.0])
    positions, velocities, masses, radii = store.get_state()
    assert positions.shape == (1, 3)
    assert np.allclose(positions[0], [1.0, 2.0, 3.0])
    assert np.allclose(velocities[0], [4.0, 0.0, 0.0])

    # get_state returns copies
    positions[0, 0] = 99.0
    assert store.x[0] == 1.0

    record = store.particle(0)
    assert (record.x, record.y, record.z, record.vx) == (1.0, 2.0, 3.0, 4.0)
    assert math.isclose(record.r, 2.0)
    assert len(store.to_particles()) == 1
