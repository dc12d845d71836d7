"""Tests for diagnostics."""

import numpy as np
import pytest
from nbody_pm.backends.numpy_backend import NumPyBackend
from nbody_pm.physics.diagnostics import Diagnostics
from nbody_pm.physics.mesh import Mesh


@pytest.fixture
def diagnostics():
    return Diagnostics(NumPyBackend())


def test_center_of_mass(diagnostics):
    """Test the mass-weighted centroid and its zero-mass fallback."""
    positions = np.array([[0.0, 4.0], [0.0, 0.0], [2.0, 2.0]])
    assert np.allclose(diagnostics.center_of_mass(positions, [1.0, 3.0]), [3.0, 0.0, 2.0])
    assert np.allclose(diagnostics.center_of_mass(positions, [0.0, 0.0]), [2.0, 0.0, 2.0])
    assert np.allclose(diagnostics.center_of_mass(np.zeros((3, 0)), np.zeros(0)), 0.0)


def test_kinetic_energy(diagnostics):
    """Test K = 0.5 * sum m v^2."""
    velocities = np.array([[1.0, 0.0], [0.0, 2.0], [0.0, 0.0]])
    assert diagnostics.kinetic_energy(velocities, [2.0, 1.0]) == pytest.approx(0.5 * 2.0 + 0.5 * 4.0)


def test_momentum(diagnostics):
    """Test linear and angular momentum of a rotating pair."""
    positions = np.array([[1.0, -1.0], [0.0, 0.0], [0.0, 0.0]])
    velocities = np.array([[0.0, 0.0], [1.0, -1.0], [0.0, 0.0]])
    masses = [1.0, 1.0]
    assert np.allclose(diagnostics.total_momentum(velocities, masses), 0.0)
    assert np.allclose(diagnostics.angular_momentum(positions, velocities, masses), [0.0, 0.0, 2.0])


def test_mean_radius(diagnostics):
    """Test the mean distance from the centre of mass."""
    positions = np.array([[1.0, -1.0, 0.0, 0.0], [0.0, 0.0, 2.0, -2.0], [0.0, 0.0, 0.0, 0.0]])
    assert diagnostics.mean_radius(positions, np.ones(4)) == pytest.approx(1.5)
    assert diagnostics.mean_radius(np.zeros((3, 0)), np.zeros(0)) == 0.0


def test_mesh_potential_energy(diagnostics):
    """Test U = 0.5 * sum m phi at the deposit cells."""
    mesh = Mesh((4, 4, 4), (4.0, 4.0, 4.0), NumPyBackend())
    mesh.view(mesh.potential_grid)[1, 2, 3] = -6.0
    mesh.view(mesh.potential_grid)[0, 0, 0] = -2.0
    positions = np.array([[1.5, 0.2], [2.5, 0.2], [3.5, 0.2]])
    energy = diagnostics.mesh_potential_energy(mesh, positions, [2.0, 1.0])
    assert energy == pytest.approx(0.5 * (2.0 * -6.0 + 1.0 * -2.0))


def test_summary(diagnostics):
    """Test the CLI summary row."""
    mesh = Mesh((4, 4, 4), (4.0, 4.0, 4.0), NumPyBackend())
    positions = np.array([[1.0, 3.0], [1.0, 1.0], [1.0, 1.0]])
    velocities = np.zeros((3, 2))
    row = diagnostics.summary(mesh, positions, velocities, np.ones(2))
    assert row == {"particles": 2, "kinetic": 0.0, "potential": 0.0, "mean_radius": 1.0}
