"""Tests for circular-orbit initialization."""

import logging
import numpy as np
import pytest
from nbody_pm.backends.numpy_backend import NumPyBackend
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.orbits import set_circular_orbits
from nbody_pm.physics.particles import Particle, ParticleStore
from nbody_pm.physics.simulator import ParticleMeshSimulation
from nbody_pm.utils.config import SimulationConfig


def spectral_sim(grid, particles, **kwargs):
    config = SimulationConfig.cubic(
        grid, float(grid), g=1.0, solver="spectral", boundary="open", n_workers=2, **kwargs
    )
    return ParticleMeshSimulation(config, particles)


def shell_around_star(center, star_mass, n, r_min, r_max, particle_mass, seed=0):
    rng = np.random.default_rng(seed)
    r = rng.uniform(r_min, r_max, n)
    theta = rng.uniform(0.0, 2.0 * np.pi, n)
    cos_phi = rng.uniform(-1.0, 1.0, n)
    sin_phi = np.sqrt(1.0 - cos_phi ** 2)
    particles = [Particle(center, center, center, m=star_mass)]
    for i in range(n):
        particles.append(Particle(
            center + r[i] * sin_phi[i] * np.cos(theta[i]),
            center + r[i] * sin_phi[i] * np.sin(theta[i]),
            center + r[i] * cos_phi[i],
            m=particle_mass,
        ))
    return particles


def shell_mean_radius(sim):
    positions = sim.positions
    star = positions[:, :1]
    return float(np.mean(np.linalg.norm(positions[:, 1:] - star, axis=0)))


def test_shell_orbits_keep_mean_radius():
    """Test a shell on circular orbits around a heavy star keeps its size."""
    particles = shell_around_star(32.5, 1000.0, 200, 15.5, 16.5, 1e-3)
    with spectral_sim(64, particles, dt=0.05) as sim:
        n_orbiting = sim.set_circular_orbits()
        assert n_orbiting >= 199

        r0 = shell_mean_radius(sim)
        sim.run(100)
        r1 = shell_mean_radius(sim)

    assert sim.step_count == 100
    assert abs(r1 - r0) / r0 < 0.05


def test_orbit_velocity_is_tangential():
    """Test orbital velocities are perpendicular to the radius vector."""
    particles = shell_around_star(16.5, 100.0, 20, 6.0, 7.0, 1e-3, seed=2)
    with spectral_sim(32, particles) as sim:
        sim.set_circular_orbits()
        positions = sim.positions
        velocities = sim.velocities
        masses = sim.masses

    com = (positions * masses).sum(axis=1) / masses.sum()
    r = positions[:, 1:] - com[:, None]
    v = velocities[:, 1:]
    speed = np.linalg.norm(v, axis=0)
    assert np.all(speed > 0)
    radial = np.abs((r * v).sum(axis=0)) / (np.linalg.norm(r, axis=0) * speed)
    assert np.all(radial < 1e-9)


def test_orbit_direction_and_fallback_axis():
    """Test the r x base direction and the x-axis fallback on the z-axis."""
    c = 16.5
    particles = [
        Particle(c, c, c, m=100.0),
        Particle(c + 4.0, c, c, m=1.0),
        Particle(c - 4.0, c, c, m=1.0),
    ]
    with spectral_sim(32, particles) as sim:
        sim.set_circular_orbits()
        v = sim.velocities

    # Star sits on the centre of mass
    assert np.all(v[:, 0] == 0.0)
    # (+x) x (+z) = -y
    assert v[1, 1] < 0
    assert v[1, 2] > 0
    assert np.allclose(v[[0, 2], 1], 0.0)

    particles = [Particle(c, c, c, m=100.0), Particle(c, c, c + 4.0, m=1.0)]
    with spectral_sim(32, particles) as sim:
        sim.set_circular_orbits()
        v = sim.velocities
    # r is parallel to +z, so the direction comes from r x (1, 0, 0) = +y
    assert v[1, 1] > 0
    assert abs(v[0, 1]) < 1e-9 * v[1, 1]
    assert abs(v[2, 1]) < 1e-9 * v[1, 1]


def test_custom_cross_base():
    """Test a different reference axis tilts the orbital plane."""
    c = 16.5
    particles = [Particle(c, c, c, m=100.0), Particle(c + 4.0, c, c, m=1.0)]
    with spectral_sim(32, particles) as sim:
        sim.set_circular_orbits(cross_base=(0.0, 1.0, 0.0))
        v = sim.velocities
    # (+x) x (+y) = +z
    assert v[2, 1] > 0
    assert abs(v[1, 1]) < 1e-9 * v[2, 1]


def test_zero_total_mass_is_noop():
    """Test a massless population keeps its velocities."""
    backend = NumPyBackend()
    store = ParticleStore.from_arrays(backend, x=[1.0, 2.0], y=[1.0, 2.0], z=[1.0, 2.0], vx=[3.0, 4.0], m=[0.0, 0.0])
    mesh = Mesh((8, 8, 8), (8.0, 8.0, 8.0), backend)
    assert set_circular_orbits(store, mesh) == 0
    assert np.allclose(store.vx, [3.0, 4.0])


def test_zero_mass_particle_gets_zero_velocity():
    """Test a massless tracer feels no force and is left at rest."""
    c = 16.5
    particles = [Particle(c, c, c, m=100.0), Particle(c + 4.0, c, c, vy=2.0, m=0.0)]
    with spectral_sim(32, particles) as sim:
        sim.set_circular_orbits()
        assert np.all(sim.velocities[:, 1] == 0.0)


def test_repulsive_potential_gives_zero_velocity(caplog):
    """Test non-attractive radial forces zero the velocity and warn."""
    backend = NumPyBackend()
    mesh = Mesh((16, 16, 16), (16.0, 16.0, 16.0), backend)
    idx = np.arange(16, dtype=float) - 8.0
    x, y, z = np.meshgrid(idx, idx, idx, indexing="ij")
    # Potential peaks at the centre, so the force points outward
    mesh.view(mesh.potential_grid)[...] = -(x ** 2 + y ** 2 + z ** 2)

    store = ParticleStore.from_arrays(
        backend, x=[8.0, 12.0], y=[8.0, 8.0], z=[8.0, 8.0], vy=[0.0, 5.0], m=[10.0, 1.0]
    )
    with caplog.at_level(logging.WARNING, logger="nbody_pm"):
        n_orbiting = set_circular_orbits(store, mesh)

    assert n_orbiting == 0
    assert np.all(store.velocities == 0.0)
    assert "no attractive radial force" in caplog.text


def test_positions_and_masses_untouched():
    """Test orbit setup only writes velocities."""
    particles = shell_around_star(16.5, 50.0, 10, 5.0, 6.0, 0.5, seed=4)
    with spectral_sim(32, particles) as sim:
        positions = sim.positions
        masses = sim.masses
        sim.set_circular_orbits()
        assert np.array_equal(sim.positions, positions)
        assert np.array_equal(sim.masses, masses)
        assert sim.step_count == 0
