"""Basic example of using the particle-mesh simulator."""

from nbody_pm import ParticleMeshSimulation, SimulationConfig
from nbody_pm.io import save_projection
from nbody_pm.physics import Diagnostics
from nbody_pm.presets import DiskPreset


def main():
    """Run a small disk on circular orbits with the spectral solver."""
    config = SimulationConfig.cubic(
        48, 1000.0, g=1.0, dt=0.05, solver="spectral", boundary="drop", seed=42
    )

    # Disk of mixed-mass stars around a heavy central star
    particles = DiskPreset(config, n_particles=3000, central_mass=50_000.0).generate()

    with ParticleMeshSimulation(config, particles) as sim:
        sim.set_circular_orbits()
        diagnostics = Diagnostics(sim.backend)

        print("Running simulation...")
        for step in range(500):
            sim.advance()
            if step % 100 == 0:
                radius = diagnostics.mean_radius(sim.positions, sim.masses)
                print(f"Step {step}: Time={sim.time:.2f}, Particles={sim.particle_count}, R_mean={radius:.2f}")

        save_projection(sim.positions, sim.masses, config.world_extent, "disk_xy.png")
    print("Simulation complete!")


if __name__ == "__main__":
    main()
