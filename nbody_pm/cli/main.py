"""CLI main entry point."""

import argparse
import dataclasses
import logging
import sys
from nbody_pm.backends.factory import get_backend, list_available_backends
from nbody_pm.io.snapshot import save_projection
from nbody_pm.io.state_io import save_state
from nbody_pm.logging_config import setup_logging
from nbody_pm.physics.boundary import BoundaryPolicy
from nbody_pm.physics.diagnostics import Diagnostics
from nbody_pm.physics.simulator import ParticleMeshSimulation
from nbody_pm.physics.solvers import list_solvers
from nbody_pm.presets import get_preset, list_presets
from nbody_pm.utils.config import SimulationConfig, load_config

# CLI option -> SimulationConfig field(s)
CONFIG_OVERRIDES = {
    "preset": ("preset",),
    "particles": ("n_particles",),
    "solver": ("solver",),
    "grid": ("grid_size_x", "grid_size_y", "grid_size_z"),
    "world_size": ("world_width", "world_height", "world_depth"),
    "g": ("g",),
    "dt": ("dt",),
    "iterations": ("smoothing_iterations",),
    "boundary": ("boundary",),
    "workers": ("n_workers",),
    "backend": ("backend",),
    "seed": ("seed",),
}


def build_config(args) -> SimulationConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(args.config) if args.config else SimulationConfig()
    changes = {}
    for option, fields in CONFIG_OVERRIDES.items():
        value = getattr(args, option)
        if value is not None:
            for field in fields:
                changes[field] = value
    # replace() re-runs validation on the merged settings
    return dataclasses.replace(config, **changes) if changes else config


def print_row(step: int, sim: ParticleMeshSimulation, diagnostics: Diagnostics):
    """Print one diagnostics table row for the current state."""
    row = diagnostics.summary(sim.mesh, sim.store.positions, sim.store.velocities, sim.store.masses)
    print(f"{step:<8} {sim.time:<12.4g} {row['particles']:<10} {row['kinetic']:<14.6g} "
          f"{row['potential']:<14.6g} {row['mean_radius']:<12.6g}")


def run_simulation(args, config: SimulationConfig):
    """Run a simulation."""
    backend = get_backend(config.backend)

    preset = get_preset(config.preset, config, **config.preset_params)
    particles = preset.generate()

    with ParticleMeshSimulation(config, particles, backend=backend) as sim:
        if args.orbits:
            sim.set_circular_orbits()

        print(f"Running simulation: {preset.name} with {sim.particle_count} particles")
        print(f"Backend: {backend.name}, Solver: {config.solver}, Grid: {sim.mesh.shape}, "
              f"dt: {config.dt}, G: {config.g}, Boundary: {config.boundary}, Workers: {config.n_workers}")

        diagnostics = Diagnostics(backend)
        print(f"{'Step':<8} {'Time':<12} {'Particles':<10} {'K':<14} {'U_mesh':<14} {'R_mean':<12}")
        print("-" * 74)
        sim.compute_potential()
        print_row(0, sim, diagnostics)

        for step in range(1, args.steps + 1):
            sim.advance()
            # U_mesh is read from the potential solved at the start of this tick
            if step % args.debug_every == 0 or step == args.steps:
                print_row(step, sim, diagnostics)

        if args.save_state:
            pos, vel, mass, radii, _, _ = sim.get_state()
            save_state(pos, vel, mass, args.save_state, radii=radii, metadata={
                'time': sim.time,
                'steps': sim.step_count,
                'preset': config.preset,
                'solver': config.solver,
                'backend': backend.name
            })
            print(f"State saved to {args.save_state}")

        if args.snapshot:
            save_projection(sim.positions, sim.masses, config.world_extent, args.snapshot,
                            title=f"{preset.name} t={sim.time:.4g}")
            print(f"Snapshot saved to {args.snapshot}")

    print("Simulation complete!")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="nbody-pm - particle-mesh N-body gravity simulation")

    # Configuration
    parser.add_argument('--config', type=str, default=None,
                       help='Load settings from a .json or .yaml file (options below override it)')

    # Simulation parameters
    parser.add_argument('--preset', type=str, default=None,
                       help='Initial condition preset (see --list-presets)')
    parser.add_argument('--particles', type=int, default=None,
                       help='Number of particles')
    parser.add_argument('--steps', type=int, default=100,
                       help='Number of simulation steps')
    parser.add_argument('--solver', type=str, default=None,
                       help='Poisson solver (see --list-solvers)')
    parser.add_argument('--grid', type=int, default=None,
                       help='Mesh cells per axis')
    parser.add_argument('--world-size', type=float, default=None,
                       help='World extent per axis')
    parser.add_argument('--g', type=float, default=None,
                       help='Gravitational constant')
    parser.add_argument('--dt', type=float, default=None,
                       help='Time step')
    parser.add_argument('--iterations', type=int, default=None,
                       help='Relaxation solver sweeps per tick')
    parser.add_argument('--boundary', type=str, default=None,
                       choices=[policy.value for policy in BoundaryPolicy],
                       help='What happens to particles leaving the world box')
    parser.add_argument('--orbits', action='store_true',
                       help='Start particles on circular orbits about the centre of mass')

    # Execution
    parser.add_argument('--workers', type=int, default=None,
                       help='Worker threads (default: CPU count)')
    parser.add_argument('--backend', type=str, default=None,
                       help='Compute backend (see --list-backends)')

    # Reproducibility and output
    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed for reproducibility')
    parser.add_argument('--save-state', type=str, default=None,
                       help='Save final state to file (.npz or .json)')
    parser.add_argument('--snapshot', type=str, default=None,
                       help='Save a final x-y projection image (e.g. out.png)')
    parser.add_argument('--debug-every', type=int, default=10,
                       help='Print diagnostics every N steps')
    parser.add_argument('--log-level', type=str, default='WARNING',
                       choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                       help='Library log level')

    # Info
    parser.add_argument('--list-backends', action='store_true',
                       help='List available backends and exit')
    parser.add_argument('--list-solvers', action='store_true',
                       help='List registered solvers and exit')
    parser.add_argument('--list-presets', action='store_true',
                       help='List registered presets and exit')
    return parser


def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    listings = (
        (args.list_backends, "backends", list_available_backends),
        (args.list_solvers, "solvers", list_solvers),
        (args.list_presets, "presets", list_presets),
    )
    if any(requested for requested, _, _ in listings):
        for requested, label, lister in listings:
            if requested:
                print(f"Available {label}:")
                for name in lister():
                    print(f"  - {name}")
        return

    if args.steps < 0 or args.debug_every < 1:
        parser.error("--steps must be >= 0 and --debug-every >= 1")

    setup_logging(getattr(logging, args.log_level))

    try:
        config = build_config(args)
    except (OSError, TypeError, ValueError) as e:
        parser.error(f"Invalid configuration: {e}")

    try:
        run_simulation(args, config)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
