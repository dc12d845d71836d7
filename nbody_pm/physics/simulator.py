"""Main simulation controller."""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, Optional, Sequence
import numpy as np
from nbody_pm.backends import get_backend
from nbody_pm.backends.base import Backend
from nbody_pm.physics.boundary import BoundaryPolicy, clamp_to_walls
from nbody_pm.physics.compactor import drop_out_of_bounds
from nbody_pm.physics.deposit import MassDepositor
from nbody_pm.physics.forces import accelerations
from nbody_pm.physics.integrators.base import Integrator
from nbody_pm.physics.integrators.euler import SemiImplicitEulerIntegrator
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.orbits import set_circular_orbits
from nbody_pm.physics.particles import Particle, ParticleStore
from nbody_pm.physics.solvers import PoissonSolver, get_solver
from nbody_pm.physics.workers import WorkerPool
from nbody_pm.utils.config import SimulationConfig

logger = logging.getLogger(__name__)

BLACK_HOLE_RADIUS = 0.01


class ParticleMeshSimulation:
    """Particle-mesh gravity simulation.

    One tick runs four phases in a fixed order, each finishing before the
    next starts: deposit mass onto the mesh, solve for the potential,
    integrate every particle, and (under the ``drop`` boundary policy)
    compact the population. The simulation is not reentrant; any attempt to
    tick or mutate particles while a tick is in flight raises RuntimeError.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        particles: Optional[Iterable[Particle]] = None,
        backend: Optional[Backend] = None,
        integrator: Optional[Integrator] = None,
    ):
        """Initialize simulation.

        Args:
            config: Simulation settings (defaults if None)
            particles: Initial particles (empty population if None)
            backend: Compute backend (built from ``config.backend`` if None)
            integrator: Integrator to use (default: semi-implicit Euler)
        """
        self.config = config or SimulationConfig()
        self.backend = backend or get_backend(self.config.backend)
        self.boundary = BoundaryPolicy(self.config.boundary)
        self.integrator = integrator or SemiImplicitEulerIntegrator()
        self.dt = self.config.dt
        self.g = self.config.g

        self._solvers: Dict[str, PoissonSolver] = {}
        self.default_solver = self.config.solver
        self._get_solver(self.default_solver)

        self.mesh = Mesh(self.config.grid_shape, self.config.world_extent, self.backend)
        self.pool = WorkerPool(self.config.n_workers)
        self.depositor = MassDepositor(self.mesh, self.pool)

        self.store = ParticleStore(self.backend)
        self.black_hole_index: Optional[int] = None
        self.time = 0.0
        self.step_count = 0
        self.paused = False

        self._tick_lock = threading.Lock()

        # Profiling: last tick timing (ms) per phase
        self._profile: bool = False
        self._timing: Dict[str, Optional[float]] = {
            "deposit_ms": None, "solve_ms": None, "integrate_ms": None, "compact_ms": None,
        }

        # Callbacks
        self.on_step_callback: Optional[Callable] = None

        if particles is not None:
            self.init_simulation(particles)

        logger.info(
            "Simulation ready: grid=%s extent=%s solver=%s boundary=%s workers=%d backend=%s",
            self.mesh.shape, self.mesh.extent, self.default_solver,
            self.boundary.value, self.pool.n_workers, self.backend.name,
        )

    @contextmanager
    def _exclusive(self, action: str):
        if not self._tick_lock.acquire(blocking=False):
            raise RuntimeError(f"Cannot {action} while a simulation tick is in progress")
        try:
            yield
        finally:
            self._tick_lock.release()

    def _get_solver(self, name: Optional[str] = None) -> PoissonSolver:
        name = name or self.default_solver
        solver = self._solvers.get(name)
        if solver is None:
            solver = get_solver(name, self.config)
            self._solvers[name] = solver
        return solver

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init_simulation(self, particles: Iterable[Particle]):
        """Replace the whole population and reset time and the black hole.

        Args:
            particles: Particle records to start from
        """
        with self._exclusive("initialize the simulation"):
            self.store = ParticleStore.from_particles(particles, self.backend)
            self.black_hole_index = None
            self.time = 0.0
            self.step_count = 0
        logger.info("Initialized simulation with %d particles", self.store.count)

    def close(self):
        """Shut down the worker pool."""
        self.pool.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def set_profiling(self, enabled: bool = True):
        """Enable or disable per-phase tick timing."""
        self._profile = enabled

    def get_timing(self) -> dict:
        """Return last tick timing in ms: deposit_ms, solve_ms, integrate_ms, compact_ms."""
        return dict(self._timing)

    def _deposit_and_solve(self, solver: PoissonSolver):
        self.depositor.deposit(self.store)
        solver.solve(self.mesh, self.g, self.pool)

    def _integrate(self):
        store = self.store
        mesh = self.mesh
        dt = self.dt
        clamp = self.boundary is BoundaryPolicy.CLAMP

        def _integrate_range(lo: int, hi: int):
            positions = store.positions[:, lo:hi]
            velocities = store.velocities[:, lo:hi]
            self.integrator.step(positions, velocities, accelerations(mesh, positions), dt)
            if clamp:
                clamp_to_walls(positions, velocities, mesh.extent, self.backend)

        self.pool.map_ranges(_integrate_range, store.count)

    def _compact(self):
        keep = drop_out_of_bounds(self.store, self.mesh.extent)
        index = self.black_hole_index
        if index is None:
            return
        if keep[index]:
            self.black_hole_index = int(np.count_nonzero(keep[:index]))
        else:
            logger.warning("Black hole left the world box and was removed")
            self.black_hole_index = None

    def advance(self, solver_name: Optional[str] = None) -> bool:
        """Advance the simulation by one time step.

        Args:
            solver_name: Registered solver to use (config default if None)

        Returns:
            False if the simulation is paused and nothing happened
        """
        if self.paused:
            return False
        solver = self._get_solver(solver_name)

        with self._exclusive("step the simulation"):
            t0 = time.perf_counter()
            self.depositor.deposit(self.store)
            t1 = time.perf_counter()
            solver.solve(self.mesh, self.g, self.pool)
            t2 = time.perf_counter()
            self._integrate()
            t3 = time.perf_counter()
            if self.boundary is BoundaryPolicy.DROP:
                self._compact()
            t4 = time.perf_counter()

            if self._profile:
                self._timing = {
                    "deposit_ms": (t1 - t0) * 1000.0,
                    "solve_ms": (t2 - t1) * 1000.0,
                    "integrate_ms": (t3 - t2) * 1000.0,
                    "compact_ms": (t4 - t3) * 1000.0,
                }
            self.time += self.dt
            self.step_count += 1

        logger.debug("Tick %d done with %s solver, %d particles", self.step_count, solver.name, self.store.count)
        if self.on_step_callback:
            self.on_step_callback(self)
        return True

    def step(self) -> bool:
        """Advance one time step using the relaxation solver."""
        return self.advance("relaxation")

    def step_with_fft(self) -> bool:
        """Advance one time step using the spectral (FFT) solver."""
        return self.advance("spectral")

    def run(self, n_steps: int, solver_name: Optional[str] = None):
        """Run simulation for specified number of steps.

        Args:
            n_steps: Number of steps to run
            solver_name: Registered solver to use (config default if None)
        """
        for _ in range(n_steps):
            if not self.advance(solver_name):
                return

    def pause(self):
        """Pause simulation."""
        self.paused = True

    def resume(self):
        """Resume simulation."""
        self.paused = False

    def set_timestep(self, dt: float):
        """Set time step.

        Args:
            dt: New time step
        """
        self.dt = dt

    def compute_potential(self, solver_name: Optional[str] = None) -> np.ndarray:
        """Deposit mass and solve for the potential without moving particles.

        Returns:
            Potential as a (gx, gy, gz) NumPy array
        """
        solver = self._get_solver(solver_name)
        with self._exclusive("compute the potential"):
            self._deposit_and_solve(solver)
        return self.backend.to_numpy(self.mesh.view(self.mesh.potential_grid)).copy()

    # ------------------------------------------------------------------
    # Population edits
    # ------------------------------------------------------------------

    def set_circular_orbits(
        self,
        cross_base: Sequence[float] = (0.0, 0.0, 1.0),
        solver_name: Optional[str] = None,
    ) -> int:
        """Assign circular-orbit velocities from a freshly solved potential.

        Returns:
            Number of particles given a non-zero orbital velocity
        """
        solver = self._get_solver(solver_name)
        with self._exclusive("set orbits"):
            self._deposit_and_solve(solver)
            return set_circular_orbits(self.store, self.mesh, cross_base)

    def add_particle(self, particle: Particle) -> int:
        """Append a particle; returns its index."""
        with self._exclusive("add a particle"):
            return self.store.append(particle)

    def set_particle_mass(self, index: int, mass: float):
        """Set the mass of the particle at ``index``.

        Raises:
            IndexError: If index is out of range
            ValueError: If mass is negative or NaN
        """
        with self._exclusive("change a particle mass"):
            self.store.set_mass(index, mass)

    def place_black_hole(self, x: float, y: float, z: Optional[float] = None) -> int:
        """Create the black hole, or move the existing one, to (x, y, z).

        A new black hole with ``z`` None sits at the middle of the world
        depth; moving an existing one with ``z`` None keeps its current depth.
        The black hole is an ordinary particle of mass ``config.black_hole_mass``.

        Returns:
            Index of the black hole particle
        """
        mass = self.config.black_hole_mass
        if self.black_hole_index is None:
            if z is None:
                z = self.config.world_center[2]
            self.black_hole_index = self.add_particle(
                Particle(x, y, z, m=mass, r=BLACK_HOLE_RADIUS)
            )
            logger.info("Black hole placed at (%.3g, %.3g, %.3g), index %d", x, y, z, self.black_hole_index)
        else:
            with self._exclusive("move the black hole"):
                index = self.black_hole_index
                self.store.positions[0, index] = x
                self.store.positions[1, index] = y
                if z is not None:
                    self.store.positions[2, index] = z
                self.store.set_mass(index, mass)
        return self.black_hole_index

    def drop_black_hole(self) -> bool:
        """Switch the black hole off by zeroing its mass.

        The particle keeps its index, so the next ``place_black_hole`` reuses it.

        Returns:
            True if there was a black hole to drop
        """
        if self.black_hole_index is None:
            return False
        self.set_particle_mass(self.black_hole_index, 0.0)
        return True

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def particle_count(self) -> int:
        return self.store.count

    @property
    def positions(self) -> np.ndarray:
        """(3, n) positions as a NumPy copy."""
        return np.array(self.backend.to_numpy(self.store.positions))

    @property
    def velocities(self) -> np.ndarray:
        """(3, n) velocities as a NumPy copy."""
        return np.array(self.backend.to_numpy(self.store.velocities))

    @property
    def masses(self) -> np.ndarray:
        return np.array(self.backend.to_numpy(self.store.masses))

    @property
    def radii(self) -> np.ndarray:
        return np.array(self.backend.to_numpy(self.store.radii))

    def get_state(self):
        """Get current simulation state.

        Returns:
            Tuple of (positions (n, 3), velocities (n, 3), masses, radii, time, step_count)
        """
        positions, velocities, masses, radii = self.store.get_state()
        return positions, velocities, masses, radii, self.time, self.step_count
