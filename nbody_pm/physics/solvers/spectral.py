"""FFT-based periodic Poisson solver."""

import math
import logging
from typing import Dict, Optional, Tuple
from nbody_pm.physics.mesh import Mesh
from nbody_pm.physics.solvers.base import PoissonSolver
from nbody_pm.physics.workers import WorkerPool

logger = logging.getLogger(__name__)

# Below this |k|^2 the coefficient is the mean-density mode and is dropped
K2_EPSILON = 1e-12


class SpectralSolver(PoissonSolver):
    """Solve del^2 phi = 4 pi G rho in Fourier space.

    The domain is treated as periodic: the potential is
    ``ifft(fft(mass) * -4 pi G / k^2)`` with the zero mode removed. The
    Green's function depends only on grid shape, extent and G, so it is
    built once per combination and reused.
    """

    def __init__(self):
        self._greens_cache: Dict[Tuple, object] = {}

    @property
    def name(self) -> str:
        return "spectral"

    def greens_function(self, mesh: Mesh, g: float):
        """Return the (gx, gy, gz) Green's function for this mesh and G."""
        key = (mesh.shape, mesh.extent, float(g), mesh.backend.name)
        greens = self._greens_cache.get(key)
        if greens is not None:
            return greens

        b = mesh.backend
        gx, gy, gz = mesh.shape
        lx, ly, lz = mesh.extent
        kx = 2.0 * math.pi * b.fftfreq(gx) / lx
        ky = 2.0 * math.pi * b.fftfreq(gy) / ly
        kz = 2.0 * math.pi * b.fftfreq(gz) / lz
        k2 = kx[:, None, None] ** 2 + ky[None, :, None] ** 2 + kz[None, None, :] ** 2

        zero_mode = k2 < K2_EPSILON
        safe_k2 = b.where(zero_mode, 1.0, k2)
        greens = b.where(zero_mode, 0.0, -4.0 * math.pi * g / safe_k2)

        self._greens_cache[key] = greens
        logger.debug("Built Green's function for grid %s, extent %s, G=%g", mesh.shape, mesh.extent, g)
        return greens

    def solve(self, mesh: Mesh, g: float, pool: Optional[WorkerPool] = None):
        b = mesh.backend
        greens = self.greens_function(mesh, g)
        density_k = b.fftn(mesh.view(mesh.mass_grid))
        potential = b.real(b.ifftn(density_k * greens))
        mesh.potential_grid[...] = potential.reshape(-1)
        return mesh.potential_grid
