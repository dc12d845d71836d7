"""Fixed-size 3D mesh holding deposited mass and potential."""

from typing import Any, Sequence, Tuple
from nbody_pm.backends.base import Backend


class Mesh:
    """Regular 3D grid with flattened row-major buffers.

    Cell ``(ix, iy, iz)`` lives at flat index ``ix*gy*gz + iy*gz + iz`` in
    each of ``mass_grid``, ``potential_grid`` and ``scratch``. The buffers
    are allocated once; only their contents change between ticks.
    """

    def __init__(self, shape: Sequence[int], extent: Sequence[float], backend: Backend):
        """Initialize mesh.

        Args:
            shape: Cells per axis (gx, gy, gz), each at least 3
            extent: World size per axis
            backend: Compute backend for the buffers
        """
        self.shape: Tuple[int, int, int] = tuple(int(s) for s in shape)
        self.extent: Tuple[float, float, float] = tuple(float(e) for e in extent)
        if len(self.shape) != 3 or len(self.extent) != 3:
            raise ValueError("Mesh needs exactly three axes")
        if min(self.shape) < 3:
            raise ValueError(f"Every mesh dimension must be at least 3, got {self.shape}")

        self.backend = backend
        self.cell_size: Tuple[float, float, float] = tuple(
            e / s for e, s in zip(self.extent, self.shape)
        )
        gx, gy, gz = self.shape
        self.strides: Tuple[int, int, int] = (gy * gz, gz, 1)
        self.n_cells = gx * gy * gz

        self.mass_grid = backend.zeros(self.n_cells)
        self.potential_grid = backend.zeros(self.n_cells)
        self.scratch = backend.zeros(self.n_cells)

    def view(self, grid: Any) -> Any:
        """Return a (gx, gy, gz) view of one of the flat buffers."""
        return grid.reshape(self.shape)

    def flat_index(self, ix: Any, iy: Any, iz: Any) -> Any:
        """Flatten per-axis cell indices."""
        sx, sy, _ = self.strides
        return ix * sx + iy * sy + iz

    def cell_indices(self, positions: Any, margin: int = 0) -> Tuple[Any, Any, Any]:
        """Map positions to clamped per-axis cell indices.

        Args:
            positions: (3, n) positions in world units
            margin: Cells excluded at each end; 0 for deposition
                (``[0, dim-1]``), 1 for gradient sampling (``[1, dim-2]``)

        Returns:
            Tuple of integer index arrays (ix, iy, iz)
        """
        b = self.backend
        indices = []
        for axis in range(3):
            # Clamp before the integer cast so infinite or huge coordinates stay in range
            cells = b.clip(
                b.floor(positions[axis] / self.cell_size[axis]),
                margin,
                self.shape[axis] - 1 - margin,
            )
            # NaN survives clip; send it to the lowest valid cell
            cells = b.where(cells == cells, cells, margin)
            indices.append(b.to_index(cells))
        return tuple(indices)

    def deposit_index(self, positions: Any) -> Any:
        """Flat cell index for mass deposition."""
        return self.flat_index(*self.cell_indices(positions, margin=0))

    def gradient_index(self, positions: Any) -> Any:
        """Flat cell index for gradient sampling (always has both neighbours)."""
        return self.flat_index(*self.cell_indices(positions, margin=1))

    def clear_mass(self):
        """Zero the mass grid in place."""
        self.mass_grid[...] = 0.0
