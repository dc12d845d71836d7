"""Static 2D projection snapshots using matplotlib."""

import logging
from pathlib import Path
from typing import Sequence, Tuple
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

AXIS_NAMES = "xyz"


def save_projection(
    positions: np.ndarray,
    masses: np.ndarray,
    extent: Sequence[float],
    output_path: str,
    axes: str = "xy",
    figsize: Tuple[int, int] = (8, 8),
    dpi: int = 100,
    title: str = None,
):
    """Write a scatter plot of the particles projected onto two axes.

    Marker size follows sqrt(mass) so heavy bodies stand out.

    Args:
        positions: Particle positions (3, n)
        masses: Particle masses (n,)
        extent: World size per axis (sets the plot limits)
        output_path: Image path (any format matplotlib can save)
        axes: Two of 'x', 'y', 'z' naming the projection plane
        figsize: Figure size (width, height)
        dpi: Dots per inch
        title: Optional plot title
    """
    if len(axes) != 2 or any(a not in AXIS_NAMES for a in axes) or axes[0] == axes[1]:
        raise ValueError(f"axes must name two different axes out of 'xyz', got '{axes}'")
    i, j = (AXIS_NAMES.index(a) for a in axes)
    positions = np.asarray(positions)
    masses = np.asarray(masses).reshape(-1)

    sizes = np.sqrt(masses)
    if sizes.size and sizes.max() > 0:
        sizes = 0.5 + 20.0 * sizes / sizes.max()

    fig, ax = plt.subplots(figsize=figsize, dpi=dpi)
    try:
        ax.set_facecolor("black")
        ax.scatter(positions[i], positions[j], s=sizes, c="white", linewidths=0)
        ax.set_xlim(0.0, extent[i])
        ax.set_ylim(0.0, extent[j])
        ax.set_aspect("equal")
        ax.set_xlabel(axes[0].upper())
        ax.set_ylabel(axes[1].upper())
        if title:
            ax.set_title(title)
        fig.savefig(Path(output_path), bbox_inches="tight")
    finally:
        plt.close(fig)
    logger.debug("Saved %s projection of %d particles to %s", axes, masses.size, output_path)
