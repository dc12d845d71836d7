"""Reproducibility utilities for deterministic simulations."""

import numpy as np
from typing import Optional


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random generator used to build initial conditions.

    Every generator is independent of global NumPy state, so the same seed
    always reproduces the same particles.

    Args:
        seed: Random seed, or None for fresh OS entropy

    Returns:
        NumPy random generator
    """
    if seed is not None and seed < 0:
        raise ValueError(f"seed must be non-negative, got {seed}")
    return np.random.default_rng(seed)
