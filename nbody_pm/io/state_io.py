"""State I/O for saving and loading simulation states."""

import numpy as np
import json
from typing import Tuple, Dict, Any, Optional
from pathlib import Path


def save_state(
    positions: np.ndarray,
    velocities: np.ndarray,
    masses: np.ndarray,
    output_path: str,
    radii: Optional[np.ndarray] = None,
    metadata: Optional[Dict[str, Any]] = None
):
    """Save simulation state to file.

    Args:
        positions: Particle positions (n, 3)
        velocities: Particle velocities (n, 3)
        masses: Particle masses (n,)
        output_path: Output file path (.npz or .json)
        radii: Display radii (n,); sqrt(masses) if None
        metadata: Optional metadata dictionary of scalars

    Raises:
        ValueError: For an unsupported suffix or mismatched array lengths
    """
    output_path = Path(output_path)
    positions = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 3)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    radii = np.sqrt(masses) if radii is None else np.asarray(radii, dtype=np.float64).reshape(-1)
    lengths = {len(positions), len(velocities), len(masses), len(radii)}
    if len(lengths) != 1:
        raise ValueError(
            f"State arrays have mismatched lengths: positions={len(positions)}, "
            f"velocities={len(velocities)}, masses={len(masses)}, radii={len(radii)}"
        )

    if output_path.suffix == '.npz':
        save_dict = {
            'positions': positions,
            'velocities': velocities,
            'masses': masses,
            'radii': radii,
        }
        if metadata:
            # npz only holds arrays; keep scalar metadata under a prefix
            for key, value in metadata.items():
                if isinstance(value, (int, float, str)):
                    save_dict[f'metadata_{key}'] = value
        np.savez_compressed(output_path, **save_dict)

    elif output_path.suffix == '.json':
        state_dict = {
            'positions': positions.tolist(),
            'velocities': velocities.tolist(),
            'masses': masses.tolist(),
            'radii': radii.tolist(),
            'metadata': metadata or {}
        }
        with open(output_path, 'w') as f:
            json.dump(state_dict, f, indent=2)

    else:
        raise ValueError(f"Unsupported file format: {output_path.suffix}. Use .npz or .json")


def load_state(input_path: str) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, Dict[str, Any]]:
    """Load simulation state from file.

    Args:
        input_path: Input file path

    Returns:
        Tuple of (positions (n, 3), velocities (n, 3), masses, radii, metadata)
    """
    input_path = Path(input_path)

    if input_path.suffix == '.npz':
        with np.load(input_path) as data:
            positions = data['positions'].reshape(-1, 3)
            velocities = data['velocities'].reshape(-1, 3)
            masses = data['masses']
            radii = data['radii'] if 'radii' in data.files else np.sqrt(masses)
            metadata = {
                key[len('metadata_'):]: data[key].item()
                for key in data.files if key.startswith('metadata_')
            }

    elif input_path.suffix == '.json':
        with open(input_path, 'r') as f:
            state_dict = json.load(f)

        positions = np.array(state_dict['positions'], dtype=np.float64).reshape(-1, 3)
        velocities = np.array(state_dict['velocities'], dtype=np.float64).reshape(-1, 3)
        masses = np.array(state_dict['masses'], dtype=np.float64)
        radii = np.array(state_dict['radii'], dtype=np.float64) if 'radii' in state_dict else np.sqrt(masses)
        metadata = state_dict.get('metadata', {})

    else:
        raise ValueError(f"Unsupported file format: {input_path.suffix}. Use .npz or .json")

    return positions, velocities, masses, radii, metadata
