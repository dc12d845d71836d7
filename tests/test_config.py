"""Tests for configuration loading and validation."""

import json
import pytest
import yaml
from nbody_pm.utils.config import SimulationConfig, load_config, save_config


def test_default_config():
    """Test defaults and derived properties."""
    config = SimulationConfig()
    assert config.grid_shape == (64, 64, 64)
    assert config.world_extent == (1_000_000.0, 1_000_000.0, 1_000_000.0)
    assert config.cell_size == (15625.0, 15625.0, 15625.0)
    assert config.world_center == (500_000.0, 500_000.0, 500_000.0)
    assert config.boundary == "drop"
    assert config.solver == "relaxation"
    assert config.n_workers >= 1
    assert config.preset_params == {}


def test_cubic_config():
    """Test the cubic helper sets every axis."""
    config = SimulationConfig.cubic(16, 32.0, g=1.0)
    assert config.grid_shape == (16, 16, 16)
    assert config.world_extent == (32.0, 32.0, 32.0)
    assert config.cell_size == (2.0, 2.0, 2.0)
    assert config.g == 1.0


@pytest.mark.parametrize("kwargs", [
    {"grid_size_x": 2},
    {"grid_size_z": 0},
    {"world_width": 0.0},
    {"world_depth": -5.0},
    {"boundary": "bounce"},
    {"smoothing_iterations": 0},
    {"n_workers": 0},
])
def test_invalid_config(kwargs):
    """Test invalid settings raise ValueError."""
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_save_load_json(tmp_path):
    """Test JSON config round trip."""
    config = SimulationConfig.cubic(8, 100.0, solver="spectral", n_workers=2, seed=7)
    path = tmp_path / "config.json"
    save_config(config, str(path))

    loaded = load_config(str(path))
    assert loaded == config
    assert json.loads(path.read_text())["solver"] == "spectral"


def test_load_yaml_partial(tmp_path):
    """Test a partial YAML file fills in defaults."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"grid_size_x": 12, "boundary": "clamp", "preset_params": {"radius": 0.2}}))

    config = load_config(str(path))
    assert config.grid_shape == (12, 64, 64)
    assert config.boundary == "clamp"
    assert config.preset_params == {"radius": 0.2}


def test_load_invalid_yaml(tmp_path):
    """Test invalid values in a file are rejected on load."""
    path = tmp_path / "config.yml"
    path.write_text("smoothing_iterations: 0\n")
    with pytest.raises(ValueError):
        load_config(str(path))
