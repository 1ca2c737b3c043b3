"""Pytest configuration and fixtures for property model tests."""

import copy
import sys
from pathlib import Path

import pytest
from omegaconf import OmegaConf

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# 10 cells in a row; the two end faces form one patch, the long sides another
ROW_PATCHES = {"left": "ends", "right": "ends", "bottom": "walls", "top": "walls"}


def humid_properties(**overrides):
    """Property dictionary of a moist-air phase at 20 degC, 1 bar, 50 % RH."""
    properties = {
        "thermoType": {"type": "humidityRhoThermo"},
        "method": "simpleSaturation",
        "initWithRelHumidity": True,
        "initialConditions": {
            "T": 293.15,
            "p": 1.0e5,
            "relHum": 0.5,
        },
    }
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(properties.get(key), dict):
            properties[key] = {**properties[key], **value}
        else:
            properties[key] = value
    return copy.deepcopy(properties)


@pytest.fixture
def make_mesh():
    """Factory: 10-cell, 2-patch mesh carrying a case configuration."""
    from meshing import create_structured_mesh_2d

    def _make(case=None, nx=10, ny=1, patch_names=ROW_PATCHES):
        config = OmegaConf.create(case if case is not None else {"thermophysicalProperties": humid_properties()})
        return create_structured_mesh_2d(nx, ny, Lx=1.0, Ly=0.1, patch_names=patch_names, config=config)

    return _make


@pytest.fixture
def mesh(make_mesh):
    """Mesh with the default moist-air case."""
    return make_mesh()


@pytest.fixture
def humid_model(mesh):
    """Moist-air model selected through the registry."""
    from thermo import create

    return create(mesh)
