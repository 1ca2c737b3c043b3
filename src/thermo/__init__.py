"""Thermophysical property models.

Model Hierarchy:
----------------
BasicThermoImplementation            (T, p, property dictionary of a phase)
└── FluidThermoImplementation        (specie data, turbulent viscosity)
    ├── HumidityRhoThermoImplementation  (moist air: humidity, density, viscosity)
    └── DryRhoThermoImplementation       (dry air: density, viscosity)

Each layer takes the one below it instead of inheriting from it. The
composites in ``thermo.composite`` assemble the layers over one shared base
state and are what ``thermo.registry.create`` returns:

- "humidityRhoThermo" -> HumidityRhoThermoComposite
- "rhoThermo"         -> DryRhoThermoComposite
"""

from .base import BasicThermo, FluidThermo, HumidityRhoThermo, RhoThermo
from .basic import BasicThermoImplementation
from .composite import DryRhoThermoComposite, HumidityRhoThermoComposite, ThermoComposite
from .datastructures import HumidityFields, RhoFields
from .dry import DryRhoThermoImplementation
from .exceptions import (
    ConfigurationMissing,
    FieldSetNotAllocated,
    InvalidMethod,
    ThermoError,
    UnknownModelTag,
)
from .fluid import DRY_AIR, WATER_VAPOR, FluidThermoImplementation, SpecieData
from .humidity import HumidityRhoThermoImplementation
from .registry import create, register, registered_tags
from .saturation import SATURATION_METHODS, get_saturation_method

__all__ = [
    "BasicThermo",
    "FluidThermo",
    "RhoThermo",
    "HumidityRhoThermo",
    "BasicThermoImplementation",
    "FluidThermoImplementation",
    "HumidityRhoThermoImplementation",
    "DryRhoThermoImplementation",
    "ThermoComposite",
    "HumidityRhoThermoComposite",
    "DryRhoThermoComposite",
    "RhoFields",
    "HumidityFields",
    "SpecieData",
    "DRY_AIR",
    "WATER_VAPOR",
    "SATURATION_METHODS",
    "get_saturation_method",
    "create",
    "register",
    "registered_tags",
    "ThermoError",
    "ConfigurationMissing",
    "UnknownModelTag",
    "InvalidMethod",
    "FieldSetNotAllocated",
]
