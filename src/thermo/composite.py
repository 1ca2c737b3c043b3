"""Composite property models.

A composite builds the shared base state once, layers the fluid state on it,
then the property layer on both, and exposes every contract by delegation:

    basic    = BasicThermoImplementation(mesh, phase_name)
    fluid    = FluidThermoImplementation(basic)
    humidity = HumidityRhoThermoImplementation(basic, fluid)

No layer builds its own copy of the base state, so every field exists once.
"""

import logging

from .base import BasicThermo, FluidThermo, HumidityRhoThermo, RhoThermo
from .basic import BasicThermoImplementation
from .dry import DryRhoThermoImplementation
from .fluid import FluidThermoImplementation
from .humidity import HumidityRhoThermoImplementation
from .registry import register

log = logging.getLogger(__name__)


def _delegate(layer: str, name: str):
    """Method forwarding to ``getattr(self, layer).<name>``."""

    def method(self, *args, **kwargs):
        return getattr(getattr(self, layer), name)(*args, **kwargs)

    method.__name__ = name
    method.__qualname__ = name
    return method


def _delegate_property(layer: str, name: str):
    return property(lambda self: getattr(getattr(self, layer), name))


class ThermoComposite(BasicThermo, FluidThermo):
    """Base and fluid layers shared by the concrete composites."""

    def __init__(self, mesh, phase_name=None):
        self.basic = BasicThermoImplementation(mesh, phase_name)
        self.fluid = FluidThermoImplementation(self.basic)

    # --- BasicThermo ---
    mesh = _delegate_property("basic", "mesh")
    phase_name = _delegate_property("basic", "phase_name")
    properties = _delegate_property("basic", "properties")
    T = _delegate("basic", "T")
    p = _delegate("basic", "p")
    phase_property_name = _delegate("basic", "phase_property_name")
    update_state = _delegate("basic", "update_state")

    # --- FluidThermo ---
    turbulent_viscosity = _delegate("fluid", "turbulent_viscosity")
    set_turbulent_viscosity = _delegate("fluid", "set_turbulent_viscosity")


@register("humidityRhoThermo")
class HumidityRhoThermoComposite(ThermoComposite, HumidityRhoThermo):
    """Moist-air model: base, fluid and humidity layers over one base state."""

    def __init__(self, mesh, phase_name=None):
        super().__init__(mesh, phase_name)
        self.humidity = HumidityRhoThermoImplementation(self.basic, self.fluid)

    # --- RhoThermo ---
    density = _delegate("humidity", "density")
    density_patch = _delegate("humidity", "density_patch")
    density_mutable = _delegate("humidity", "density_mutable")
    previous_density = _delegate("humidity", "previous_density")
    correct_density = _delegate("humidity", "correct_density")
    compressibility = _delegate("humidity", "compressibility")
    viscosity = _delegate("humidity", "viscosity")
    viscosity_patch = _delegate("humidity", "viscosity_patch")
    effective_viscosity = _delegate("humidity", "effective_viscosity")
    correct = _delegate("humidity", "correct")
    store_old_times = _delegate("humidity", "store_old_times")

    # --- HumidityRhoThermo ---
    relative_humidity = _delegate("humidity", "relative_humidity")
    specific_humidity = _delegate("humidity", "specific_humidity")
    max_specific_humidity = _delegate("humidity", "max_specific_humidity")
    saturation_pressure = _delegate("humidity", "saturation_pressure")
    partial_pressure = _delegate("humidity", "partial_pressure")
    water_vapor = _delegate("humidity", "water_vapor")
    max_water_vapor = _delegate("humidity", "max_water_vapor")
    water_mass = _delegate("humidity", "water_mass")
    update_specific_humidity = _delegate("humidity", "update_specific_humidity")
    read_method = _delegate("humidity", "read_method")
    read_or_init_specific_humidity = _delegate("humidity", "read_or_init_specific_humidity")
    read = _delegate("humidity", "read")

    # --- Output ---
    write = _delegate("humidity", "write")
    to_dataframe = _delegate("humidity", "to_dataframe")

    @property
    def method(self):
        return self.humidity.method

    @property
    def fields(self):
        return self.humidity.fields


@register("rhoThermo")
class DryRhoThermoComposite(ThermoComposite, RhoThermo):
    """Dry-air model with the same density contract."""

    def __init__(self, mesh, phase_name=None):
        super().__init__(mesh, phase_name)
        self.dry = DryRhoThermoImplementation(self.basic, self.fluid)

    density = _delegate("dry", "density")
    density_patch = _delegate("dry", "density_patch")
    density_mutable = _delegate("dry", "density_mutable")
    previous_density = _delegate("dry", "previous_density")
    correct_density = _delegate("dry", "correct_density")
    compressibility = _delegate("dry", "compressibility")
    viscosity = _delegate("dry", "viscosity")
    viscosity_patch = _delegate("dry", "viscosity_patch")
    effective_viscosity = _delegate("dry", "effective_viscosity")
    correct = _delegate("dry", "correct")
    store_old_times = _delegate("dry", "store_old_times")

    write = _delegate("dry", "write")
    to_dataframe = _delegate("dry", "to_dataframe")

    @property
    def fields(self):
        return self.dry.fields
