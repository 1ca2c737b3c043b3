"""Abstract contracts for thermophysical property models.

Contract Hierarchy:
-------------------
BasicThermo        (thermodynamic state: mesh, phase, T, p, property dictionary)
FluidThermo        (specie data and turbulent viscosity of a fluid)
RhoThermo          (density, compressibility and viscosity of a density-based model)
└── HumidityRhoThermo  (RhoThermo plus the moist-air state)

The contracts carry no state. Implementations hold the state and a composite
model exposes several contracts over one shared base state, see
``thermo.composite``.
"""

from abc import ABC, abstractmethod

import numpy as np

from datastructures.fields import VolScalarField


class BasicThermo(ABC):
    """Thermodynamic state shared by every model of a phase."""

    @property
    @abstractmethod
    def mesh(self):
        """Mesh the model lives on."""

    @property
    @abstractmethod
    def phase_name(self) -> str:
        """Phase name; empty for the unnamed phase."""

    @property
    @abstractmethod
    def properties(self) -> dict:
        """Resolved property dictionary of the phase."""

    @abstractmethod
    def T(self) -> VolScalarField:
        """Temperature [K] (live field, owned by the energy solution)."""

    @abstractmethod
    def p(self) -> VolScalarField:
        """Pressure [Pa] (live field, owned by the pressure solution)."""

    @abstractmethod
    def phase_property_name(self, name: str) -> str:
        """Qualify a field or dictionary name with the phase name."""


class FluidThermo(ABC):
    """Specie data and turbulence coupling of a fluid."""

    @abstractmethod
    def turbulent_viscosity(self) -> VolScalarField:
        """Turbulent viscosity [kg/m/s] supplied by the turbulence model."""

    @abstractmethod
    def set_turbulent_viscosity(self, mut):
        """Replace the turbulent viscosity (field, array or scalar)."""


class RhoThermo(ABC):
    """Density-based property contract used by the flow solvers."""

    # --- Density ---

    @abstractmethod
    def density(self) -> VolScalarField:
        """Density [kg/m^3], read-only snapshot."""

    @abstractmethod
    def density_patch(self, patch: str) -> np.ndarray:
        """Density [kg/m^3] on one patch, read-only."""

    @abstractmethod
    def density_mutable(self) -> VolScalarField:
        """Live density field for controlled external edits.

        The caller must not keep the handle beyond the model's lifetime.
        """

    @abstractmethod
    def previous_density(self) -> VolScalarField:
        """Old-time density [kg/m^3], read-only snapshot."""

    @abstractmethod
    def correct_density(self, delta: VolScalarField):
        """Add a density correction in place (cells and patches).

        Used to update the density after the pressure solution.
        """

    @abstractmethod
    def compressibility(self) -> VolScalarField:
        """Compressibility psi [s^2/m^2], read-only."""

    # --- Transport ---

    @abstractmethod
    def viscosity(self) -> VolScalarField:
        """Dynamic viscosity of the mixture [kg/m/s], read-only."""

    @abstractmethod
    def viscosity_patch(self, patch: str) -> np.ndarray:
        """Dynamic viscosity of the mixture on one patch [kg/m/s]."""

    @abstractmethod
    def effective_viscosity(self) -> VolScalarField:
        """Laminar plus turbulent viscosity [kg/m/s], read-only."""

    # --- Update ---

    @abstractmethod
    def correct(self, mut=None):
        """Re-derive all properties from the current thermodynamic state."""

    @abstractmethod
    def store_old_times(self):
        """Snapshot time-dependent fields at the start of a time step."""


class HumidityRhoThermo(RhoThermo):
    """Density-based model of moist air."""

    @abstractmethod
    def relative_humidity(self) -> VolScalarField:
        """Relative humidity [-]."""

    @abstractmethod
    def specific_humidity(self) -> VolScalarField:
        """Specific humidity [kg water / kg moist air]."""

    @abstractmethod
    def saturation_pressure(self) -> VolScalarField:
        """Saturation pressure of water [Pa]."""

    @abstractmethod
    def partial_pressure(self) -> VolScalarField:
        """Partial pressure of water vapour [Pa]."""

    @abstractmethod
    def water_vapor(self) -> VolScalarField:
        """Water vapour content [kg water / m^3 air]."""

    @abstractmethod
    def water_mass(self) -> VolScalarField:
        """Water vapour mass per cell [kg]."""

    @abstractmethod
    def update_specific_humidity(self, q):
        """Replace the transported water content and re-derive the state."""

    @abstractmethod
    def read_method(self):
        """(Re-)read the saturation-pressure method from the properties."""

    @abstractmethod
    def read_or_init_specific_humidity(self):
        """Reconcile relative and specific humidity at start-up."""
