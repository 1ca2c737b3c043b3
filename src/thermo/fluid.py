"""Fluid-specific state: specie data of dry air and water vapour, turbulent viscosity."""

from dataclasses import dataclass
import logging

import numpy as np

from datastructures.fields import CALCULATED, VolScalarField

from .base import FluidThermo
from .psychrometrics import W_DRY_AIR, W_WATER, gas_constant, sutherland_viscosity

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpecieData:
    """Molar weight [g/mol] and Sutherland coefficients of one specie."""

    mol_weight: float
    As: float  # Sutherland coefficient [kg/m/s/K^0.5]
    Ts: float  # Sutherland temperature [K]

    @property
    def R(self) -> float:
        return gas_constant(self.mol_weight)

    def mu(self, T):
        return sutherland_viscosity(T, self.As, self.Ts)

    def updated(self, overrides):
        if not overrides:
            return self
        return SpecieData(
            mol_weight=float(overrides.get("molWeight", self.mol_weight)),
            As=float(overrides.get("As", self.As)),
            Ts=float(overrides.get("Ts", self.Ts)),
        )


DRY_AIR = SpecieData(mol_weight=W_DRY_AIR, As=1.458e-6, Ts=110.4)
WATER_VAPOR = SpecieData(mol_weight=W_WATER, As=1.67212e-6, Ts=170.672)


class FluidThermoImplementation(FluidThermo):
    """Fluid layer over a shared BasicThermoImplementation.

    Specie data can be overridden in the property dictionary::

        mixture:
          dryAir: {molWeight: 28.9647, As: 1.458e-6, Ts: 110.4}
          water: {molWeight: 18.01528, As: 1.67212e-6, Ts: 170.672}
    """

    def __init__(self, basic):
        self.basic = basic
        self.read_species()
        self._mut = VolScalarField.uniform(
            basic.phase_property_name("mut"), basic.mesh, 0.0, "kg/m/s", patch_type=CALCULATED
        )

    def read_species(self):
        mixture = self.basic.properties.get("mixture") or {}
        self.dry_air = DRY_AIR.updated(mixture.get("dryAir"))
        self.water = WATER_VAPOR.updated(mixture.get("water"))
        log.debug(f"Specie data: dry air {self.dry_air}, water {self.water}")

    @property
    def eps(self) -> float:
        """Ratio of molar weights water / dry air."""
        return self.water.mol_weight / self.dry_air.mol_weight

    def turbulent_viscosity(self) -> VolScalarField:
        return self._mut.copy()

    def set_turbulent_viscosity(self, mut):
        if isinstance(mut, VolScalarField):
            self._mut.assign(mut)
            return
        mut = np.asarray(mut, dtype=np.float64)
        if mut.ndim == 0:
            self._mut.internal[:] = mut
            for values in self._mut.boundary.values():
                values[:] = mut
        else:
            self._mut.internal[:] = mut
            for patch, values in self._mut.boundary.items():
                values[:] = mut[self.basic.mesh.patch_owner_cells(patch)]

    def turbulent_viscosity_regions(self):
        """Live region arrays of mut, for derivation loops."""
        return self._mut.regions()
