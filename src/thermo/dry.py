"""Dry-air property model.

Same contract as the moist-air model without the water-vapour state:
psi = 1 / (R_dry T), rho = psi p, mu from Sutherland's law.
"""

import logging

import numpy as np
import pandas as pd

from .base import RhoThermo
from .basic import BasicThermoImplementation
from .datastructures import RhoFields, region_arrays
from .exceptions import FieldSetNotAllocated
from .fluid import FluidThermoImplementation
from .psychrometrics import bounded_pressure

log = logging.getLogger(__name__)


class DryRhoThermoImplementation(RhoThermo):
    """Density layer for dry air over shared base and fluid state."""

    def __init__(self, basic, fluid):
        if fluid.basic is not basic:
            raise ValueError("Fluid layer must be built on the same base state")
        self.basic = basic
        self.fluid = fluid
        self.fields = RhoFields.allocate(basic.mesh, basic.phase_name)
        self.correct()
        log.info(f"Dry-air model for phase '{basic.phase_name or '<default>'}'")

    @classmethod
    def from_mesh(cls, mesh, phase_name=None):
        basic = BasicThermoImplementation(mesh, phase_name)
        return cls(basic, FluidThermoImplementation(basic))

    def _check_allocated(self):
        if self.fields is None:
            raise FieldSetNotAllocated(f"{type(self).__name__} used before its field set was allocated")

    def correct(self, mut=None):
        self._check_allocated()
        if mut is not None:
            self.fluid.set_turbulent_viscosity(mut)

        T = self.basic.T().regions()
        p = self.basic.p().regions()
        mut_regions = self.fluid.turbulent_viscosity_regions()
        out = region_arrays(self.fields)
        R_dry = self.fluid.dry_air.R

        for region in T:
            psi = 1.0 / (R_dry * T[region])
            mu = self.fluid.dry_air.mu(T[region])
            out["psi"][region][:] = psi
            out["rho"][region][:] = psi * bounded_pressure(p[region])
            out["mu"][region][:] = mu
            out["mu_eff"][region][:] = mu + mut_regions[region]

    def density(self):
        self._check_allocated()
        return self.fields.rho.copy()

    def density_patch(self, patch: str) -> np.ndarray:
        self._check_allocated()
        return self.fields.rho.patch(patch)

    def density_mutable(self):
        self._check_allocated()
        return self.fields.rho

    def previous_density(self):
        self._check_allocated()
        return self.fields.rho.old_time()

    def correct_density(self, delta):
        self._check_allocated()
        self.fields.rho += delta
        p = self.basic.p().regions()
        psi = self.fields.psi.regions()
        for region, rho in self.fields.rho.regions().items():
            psi[region][:] = rho / bounded_pressure(p[region])

    def compressibility(self):
        self._check_allocated()
        return self.fields.psi.copy()

    def store_old_times(self):
        self._check_allocated()
        self.fields.rho.store_old_time()

    def viscosity(self):
        self._check_allocated()
        return self.fields.mu.copy()

    def viscosity_patch(self, patch: str) -> np.ndarray:
        self._check_allocated()
        return self.fields.mu.patch(patch)

    def effective_viscosity(self):
        self._check_allocated()
        return self.fields.mu_eff.copy()

    def write(self):
        """Store every field in the mesh registry under its persisted name."""
        self._check_allocated()
        db = self.basic.mesh.db
        for field in (self.basic.T(), self.basic.p()):
            db[field.name] = field.copy()
        for _, field in self.fields.items():
            db[field.name] = field.copy()

    def to_dataframe(self) -> pd.DataFrame:
        """Cell values of T, p and every model field, one row per cell."""
        self._check_allocated()
        centers = self.basic.mesh.cell_centers
        df = pd.DataFrame(
            {
                "x": centers[:, 0],
                "y": centers[:, 1],
                self.basic.T().name: self.basic.T().internal.copy(),
                self.basic.p().name: self.basic.p().internal.copy(),
            }
        )
        return pd.concat([df, self.fields.to_dataframe()], axis=1)
