"""Moist-air property model.

HumidityRhoThermoImplementation owns the HumidityFields set and implements
the HumidityRhoThermo contract. Density and compressibility follow from the
ideal-gas mixture of dry air and water vapour; the water content is carried
as specific humidity and bounded by saturation.

Derivation order (``correct``), for the cells and every patch:

1. saturation pressure pSatH2O from the selected method
2. partial pressure from the current specific humidity
3. clamp the partial pressure to [0, min(pSatH2O, p)]
4. maximum and actual specific humidity and water vapour content from the
   clamped bound and the clamped partial pressure, each clipped to [0, max]
5. relative humidity and water mass
6. psi = 1 / (R_mix T), rho = psi p
7. mu from Wilke mixing of dry air and vapour, muEff = mu + mut

Out-of-range states are clamped, never raised. Pressures below P_MIN
(including non-positive ones) are floored at P_MIN in every relation that
divides by p, and the density is psi times that floored pressure. A cell
whose specific humidity reaches its saturated bound gets exactly
partialPressureH2O = min(pSatH2O, p).
"""

import logging

import numpy as np
import pandas as pd

from datastructures.fields import FIXED_VALUE, INTERNAL, ZERO_GRADIENT, VolScalarField
from utilities.config import to_plain_dict

from .base import HumidityRhoThermo
from .basic import BasicThermoImplementation
from .datastructures import HumidityFields, region_arrays
from .exceptions import FieldSetNotAllocated
from .fluid import FluidThermoImplementation
from .psychrometrics import (
    bounded_pressure,
    mixture_gas_constant,
    partial_pressure_from_specific_humidity,
    specific_humidity_from_partial_pressure,
    wilke_viscosity,
)
from .saturation import get_saturation_method

log = logging.getLogger(__name__)


class HumidityRhoThermoImplementation(HumidityRhoThermo):
    """Humidity layer over shared base and fluid state.

    Parameters
    ----------
    basic : BasicThermoImplementation
        Shared thermodynamic state (T, p, property dictionary).
    fluid : FluidThermoImplementation
        Fluid layer built on the same ``basic``.

    Use ``from_mesh`` or ``from_dict`` to build a standalone model.
    """

    def __init__(self, basic, fluid):
        if fluid.basic is not basic:
            raise ValueError("Fluid layer must be built on the same base state")
        self.basic = basic
        self.fluid = fluid
        self.fields = None
        self.method = None
        self._saturation = None

        self.read_method()
        self._read_init_flag()

        # Only the field selected by initWithRelHumidity is read, the rest is derived
        if self.init_with_rel_humidity:
            given = {"rel_hum": basic.read_field("relHum", "-")}
        else:
            given = {"specific_humidity": basic.read_field("specificHumidity", "kg/kg")}
        self.fields = HumidityFields.allocate(basic.mesh, basic.phase_name, **given)
        self._set_humidity_patch_types(next(iter(given.values())))

        self.read_or_init_specific_humidity()
        log.info(
            f"Humidity model for phase '{basic.phase_name or '<default>'}': method={self.method}, "
            f"initWithRelHumidity={self.init_with_rel_humidity}"
        )

    @classmethod
    def from_mesh(cls, mesh, phase_name=None):
        """Construct with properties and fields located by convention from the mesh."""
        basic = BasicThermoImplementation(mesh, phase_name)
        return cls(basic, FluidThermoImplementation(basic))

    @classmethod
    def from_dict(cls, mesh, properties, phase_name=None):
        """Construct with an explicit property dictionary."""
        basic = BasicThermoImplementation(mesh, phase_name, properties=properties)
        return cls(basic, FluidThermoImplementation(basic))

    def _set_humidity_patch_types(self, source: VolScalarField):
        # Water content is held on fixedValue patches of the input field and
        # follows the cells elsewhere
        q = self.fields.specific_humidity
        for patch, patch_type in source.patch_types.items():
            q.patch_types[patch] = FIXED_VALUE if patch_type == FIXED_VALUE else ZERO_GRADIENT

    def _check_allocated(self):
        if self.fields is None:
            raise FieldSetNotAllocated(
                f"{type(self).__name__} used before its field set was allocated"
            )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_method(self):
        """Re-read the saturation-pressure method from the property dictionary.

        Raises InvalidMethod without touching the current method or fields.
        """
        method = self.basic.properties.get("method")
        saturation = get_saturation_method(method)
        if method != self.method:
            log.info(f"Saturation pressure method: {method}")
        self.method = method
        self._saturation = saturation

    def _read_init_flag(self):
        self.init_with_rel_humidity = bool(self.basic.properties.get("initWithRelHumidity", False))

    def read(self, properties=None):
        """Reload the property dictionary (optionally a new one).

        Re-reads the method, the specie data and the initWithRelHumidity
        flag. The fields are not re-initialised; call
        ``read_or_init_specific_humidity`` for that.
        """
        if properties is not None:
            properties = to_plain_dict(properties)
            # validate before anything is replaced
            get_saturation_method(properties.get("method"))
            self.basic.set_properties(properties)
            self.fluid.read_species()
        self.read_method()
        self._read_init_flag()

    def read_or_init_specific_humidity(self):
        """Reconcile specific and relative humidity.

        With initWithRelHumidity the relative humidity (clipped to [0, 1]) and
        the saturation pressure give the specific humidity; otherwise the
        specific humidity is kept and the relative humidity is derived from it.
        """
        self._check_allocated()
        f = self.fields
        if self.init_with_rel_humidity:
            T = self.basic.T().regions()
            p = self.basic.p().regions()
            rel_hum = f.rel_hum.regions()
            q = f.specific_humidity.regions()
            for region in q:
                p_r = bounded_pressure(p[region])
                p_sat = self._saturation(T[region])
                pv = np.clip(rel_hum[region], 0.0, 1.0) * p_sat
                pv = np.minimum(pv, np.minimum(p_sat, p_r))
                q[region][:] = specific_humidity_from_partial_pressure(pv, p_r, self.fluid.eps)
        self.correct()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def correct(self, mut=None):
        self._check_allocated()
        if mut is not None:
            self.fluid.set_turbulent_viscosity(mut)

        f = self.fields
        f.specific_humidity.correct_boundary_conditions()

        T = self.basic.T().regions()
        p = self.basic.p().regions()
        mut_regions = self.fluid.turbulent_viscosity_regions()
        out = region_arrays(f)
        mesh = self.basic.mesh
        eps = self.fluid.eps
        R_dry = self.fluid.dry_air.R
        R_vapor = self.fluid.water.R

        n_clamped = 0
        for region in T:
            T_r = T[region]
            p_r = bounded_pressure(p[region])
            volume = mesh.cell_volumes if region == INTERNAL else mesh.cell_volumes[mesh.patch_owner_cells(region)]

            p_sat = self._saturation(T_r)
            pv_max = np.minimum(p_sat, p_r)
            q_max = specific_humidity_from_partial_pressure(pv_max, p_r, eps)

            q_in = out["specific_humidity"][region]
            n_clamped += int(np.count_nonzero((q_in < 0.0) | (q_in > q_max)))
            pv = partial_pressure_from_specific_humidity(np.clip(q_in, 0.0, 1.0), p_r, eps)
            # saturated values sit exactly on the bound
            pv = np.where(q_in >= q_max, pv_max, np.clip(pv, 0.0, pv_max))

            q = np.clip(specific_humidity_from_partial_pressure(pv, p_r, eps), 0.0, q_max)
            wv_max = pv_max / (R_vapor * T_r)
            wv = np.clip(pv / (R_vapor * T_r), 0.0, wv_max)

            psi = 1.0 / (mixture_gas_constant(q, R_dry, R_vapor) * T_r)

            x_vapor = pv / p_r
            mu = wilke_viscosity(
                [1.0 - x_vapor, x_vapor],
                [self.fluid.dry_air.mu(T_r), self.fluid.water.mu(T_r)],
                [self.fluid.dry_air.mol_weight, self.fluid.water.mol_weight],
            )

            out["p_sat_h2o"][region][:] = p_sat
            out["partial_pressure_h2o"][region][:] = pv
            out["max_specific_humidity"][region][:] = q_max
            out["specific_humidity"][region][:] = q
            out["max_water_vapor"][region][:] = wv_max
            out["water_vapor"][region][:] = wv
            out["rel_hum"][region][:] = pv / p_sat
            out["water_mass"][region][:] = wv * volume
            out["psi"][region][:] = psi
            out["rho"][region][:] = psi * p_r
            out["mu"][region][:] = mu
            out["mu_eff"][region][:] = mu + mut_regions[region]

        if n_clamped:
            log.debug(f"Clamped water content in {n_clamped} cell/face values to saturation")

    def update_specific_humidity(self, q):
        """Replace the cell values of the specific humidity and re-derive.

        zeroGradient patches follow the new cell values, fixedValue patches
        are held.
        """
        self._check_allocated()
        if isinstance(q, VolScalarField):
            q = q.internal
        self.fields.specific_humidity.internal[:] = np.asarray(q, dtype=np.float64)
        self.correct()

    # ------------------------------------------------------------------
    # Density
    # ------------------------------------------------------------------

    def density(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.rho.copy()

    def density_patch(self, patch: str) -> np.ndarray:
        self._check_allocated()
        return self.fields.rho.patch(patch)

    def density_mutable(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.rho

    def previous_density(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.rho.old_time()

    def correct_density(self, delta: VolScalarField):
        """Add ``delta`` to rho on cells and patches; psi is reset to rho / p."""
        self._check_allocated()
        f = self.fields
        f.rho += delta
        p = self.basic.p().regions()
        psi = f.psi.regions()
        for region, rho in f.rho.regions().items():
            psi[region][:] = rho / bounded_pressure(p[region])

    def compressibility(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.psi.copy()

    def store_old_times(self):
        self._check_allocated()
        self.fields.rho.store_old_time()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def viscosity(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.mu.copy()

    def viscosity_patch(self, patch: str) -> np.ndarray:
        self._check_allocated()
        return self.fields.mu.patch(patch)

    def effective_viscosity(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.mu_eff.copy()

    # ------------------------------------------------------------------
    # Humidity state
    # ------------------------------------------------------------------

    def relative_humidity(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.rel_hum.copy()

    def specific_humidity(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.specific_humidity.copy()

    def max_specific_humidity(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.max_specific_humidity.copy()

    def saturation_pressure(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.p_sat_h2o.copy()

    def partial_pressure(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.partial_pressure_h2o.copy()

    def water_vapor(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.water_vapor.copy()

    def max_water_vapor(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.max_water_vapor.copy()

    def water_mass(self) -> VolScalarField:
        self._check_allocated()
        return self.fields.water_mass.copy()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

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
