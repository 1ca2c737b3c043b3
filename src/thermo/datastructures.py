"""Field sets owned by the property models.

Structure:
- RhoFields: density, compressibility and viscosity of a density-based model
- HumidityFields: RhoFields plus the moist-air state

Persisted names follow the phase naming convention. The model's own density
is stored as ``thermo:rho`` so it cannot alias a solver-owned ``rho``.
"""

from dataclasses import dataclass, fields
from typing import Dict, Optional

import numpy as np
import pandas as pd

from datastructures.fields import CALCULATED, VolScalarField
from utilities.config import group_name


# ========================================================
# Density-based models
# ========================================================


@dataclass(eq=False)
class RhoFields:
    """Fields of a density-based model."""

    rho: VolScalarField  # density [kg/m^3]
    psi: VolScalarField  # compressibility [s^2/m^2]
    mu: VolScalarField  # dynamic viscosity [kg/m/s]
    mu_eff: VolScalarField  # effective viscosity [kg/m/s]

    # attribute -> (persisted name, dimensions)
    names = {
        "rho": ("thermo:rho", "kg/m^3"),
        "psi": ("thermo:psi", "s^2/m^2"),
        "mu": ("thermo:mu", "kg/m/s"),
        "mu_eff": ("muEff", "kg/m/s"),
    }

    @classmethod
    def allocate(cls, mesh, phase_name: Optional[str] = None, **given: VolScalarField):
        """Allocate every field once, sized to the mesh.

        Fields passed in ``given`` (already read from stored state) are used
        as they are instead of being allocated.
        """
        unknown = set(given) - set(cls.names)
        if unknown:
            raise ValueError(f"Unknown fields for {cls.__name__}: {sorted(unknown)}")
        allocated = {}
        for attr, (name, dimensions) in cls.names.items():
            if attr in given:
                allocated[attr] = given[attr]
            else:
                allocated[attr] = VolScalarField.uniform(
                    group_name(name, phase_name), mesh, 0.0, dimensions, patch_type=CALCULATED
                )
        return cls(**allocated)

    def items(self):
        """(attribute, field) pairs in declaration order."""
        return [(f.name, getattr(self, f.name)) for f in fields(self)]

    def to_dataframe(self) -> pd.DataFrame:
        """Cell values, one column per persisted field name."""
        return pd.DataFrame({field.name: field.internal.copy() for _, field in self.items()})


# ========================================================
# Moist air
# ========================================================


@dataclass(eq=False)
class HumidityFields(RhoFields):
    """Fields of the moist-air model."""

    rel_hum: VolScalarField  # relative humidity [-]
    water_mass: VolScalarField  # water vapour mass per cell [kg]
    water_vapor: VolScalarField  # water vapour content [kg/m^3]
    max_water_vapor: VolScalarField  # saturated water vapour content [kg/m^3]
    specific_humidity: VolScalarField  # [kg/kg], water / moist air
    max_specific_humidity: VolScalarField  # saturated specific humidity [kg/kg]
    p_sat_h2o: VolScalarField  # saturation pressure of water [Pa]
    partial_pressure_h2o: VolScalarField  # partial pressure of water vapour [Pa]

    names = {
        **RhoFields.names,
        "rel_hum": ("relHum", "-"),
        "water_mass": ("waterMass", "kg"),
        "water_vapor": ("waterVapor", "kg/m^3"),
        "max_water_vapor": ("maxWaterVapor", "kg/m^3"),
        "specific_humidity": ("specificHumidity", "kg/kg"),
        "max_specific_humidity": ("maxSpecificHumidity", "kg/kg"),
        "p_sat_h2o": ("pSatH2O", "kg/m/s^2"),
        "partial_pressure_h2o": ("partialPressureH2O", "kg/m/s^2"),
    }


def region_arrays(field_set) -> Dict[str, Dict[str, np.ndarray]]:
    """Live region arrays of every field, keyed by attribute then region."""
    return {attr: field.regions() for attr, field in field_set.items()}
