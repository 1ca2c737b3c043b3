"""Base thermodynamic state: mesh, phase, property dictionary, T and p."""

import logging

import numpy as np

from datastructures.fields import ZERO_GRADIENT, VolScalarField
from utilities.config import PROPERTIES_DICT, group_name, phase_properties, to_plain_dict

from .base import BasicThermo
from .exceptions import ConfigurationMissing

log = logging.getLogger(__name__)


class BasicThermoImplementation(BasicThermo):
    """State every model of a phase shares.

    Built once per model. Fluid and property mixins take this object and
    layer their own fields on top of it.

    Parameters
    ----------
    mesh : MeshData2D
        Mesh the model lives on (borrowed).
    phase_name : str, optional
        Phase name. None or "" selects the unnamed phase.
    properties : mapping, optional
        Property dictionary. If not given it is read from the mesh's case
        configuration under ``thermophysicalProperties[.<phase>]``.
    """

    def __init__(self, mesh, phase_name=None, properties=None):
        self._mesh = mesh
        self._phase_name = phase_name or ""

        if properties is None:
            properties = phase_properties(mesh.config, self._phase_name)
            if properties is None:
                raise ConfigurationMissing(
                    f"No '{group_name(PROPERTIES_DICT, self._phase_name)}' dictionary in case configuration"
                )
        self._properties = to_plain_dict(properties)

        self._T = self.read_field("T", "K")
        self._p = self.read_field("p", "kg/m/s^2")

        log.info(
            f"Thermodynamic state for phase '{self._phase_name or '<default>'}': "
            f"{mesh.n_cells} cells, patches {mesh.patch_names}"
        )

    # ------------------------------------------------------------------
    # BasicThermo
    # ------------------------------------------------------------------

    @property
    def mesh(self):
        return self._mesh

    @property
    def phase_name(self) -> str:
        return self._phase_name

    @property
    def properties(self) -> dict:
        return self._properties

    def T(self) -> VolScalarField:
        return self._T

    def p(self) -> VolScalarField:
        return self._p

    def phase_property_name(self, name: str) -> str:
        return group_name(name, self._phase_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def set_properties(self, properties):
        self._properties = to_plain_dict(properties)

    def update_state(self, T=None, p=None):
        """Assign new temperature and/or pressure values.

        Accepts fields, per-cell arrays or scalars. Array and scalar values
        are written to the cells; zeroGradient patches follow the cells.
        """
        for field, value in ((self._T, T), (self._p, p)):
            if value is None:
                continue
            if isinstance(value, VolScalarField):
                field.assign(value)
            else:
                field.internal[:] = np.asarray(value, dtype=np.float64)
                field.correct_boundary_conditions()

    def read_field(self, name, dimensions="", default=None) -> VolScalarField:
        """Read a phase field by naming convention.

        Lookup order: the mesh registry (``mesh.db``), then the
        ``initialConditions`` entry of the property dictionary, then
        ``default`` as a uniform value.
        """
        stored_name = self.phase_property_name(name)

        stored = self._mesh.db.get(stored_name)
        if stored is not None:
            log.debug(f"Reading {stored_name} from mesh registry")
            return stored.copy(name=stored_name)

        initial = (self._properties.get("initialConditions") or {}).get(name)
        if initial is not None:
            log.debug(f"Initialising {stored_name} from initialConditions")
            return VolScalarField.from_config(stored_name, self._mesh, initial, dimensions)

        if default is not None:
            return VolScalarField.uniform(stored_name, self._mesh, default, dimensions, patch_type=ZERO_GRADIENT)

        raise ConfigurationMissing(
            f"Cannot find field '{stored_name}' in the mesh registry or in initialConditions "
            f"of '{group_name(PROPERTIES_DICT, self._phase_name)}'"
        )
