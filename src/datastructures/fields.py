"""Field data structures over cells and boundary patches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

import numpy as np

from meshing.mesh_data import MeshData2D

INTERNAL = "internalField"

# Patch types
CALCULATED = "calculated"  # values set by the owner of the field
ZERO_GRADIENT = "zeroGradient"  # values copied from the owner cells
FIXED_VALUE = "fixedValue"  # values held fixed

PATCH_TYPES = (CALCULATED, ZERO_GRADIENT, FIXED_VALUE)


@dataclass(eq=False)
class VolScalarField:
    """Scalar quantity over the cells of a mesh, with one value array per patch.

    Patch values are boundary evaluations of the same physical quantity as the
    cell values, not independent copies. ``correct_boundary_conditions`` keeps
    zeroGradient patches in step with the cells; calculated patches are kept in
    step by whoever owns the field.

    Parameters
    ----------
    name : str
        Field name, including any phase suffix.
    mesh : MeshData2D
        Mesh the field lives on.
    internal : np.ndarray
        Cell values, shape (n_cells,).
    boundary : dict
        Patch name -> face values, shape (n_patch_faces,).
    patch_types : dict
        Patch name -> one of PATCH_TYPES.
    dimensions : str
        Unit string, informational only.
    """

    name: str
    mesh: MeshData2D = field(repr=False)
    internal: np.ndarray
    boundary: Dict[str, np.ndarray]
    patch_types: Dict[str, str]
    dimensions: str = ""
    _old: Optional["VolScalarField"] = field(default=None, repr=False)

    @classmethod
    def uniform(cls, name, mesh, value=0.0, dimensions="", patch_type=CALCULATED):
        """Allocate a field with the same value in every cell and on every patch."""
        return cls(
            name=name,
            mesh=mesh,
            internal=np.full(mesh.n_cells, float(value)),
            boundary={p: np.full(mesh.patch_size(p), float(value)) for p in mesh.patch_names},
            patch_types={p: patch_type for p in mesh.patch_names},
            dimensions=dimensions,
        )

    @classmethod
    def from_config(cls, name, mesh, initial, dimensions=""):
        """Build a field from an initial-condition entry.

        ``initial`` is either a number (uniform value, zeroGradient patches) or a
        mapping with ``internalField`` (number or per-cell list) and an optional
        ``boundaryField`` of ``{patch: {type: ..., value: ...}}``. Patches not
        listed are zeroGradient.
        """
        if not isinstance(initial, Mapping):
            initial = {"internalField": initial}

        internal = np.asarray(initial.get("internalField", 0.0), dtype=np.float64)
        if internal.ndim == 0:
            internal = np.full(mesh.n_cells, float(internal))
        elif internal.shape != (mesh.n_cells,):
            raise ValueError(
                f"Field '{name}': internalField has {internal.size} values, mesh has {mesh.n_cells} cells"
            )

        result = cls(
            name=name,
            mesh=mesh,
            internal=internal.copy(),
            boundary={p: np.zeros(mesh.patch_size(p)) for p in mesh.patch_names},
            patch_types={p: ZERO_GRADIENT for p in mesh.patch_names},
            dimensions=dimensions,
        )

        boundary_entries = initial.get("boundaryField") or {}
        for patch, entry in boundary_entries.items():
            if patch not in result.boundary:
                raise ValueError(f"Field '{name}': unknown patch '{patch}'. Patches: {mesh.patch_names}")
            patch_type = entry.get("type", ZERO_GRADIENT)
            if patch_type not in PATCH_TYPES:
                raise ValueError(f"Field '{name}': unknown patch type '{patch_type}'. Use one of {PATCH_TYPES}")
            result.patch_types[patch] = patch_type
            if patch_type == FIXED_VALUE:
                result.boundary[patch][:] = float(entry["value"])

        result.correct_boundary_conditions()
        return result

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def regions(self) -> Dict[str, np.ndarray]:
        """Live arrays for the cells (key INTERNAL) and every patch."""
        return {INTERNAL: self.internal, **self.boundary}

    def patch(self, patch: str) -> np.ndarray:
        """Copy of the values on one patch."""
        if patch not in self.boundary:
            raise KeyError(f"Field '{self.name}' has no patch '{patch}'. Patches: {list(self.boundary)}")
        return self.boundary[patch].copy()

    def min(self) -> float:
        return float(min(values.min() for values in self.regions().values() if values.size))

    def max(self) -> float:
        return float(max(values.max() for values in self.regions().values() if values.size))

    # ------------------------------------------------------------------
    # Boundary evaluation
    # ------------------------------------------------------------------

    def correct_boundary_conditions(self):
        """Re-evaluate zeroGradient patches from their owner cells."""
        for patch, patch_type in self.patch_types.items():
            if patch_type == ZERO_GRADIENT:
                self.boundary[patch][:] = self.internal[self.mesh.patch_owner_cells(patch)]

    # ------------------------------------------------------------------
    # Copies and old-time storage
    # ------------------------------------------------------------------

    def copy(self, name: Optional[str] = None) -> "VolScalarField":
        """Independent snapshot of the values (old-time storage is not copied)."""
        return VolScalarField(
            name=name or self.name,
            mesh=self.mesh,
            internal=self.internal.copy(),
            boundary={p: v.copy() for p, v in self.boundary.items()},
            patch_types=dict(self.patch_types),
            dimensions=self.dimensions,
        )

    def assign(self, other: "VolScalarField"):
        """Copy the values of another field into this one, in place."""
        self._check_compatible(other)
        self.internal[:] = other.internal
        for patch, values in self.boundary.items():
            values[:] = other.boundary[patch]

    def store_old_time(self):
        """Snapshot the current values as the old-time level."""
        self._old = self.copy(name=f"{self.name}_0")

    def old_time(self) -> "VolScalarField":
        """Old-time level; the current values if none has been stored yet."""
        if self._old is None:
            return self.copy(name=f"{self.name}_0")
        return self._old.copy()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def __iadd__(self, other):
        if isinstance(other, VolScalarField):
            self._check_compatible(other)
            self.internal += other.internal
            for patch, values in self.boundary.items():
                values += other.boundary[patch]
        else:
            self.internal += other
            for values in self.boundary.values():
                values += other
        return self

    def _check_compatible(self, other: "VolScalarField"):
        if other.internal.shape != self.internal.shape or set(other.boundary) != set(self.boundary):
            raise ValueError(f"Field '{other.name}' does not live on the mesh of '{self.name}'")
