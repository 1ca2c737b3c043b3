"""
MeshData2D: Core data layout for the thermophysical property engine (2D, collocated).

This class carries the static geometry and connectivity that property models
need to size and index their fields, plus the case-level state a model borrows
for its lifetime.

Indexing Conventions:
- All face-based arrays (e.g., face_centers, owner_cells) use face indexing (0 to n_faces-1).
- All cell-based arrays (e.g., cell_volumes, cell_centers) use cell indexing (0 to n_cells-1).
- Boundary faces are grouped into named patches. A patch stores the face indices
  it is made of, in a fixed order; patch field values follow that order.

Case State:
- config: configuration tree (OmegaConf DictConfig) holding the per-phase
  property dictionaries, e.g. "thermophysicalProperties" or
  "thermophysicalProperties.air".
- db: object registry mapping persisted field names to stored fields. Models
  read their initial state from here and write their state back on write().

The mesh is never mutated by property models; only db is written to.
"""

from typing import Dict, Optional

import numpy as np
from omegaconf import DictConfig, OmegaConf


class MeshData2D:
    def __init__(
        self,
        cell_volumes,
        cell_centers,
        face_areas,
        face_centers,
        owner_cells,
        neighbor_cells,
        internal_faces,
        boundary_faces,
        patches: Dict[str, np.ndarray],
        config: Optional[DictConfig] = None,
        nx=None,
        ny=None,
        dx=None,
        dy=None,
    ):
        # --- Geometry ---
        self.cell_volumes = cell_volumes
        self.cell_centers = cell_centers
        self.face_areas = face_areas
        self.face_centers = face_centers

        # --- Connectivity ---
        self.owner_cells = owner_cells
        self.neighbor_cells = neighbor_cells

        # --- Topological Info ---
        self.internal_faces = internal_faces
        self.boundary_faces = boundary_faces

        # --- Patches (name -> boundary face indices) ---
        self.patches = {name: np.asarray(faces, dtype=np.int64) for name, faces in patches.items()}

        # --- Case state ---
        self.config = config if config is not None else OmegaConf.create({})
        self.db = {}

        # --- Structured Grid Info (optional) ---
        self.nx = nx
        self.ny = ny
        self.dx = dx
        self.dy = dy

    @property
    def n_cells(self) -> int:
        return self.cell_volumes.shape[0]

    @property
    def patch_names(self):
        return list(self.patches.keys())

    def patch_size(self, patch: str) -> int:
        return self.patches[patch].shape[0]

    def patch_owner_cells(self, patch: str) -> np.ndarray:
        """Owner cell index of every face in a patch, in patch order."""
        return self.owner_cells[self.patches[patch]]
