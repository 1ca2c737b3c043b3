"""Structured Cartesian mesh generation.

Builds a MeshData2D for a uniform nx x ny grid on [0, Lx] x [0, Ly].
Cells are numbered row-major: cell (i, j) -> j * nx + i.

Boundary faces are grouped into patches by side. By default each side is its
own patch ("left", "right", "bottom", "top"); ``patch_names`` maps sides to
patch names, and several sides may share one patch (faces are then stored in
left, right, bottom, top order).
"""

from typing import Dict, Optional

import numpy as np
from omegaconf import DictConfig

from .mesh_data import MeshData2D

SIDES = ("left", "right", "bottom", "top")


def create_structured_mesh_2d(
    nx: int,
    ny: int,
    Lx: float = 1.0,
    Ly: float = 1.0,
    patch_names: Optional[Dict[str, str]] = None,
    config: Optional[DictConfig] = None,
) -> MeshData2D:
    """Create a uniform structured mesh.

    Parameters
    ----------
    nx, ny : int
        Number of cells in x and y.
    Lx, Ly : float
        Domain size.
    patch_names : dict, optional
        Side name -> patch name. Sides not listed keep their own name.
    config : DictConfig, optional
        Case configuration attached to the mesh.

    Returns
    -------
    MeshData2D
    """
    if nx < 1 or ny < 1:
        raise ValueError(f"Mesh needs at least one cell per direction, got nx={nx}, ny={ny}")

    dx = Lx / nx
    dy = Ly / ny
    side_to_patch = {side: side for side in SIDES}
    if patch_names:
        unknown = set(patch_names) - set(SIDES)
        if unknown:
            raise ValueError(f"Unknown mesh sides {sorted(unknown)}. Use {list(SIDES)}")
        side_to_patch.update(patch_names)

    i, j = np.meshgrid(np.arange(nx), np.arange(ny))
    i = i.ravel()
    j = j.ravel()
    cells = j * nx + i

    cell_volumes = np.full(nx * ny, dx * dy)
    cell_centers = np.column_stack(((i + 0.5) * dx, (j + 0.5) * dy))

    owners = []
    neighbors = []
    areas = []
    centers = []

    # --- Internal faces (x-direction neighbours) ---
    mask = i < nx - 1
    owners.append(cells[mask])
    neighbors.append(cells[mask] + 1)
    areas.append(np.full(mask.sum(), dy))
    centers.append(np.column_stack(((i[mask] + 1) * dx, (j[mask] + 0.5) * dy)))

    # --- Internal faces (y-direction neighbours) ---
    mask = j < ny - 1
    owners.append(cells[mask])
    neighbors.append(cells[mask] + nx)
    areas.append(np.full(mask.sum(), dx))
    centers.append(np.column_stack(((i[mask] + 0.5) * dx, (j[mask] + 1) * dy)))

    n_internal = sum(len(o) for o in owners)

    # --- Boundary faces, one block per side ---
    side_blocks = {
        "left": (cells[i == 0], np.column_stack((np.zeros(ny), (np.arange(ny) + 0.5) * dy)), dy),
        "right": (cells[i == nx - 1], np.column_stack((np.full(ny, Lx), (np.arange(ny) + 0.5) * dy)), dy),
        "bottom": (cells[j == 0], np.column_stack(((np.arange(nx) + 0.5) * dx, np.zeros(nx))), dx),
        "top": (cells[j == ny - 1], np.column_stack(((np.arange(nx) + 0.5) * dx, np.full(nx, Ly))), dx),
    }

    patches: Dict[str, list] = {}
    face_id = n_internal
    for side in SIDES:
        owner, center, area = side_blocks[side]
        n = owner.shape[0]
        owners.append(owner)
        neighbors.append(np.full(n, -1))
        areas.append(np.full(n, area))
        centers.append(center)
        patches.setdefault(side_to_patch[side], []).extend(range(face_id, face_id + n))
        face_id += n

    owner_cells = np.concatenate(owners).astype(np.int64)
    neighbor_cells = np.concatenate(neighbors).astype(np.int64)

    return MeshData2D(
        cell_volumes=cell_volumes,
        cell_centers=cell_centers,
        face_areas=np.concatenate(areas),
        face_centers=np.vstack(centers),
        owner_cells=owner_cells,
        neighbor_cells=neighbor_cells,
        internal_faces=np.arange(n_internal, dtype=np.int64),
        boundary_faces=np.arange(n_internal, face_id, dtype=np.int64),
        patches={name: np.array(faces, dtype=np.int64) for name, faces in patches.items()},
        config=config,
        nx=nx,
        ny=ny,
        dx=dx,
        dy=dy,
    )
