"""Mesh data layout and generators."""

from .mesh_data import MeshData2D
from .structured import create_structured_mesh_2d

__all__ = [
    "MeshData2D",
    "create_structured_mesh_2d",
]
