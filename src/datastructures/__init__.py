"""Field containers shared by the property models."""

from .fields import (
    INTERNAL,
    CALCULATED,
    ZERO_GRADIENT,
    FIXED_VALUE,
    PATCH_TYPES,
    VolScalarField,
)

__all__ = [
    "INTERNAL",
    "CALCULATED",
    "ZERO_GRADIENT",
    "FIXED_VALUE",
    "PATCH_TYPES",
    "VolScalarField",
]
