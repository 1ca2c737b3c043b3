"""Run-time selection of property models by configured tag.

Constructors register under a tag with ``@register("<tag>")``. ``create``
reads ``thermoType.type`` from the phase's property dictionary and builds
the matching model::

    thermophysicalProperties:
      thermoType:
        type: humidityRhoThermo
      method: buck

The built-in models are registered the first time the registry is queried.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional

from utilities.config import PROPERTIES_DICT, group_name, phase_properties

from .exceptions import ConfigurationMissing, UnknownModelTag

log = logging.getLogger(__name__)

# tag -> constructor(mesh, phase_name)
REGISTRY: Dict[str, Callable] = {}

_builtins_loaded = False


def register(tag: str):
    """Class decorator registering a model constructor under ``tag``.

    Registering the same constructor twice is a no-op; a different
    constructor under an existing tag raises ValueError.
    """

    def deco(cls):
        existing = REGISTRY.get(tag)
        if existing is not None and existing is not cls:
            raise ValueError(f"Model tag '{tag}' already registered to {existing.__name__}")
        REGISTRY[tag] = cls
        return cls

    return deco


def _ensure_builtin_models():
    global _builtins_loaded
    if _builtins_loaded:
        return
    from . import composite  # noqa: F401  (registers on import)

    _builtins_loaded = True


def registered_tags() -> List[str]:
    _ensure_builtin_models()
    return sorted(REGISTRY)


def create(mesh, phase_name: Optional[str] = None):
    """Build the property model configured for a phase.

    Parameters
    ----------
    mesh : MeshData2D
        Mesh carrying the case configuration (``mesh.config``).
    phase_name : str, optional
        Phase name. None or "" selects the unnamed phase.

    Raises
    ------
    ConfigurationMissing
        If the phase has no property dictionary or no ``thermoType.type``.
    UnknownModelTag
        If no model is registered under the configured tag.
    """
    _ensure_builtin_models()
    section = group_name(PROPERTIES_DICT, phase_name)

    properties = phase_properties(mesh.config, phase_name)
    if properties is None:
        raise ConfigurationMissing(f"No '{section}' dictionary in case configuration")

    thermo_type = properties.get("thermoType") or {}
    if not isinstance(thermo_type, Mapping):
        raise ConfigurationMissing(
            f"'thermoType' in '{section}' must be a dictionary with a 'type' entry, got {thermo_type!r}"
        )
    tag = thermo_type.get("type")
    if not tag or not isinstance(tag, str):
        raise ConfigurationMissing(f"No 'thermoType.type' entry in '{section}'")

    ctor = REGISTRY.get(tag)
    if ctor is None:
        raise UnknownModelTag(
            f"Unknown model tag '{tag}' in '{section}'. Valid tags: {', '.join(sorted(REGISTRY))}"
        )

    log.info(f"Selecting property model '{tag}' for phase '{phase_name or '<default>'}'")
    return ctor(mesh, phase_name)
