"""Configuration helpers for phase-scoped property dictionaries.

Property dictionaries live in the case configuration under a phase-qualified
name: ``thermophysicalProperties`` for the unnamed phase and
``thermophysicalProperties.<phase>`` for a named one. Persisted field names
follow the same rule (``relHum`` / ``relHum.air``).
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from omegaconf import DictConfig, OmegaConf

log = logging.getLogger(__name__)

PROPERTIES_DICT = "thermophysicalProperties"


def group_name(name: str, phase_name: Optional[str] = None) -> str:
    """Qualify a name with a phase.

    ``None`` and ``""`` both denote the unnamed (default) phase and leave the
    name unchanged.
    """
    if not phase_name:
        return name
    return f"{name}.{phase_name}"


def to_plain_dict(config: Union[DictConfig, Mapping, None]) -> Dict[str, Any]:
    """Resolve an OmegaConf tree (or any mapping) into plain python containers."""
    if config is None:
        return {}
    if isinstance(config, DictConfig):
        return OmegaConf.to_container(config, resolve=True)
    return OmegaConf.to_container(OmegaConf.create(dict(config)), resolve=True)


def phase_properties(case_config, phase_name: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """Property dictionary for a phase, or None if the case has none."""
    key = group_name(PROPERTIES_DICT, phase_name)
    section = case_config.get(key) if case_config is not None else None
    if section is None:
        log.debug(f"No '{key}' dictionary in case configuration")
        return None
    return to_plain_dict(section)


def load_case_config(path: Union[str, Path]) -> DictConfig:
    """Load a case configuration file (YAML)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Case configuration not found: {path}")
    return OmegaConf.load(path)
