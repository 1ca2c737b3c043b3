"""Cross-project utilities (case configuration, MLflow tracking)."""

# Keep __init__ lightweight: tracking imports mlflow and is loaded on demand.
from utilities.config import (  # noqa: F401
    PROPERTIES_DICT,
    group_name,
    load_case_config,
    phase_properties,
    to_plain_dict,
)

__all__ = [
    "PROPERTIES_DICT",
    "group_name",
    "load_case_config",
    "phase_properties",
    "to_plain_dict",
]
