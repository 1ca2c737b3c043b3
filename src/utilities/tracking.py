"""MLflow tracking for case runs.

One MLflow run per case. Parameters describe the selected model and mesh,
metrics are cell statistics of the model's fields logged once per step.
"""

import logging
from typing import Dict

import mlflow
import numpy as np
from omegaconf import DictConfig

log = logging.getLogger(__name__)


def start_case_run(cfg: DictConfig, model):
    """Point MLflow at ``cfg.mlflow.tracking_uri`` and open a run for the case.

    Returns the active-run context manager.
    """
    mlflow.set_tracking_uri(cfg.mlflow.tracking_uri)
    mlflow.set_experiment(cfg.experiment_name)
    run_name = f"{type(model).__name__}_{cfg.mesh.nx}x{cfg.mesh.ny}"
    log.info(f"MLflow run '{run_name}' in experiment '{cfg.experiment_name}'")

    run = mlflow.start_run(run_name=run_name)
    mlflow.log_params(case_params(model))
    return run


def case_params(model) -> Dict[str, str]:
    """Model type, phase, saturation method and mesh size of a case."""
    mesh = model.mesh
    return {
        "model": type(model).__name__,
        "phase": model.phase_name or "<default>",
        "method": str(model.properties.get("method", "")),
        "n_cells": str(mesh.n_cells),
        "patches": ",".join(mesh.patch_names),
    }


def field_metrics(model) -> Dict[str, float]:
    """Cell-average and maximum of every model field, keyed by persisted name."""
    metrics = {}
    for _, field in model.fields.items():
        metrics[f"{field.name}_mean"] = float(np.mean(field.internal))
        metrics[f"{field.name}_max"] = float(np.max(field.internal))
    return metrics
