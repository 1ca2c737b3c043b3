"""
Humidity property case - entry point.

Builds a structured mesh, selects the property model configured for the
phase and runs a short heating sequence of correct() calls.

Usage:
    uv run python main.py
    uv run python main.py case.thermophysicalProperties.method=magnus run.steps=10
    uv run python main.py mlflow.enabled=true
"""

import logging
import sys
from pathlib import Path

import hydra
import mlflow
import pandas as pd
from dotenv import load_dotenv
from omegaconf import DictConfig, OmegaConf

load_dotenv()
sys.path.insert(0, str(Path(__file__).parent / "src"))

from cli.console import fail, header, ok, print_field_table  # noqa: E402
from meshing import create_structured_mesh_2d  # noqa: E402
from thermo import ThermoError, create  # noqa: E402
from utilities.tracking import field_metrics, start_case_run  # noqa: E402

log = logging.getLogger(__name__)


def build_model(cfg: DictConfig):
    """Mesh from ``cfg.mesh``, model from ``cfg.case`` via the registry."""
    mesh = create_structured_mesh_2d(
        cfg.mesh.nx,
        cfg.mesh.ny,
        Lx=cfg.mesh.Lx,
        Ly=cfg.mesh.Ly,
        patch_names=OmegaConf.to_container(cfg.mesh.patch_names),
        config=cfg.case,
    )
    return create(mesh, cfg.phase or None)


def run_case(cfg: DictConfig, model, log_metrics: bool = False) -> pd.DataFrame:
    """Heat the cells by ``run.dT`` per step and re-derive the properties."""
    for step in range(1, cfg.run.steps + 1):
        model.store_old_times()
        model.update_state(T=model.T().internal + cfg.run.dT)
        model.correct()

        rho_change = float(abs(model.density().internal - model.previous_density().internal).max())
        log.debug(f"Step {step}: T_mean={model.T().internal.mean():.2f} K, max |drho|={rho_change:.3e}")
        if log_metrics:
            mlflow.log_metrics({**field_metrics(model), "max_rho_change": rho_change}, step=step)

    model.write()
    return model.to_dataframe()


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Main entry point."""
    output_dir = Path(hydra.core.hydra_config.HydraConfig.get().runtime.output_dir)

    try:
        model = build_model(cfg)
    except ThermoError as exc:
        log.error(f"Cannot build property model: {exc}")
        fail(str(exc))
        sys.exit(1)

    header(f"Property model: {type(model).__name__}")
    if cfg.mlflow.enabled:
        with start_case_run(cfg, model):
            mlflow.log_dict(OmegaConf.to_container(cfg), "config.yaml")
            df = run_case(cfg, model, log_metrics=True)
    else:
        df = run_case(cfg, model)

    print_field_table(df, title=f"After {cfg.run.steps} steps")
    if cfg.run.write_csv:
        csv_path = output_dir / "fields.csv"
        df.to_csv(csv_path, index=False)
        ok(f"Wrote {csv_path}")


if __name__ == "__main__":
    main()
