"""
Run configuration of the COARE 3.6 algorithm.

Configurations are composed with hydra from ``jcoare/conf/coare3p6.yaml``
and dotlist overrides, then turned into the objects the algorithm consumes:
a ``CoareParameters`` struct and the static run options of
``compute_fluxes``.
"""

import dataclasses
from pathlib import Path
from typing import List, Optional, Tuple

from hydra import compose, initialize_config_dir
from hydra.errors import HydraException
from omegaconf import DictConfig, OmegaConf

from jcoare.bulk_types import CoareParameters

CONFIG_DIR = Path(__file__).parent / "conf"
CONFIG_NAME = "coare3p6"

RUN_OPTIONS = ("use_cool_skin", "use_warm_layer", "n_iterations", "return_diagnostics")


def load_config(overrides: Optional[List[str]] = None) -> DictConfig:
    """
    Compose the default configuration with overrides.

    Args:
        overrides: Hydra dotlist overrides, e.g. ``["run.n_iterations=10"]``

    Returns:
        Composed configuration

    Raises:
        ValueError: If an override names an unknown key or is malformed
    """
    try:
        with initialize_config_dir(version_base=None, config_dir=str(CONFIG_DIR.resolve())):
            return compose(config_name=CONFIG_NAME, overrides=list(overrides or []))
    except HydraException as e:
        raise ValueError(f"Invalid configuration override: {e}") from e


def _check_keys(section: DictConfig, allowed, name: str) -> None:
    unknown = sorted(set(section.keys()) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown keys in '{name}' configuration: {', '.join(unknown)}")


def parameters_from_config(cfg: DictConfig) -> CoareParameters:
    """Build the algorithm parameters from the ``params`` section."""
    allowed = [field.name for field in dataclasses.fields(CoareParameters)]
    _check_keys(cfg.params, allowed, "params")
    values = OmegaConf.to_container(cfg.params, resolve=True)
    return CoareParameters.default(**{k: float(v) for k, v in values.items()})


def run_options_from_config(cfg: DictConfig) -> Tuple[bool, bool, int, bool]:
    """
    Static options of ``compute_fluxes`` from the ``run`` section.

    Returns:
        Tuple of (use_cool_skin, use_warm_layer, n_iterations, return_diagnostics)

    Raises:
        ValueError: On unknown keys or n_iterations < 1
    """
    _check_keys(cfg.run, RUN_OPTIONS + ("zt", "zu"), "run")
    n_iterations = int(cfg.run.n_iterations)
    if n_iterations < 1:
        raise ValueError(f"run.n_iterations must be >= 1, got {n_iterations}")
    return (
        bool(cfg.run.use_cool_skin),
        bool(cfg.run.use_warm_layer),
        n_iterations,
        bool(cfg.run.return_diagnostics),
    )
