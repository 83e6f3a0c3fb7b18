import hydra
from omegaconf import DictConfig

from jcoare.bulk_types import SolarClock, SurfaceRadiation
from jcoare.coare3p6 import compute_fluxes
from jcoare.config import CONFIG_NAME, parameters_from_config, run_options_from_config
from jcoare.output import coefficients_to_xarray
from jcoare.thermodynamics import q_sat
from jcoare.constants.physical_constants import rdct_qsat_salt


def run(cfg: DictConfig):
    """
    Compute the transfer coefficients for the single point of ``cfg.inputs``.

    Returns:
        xarray.Dataset with the coefficients (and diagnostics when requested)
    """
    params = parameters_from_config(cfg)
    use_cool_skin, use_warm_layer, n_iterations, return_diagnostics = run_options_from_config(cfg)
    inputs = cfg.inputs

    result = compute_fluxes(
        cfg.run.zt, cfg.run.zu,
        inputs.T_s, inputs.t_zt,
        rdct_qsat_salt * q_sat(inputs.T_s, inputs.slp),
        inputs.q_zt, inputs.U_zu,
        use_cool_skin=use_cool_skin,
        use_warm_layer=use_warm_layer,
        radiation=SurfaceRadiation(inputs.rad_sw, inputs.rad_lw, inputs.slp),
        clock=SolarClock(inputs.isecday_utc, inputs.lon),
        n_iterations=n_iterations,
        return_diagnostics=return_diagnostics,
        params=params
    )
    return coefficients_to_xarray(result)


@hydra.main(version_base=None, config_path="conf", config_name=CONFIG_NAME)
def main(cfg: DictConfig):
    """
    Prints COARE 3.6 transfer coefficients for configurable conditions

    Example:
        python -m jcoare.main
        python -m jcoare.main inputs.U_zu=12 run.use_cool_skin=true
        python -m jcoare.main -m inputs.U_zu=2,5,10,20
    """
    print(run(cfg))


if __name__ == "__main__":
    main()
