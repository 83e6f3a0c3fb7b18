"""
Bulk formulae for turbulent air-sea fluxes.

Converts transfer coefficients into wind stress, sensible and latent heat
fluxes, and provides the net non-solar heat flux and wind stress needed by
the cool-skin and warm-layer parameterizations during the iteration.
Heat fluxes follow the ocean convention: positive means the ocean gains heat.
"""

import jax
import jax.numpy as jnp
from typing import Tuple

from jcoare.constants.physical_constants import grav
from jcoare.bulk_types import BulkFluxes
from jcoare.thermodynamics import (
    cp_air, gamma_moist, L_vap, qlw_net, rho_air, sign_floor
)


@jax.jit
def compute_air_density_at_height(
    zu: float,
    T_s: jnp.ndarray,
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    slp: jnp.ndarray
) -> jnp.ndarray:
    """
    Density of air at height zu.

    The absolute temperature at zu is obtained from the potential temperature
    with the moist lapse rate, and the sea-level pressure is lowered
    hydrostatically to zu.

    Args:
        zu: Height of the air state [m]
        T_s: Surface temperature [K]
        t_zu: Potential air temperature at zu [K]
        q_zu: Specific humidity at zu [kg/kg]
        slp: Sea-level pressure [Pa]

    Returns:
        Air density at zu [kg/m³]
    """
    ztaa = t_zu  # first guess
    for _ in range(4):
        zgamma = gamma_moist(0.5 * (ztaa + T_s), q_zu)
        ztaa = t_zu - zgamma * zu

    zrho = rho_air(ztaa, q_zu, slp)
    return rho_air(ztaa, q_zu, slp - zrho * grav * zu)


@jax.jit
def compute_bulk_fluxes(
    zu: float,
    T_s: jnp.ndarray,
    q_s: jnp.ndarray,
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    Cd: jnp.ndarray,
    Ch: jnp.ndarray,
    Ce: jnp.ndarray,
    U_zu: jnp.ndarray,
    U_blk: jnp.ndarray,
    slp: jnp.ndarray
) -> BulkFluxes:
    """
    Compute turbulent fluxes from transfer coefficients.

    Args:
        zu: Height of the air state [m]
        T_s: Surface temperature [K]
        q_s: Surface specific humidity [kg/kg]
        t_zu: Potential air temperature at zu [K]
        q_zu: Specific humidity at zu [kg/kg]
        Cd, Ch, Ce: Transfer coefficients [-]
        U_zu: Scalar wind speed at zu [m/s]
        U_blk: Bulk wind speed at zu (gustiness included) [m/s]
        slp: Sea-level pressure [Pa]

    Returns:
        Wind stress, sensible and latent heat fluxes, evaporation
    """
    zrho = compute_air_density_at_height(zu, T_s, t_zu, q_zu, slp)
    zurho = U_blk * jnp.maximum(zrho, 1.0)

    tau = zurho * Cd * U_zu
    zevap = zurho * Ce * (q_zu - q_s)
    q_sen = zurho * Ch * (t_zu - T_s) * cp_air(q_zu)
    q_lat = L_vap(T_s) * zevap

    return BulkFluxes(tau=tau, q_sen=q_sen, q_lat=q_lat, evap=-zevap)


@jax.jit
def update_qnsol_tau(
    zu: float,
    T_s: jnp.ndarray,
    q_s: jnp.ndarray,
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    u_star: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray,
    U_zu: jnp.ndarray,
    U_blk: jnp.ndarray,
    slp: jnp.ndarray,
    rad_lw: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    Net non-solar heat flux and wind stress implied by the current scales.

    Args:
        zu: Height of the air state [m]
        T_s: Surface temperature [K]
        q_s: Surface specific humidity [kg/kg]
        t_zu: Potential air temperature at zu [K]
        q_zu: Specific humidity at zu [kg/kg]
        u_star, t_star, q_star: Current similarity scales
        U_zu: Scalar wind speed at zu [m/s]
        U_blk: Bulk wind speed at zu [m/s]
        slp: Sea-level pressure [Pa]
        rad_lw: Downwelling longwave radiation [W/m²]

    Returns:
        Tuple of (net non-solar heat flux [W/m²], wind stress [N/m²],
        latent heat flux [W/m²])
    """
    zdt = sign_floor(t_zu - T_s, 1.0e-6)
    zdq = sign_floor(q_zu - q_s, 1.0e-9)

    zz0 = u_star / U_blk
    zcd = zz0 * zz0
    zch = zz0 * t_star / zdt
    zce = zz0 * q_star / zdq

    fluxes = compute_bulk_fluxes(
        zu, T_s, q_s, t_zu, q_zu, zcd, zch, zce, U_zu, U_blk, slp
    )
    zqlw = qlw_net(rad_lw, T_s)

    qnsol = fluxes.q_lat + fluxes.q_sen + zqlw
    return qnsol, fluxes.tau, fluxes.q_lat
