"""
Warm-layer parameterization of the COARE algorithm.

Daytime solar heating builds a thin stratified layer near the ocean surface
whose temperature excess dT_wl is driven by the heat and momentum absorbed
since the local morning (Fairall et al. 1996, Price et al. 1986). The layer
is reset once per day at a fixed local solar time, so successive calls for
a location must be made in increasing time order.

Accumulators (Tau_ac, Qnt_ac) are only committed on the last iteration of
the stability loop; dT_wl and Hz_wl are refreshed on every call.
"""

import jax
import jax.numpy as jnp

from jcoare.constants.physical_constants import grav, rho0_w, cp0_w
from jcoare.bulk_types import CoareParameters, WarmLayerState
from jcoare.thermodynamics import alpha_sw

SECONDS_PER_DAY = 86400.0

# Minimum wind stress accumulated per second [N/m²]
_TAU_MIN = 0.002


@jax.jit
def local_solar_time(isecday_utc: jnp.ndarray, lon: jnp.ndarray) -> jnp.ndarray:
    """
    Local solar time from UTC time and longitude.

    Args:
        isecday_utc: Seconds since 00:00 UTC [s]
        lon: Longitude [deg. E]

    Returns:
        Seconds since local solar midnight, in [0, 86400) [s]
    """
    return jnp.mod(isecday_utc + lon * SECONDS_PER_DAY / 360.0, SECONDS_PER_DAY)


@jax.jit
def is_new_day(
    local_time: jnp.ndarray,
    time_step: float,
    reset_time: float
) -> jnp.ndarray:
    """
    True on the first time step at or after the daily reset boundary.

    Args:
        local_time: Local solar time [s]
        time_step: Interval between successive calls [s]
        reset_time: Local solar time of the reset [s]

    Returns:
        Boolean mask
    """
    return jnp.mod(local_time - reset_time, SECONDS_PER_DAY) < time_step


@jax.jit
def solar_absorption_fraction(thickness: jnp.ndarray) -> jnp.ndarray:
    """
    Fraction of the net solar flux absorbed within a layer of given thickness.

    Three-band exponential absorption profile of Fairall et al. (1996).

    Args:
        thickness: Layer thickness [m]

    Returns:
        Absorbed fraction [-]
    """
    return 1.0 - (0.28 * 0.014 * (1.0 - jnp.exp(-thickness / 0.014))
                  + 0.27 * 0.357 * (1.0 - jnp.exp(-thickness / 0.357))
                  + 0.45 * 12.82 * (1.0 - jnp.exp(-thickness / 12.82))) / thickness


def initial_warm_layer_state(shape, params: CoareParameters) -> WarmLayerState:
    """Warm-layer state at the start of a simulation."""
    return WarmLayerState(
        tau_ac=jnp.zeros(shape),
        qnt_ac=jnp.zeros(shape),
        dT_wl=jnp.zeros(shape),
        hz_wl=jnp.full(shape, params.hwl_max)
    )


@jax.jit
def warm_layer_coare(
    rad_sw: jnp.ndarray,
    q_nsol: jnp.ndarray,
    tau: jnp.ndarray,
    sst: jnp.ndarray,
    lon: jnp.ndarray,
    isecday_utc: jnp.ndarray,
    state: WarmLayerState,
    is_final: jnp.ndarray,
    params: CoareParameters
) -> WarmLayerState:
    """
    Update the warm-layer state for one time step.

    Args:
        rad_sw: Net shortwave flux at the surface [W/m²]
        q_nsol: Net non-solar heat flux (ocean convention) [W/m²]
        tau: Wind stress [N/m²]
        sst: Bulk sea surface temperature [K]
        lon: Longitude [deg. E]
        isecday_utc: Seconds since 00:00 UTC [s]
        state: Warm-layer state committed at the previous time step
        is_final: Whether the accumulators should be committed
        params: COARE parameters

    Returns:
        Updated warm-layer state
    """
    dt = params.time_step

    zalpha = jnp.maximum(alpha_sw(sst), 1.0e-10)
    zcd1 = jnp.sqrt(2.0 * params.rich_wl * cp0_w / (zalpha * grav * rho0_w))
    zcd2 = jnp.sqrt(2.0 * zalpha * grav / (params.rich_wl * rho0_w)) / cp0_w**1.5

    # Daily reset at local morning
    new_day = is_new_day(local_solar_time(isecday_utc, lon), dt, params.wl_reset_time)
    tau_prev = jnp.where(new_day, 0.0, state.tau_ac)
    qnt_prev = jnp.where(new_day, 0.0, state.qnt_ac)
    dT_prev = jnp.where(new_day, 0.0, state.dT_wl)
    hz_prev = jnp.where(new_day, params.hwl_max, state.hz_wl)

    # First guess of the heat absorbed in the layer
    zq_abs = solar_absorption_fraction(hz_prev) * rad_sw + q_nsol

    # No layer yet and none can form: nothing to do
    l_exit = jnp.logical_or(
        new_day,
        jnp.logical_and(jnp.abs(dT_prev) < 1.0e-6, zq_abs <= 0.0)
    )

    ztac = tau_prev + jnp.maximum(_TAU_MIN, tau) * dt
    zqac = qnt_prev + zq_abs * dt
    l_destroy = zqac <= 0.0

    # Thickness from the accumulated momentum and heat, then absorbed heat again
    zhwl = jnp.minimum(params.hwl_max, zcd1 * ztac / jnp.sqrt(jnp.maximum(zqac, 1.0e-12)))
    zq_abs = solar_absorption_fraction(zhwl) * rad_sw + q_nsol
    zqac = qnt_prev + zq_abs * dt
    l_destroy = jnp.logical_or(l_destroy, zqac <= 0.0)

    zdtwl = zcd2 * jnp.maximum(zqac, 0.0)**1.5 / ztac

    tac = jnp.where(l_destroy, 0.0, ztac)
    qac = jnp.where(l_destroy, 0.0, zqac)
    dT_wl = jnp.where(l_destroy, 0.0, zdtwl)
    hz_wl = jnp.where(l_destroy, params.hwl_max, zhwl)

    tac = jnp.where(l_exit, tau_prev, tac)
    qac = jnp.where(l_exit, qnt_prev, qac)
    dT_wl = jnp.where(l_exit, dT_prev, dT_wl)
    hz_wl = jnp.where(l_exit, hz_prev, hz_wl)

    return WarmLayerState(
        tau_ac=jnp.where(is_final, tac, state.tau_ac),
        qnt_ac=jnp.where(is_final, qac, state.qnt_ac),
        dT_wl=dT_wl,
        hz_wl=hz_wl
    )
