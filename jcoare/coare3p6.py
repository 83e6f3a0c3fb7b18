"""
COARE 3.6 bulk algorithm for air-sea transfer coefficients.

This module implements the iterative similarity-theory solution of
Fairall et al. (2003) with the COARE 3.6 roughness closures (Edson et al.
2013, Fairall et al. 2018):

1. first guess of the similarity scales from a bulk Richardson number,
2. a fixed number of passes updating the Obukhov length, gustiness,
   roughness lengths and scales (u*, t*, q*),
3. optional cool-skin and warm-layer corrections of the surface
   temperature, re-evaluated on every pass,
4. transfer coefficients (Cd, Ch, Ce) and, on request, their
   neutral-stability counterparts.

The number of passes is fixed and never shortened by a convergence test,
so results are deterministic and cost the same for every location.

Typical usage:

    result = compute_fluxes(2.0, 10.0, sst, t_2m, q_s, q_2m, wind)
    result = compute_fluxes(2.0, 10.0, sst, t_2m, q_s, q_2m, wind,
                            use_cool_skin=True, use_warm_layer=True,
                            radiation=SurfaceRadiation(rad_sw, rad_lw, slp),
                            clock=SolarClock(isecday_utc, lon),
                            cool_skin_state=cs, warm_layer_state=wl)
    cs, wl = result.cool_skin, result.warm_layer  # carry to the next time step
"""

import jax
import jax.numpy as jnp
from functools import partial
from typing import NamedTuple, Optional, Tuple

from jcoare.constants.physical_constants import grav, vkarmn, vkarmn2, rdct_qsat_salt
from jcoare.bulk_types import (
    CoareParameters, CoolSkinState, WarmLayerState, SurfaceRadiation,
    SolarClock, NeutralDiagnostics, BulkCoefficients
)
from jcoare.bulk_formula import update_qnsol_tau
from jcoare.cool_skin import cool_skin_coare
from jcoare.warm_layer import initial_warm_layer_state, warm_layer_coare
from jcoare.similarity import psi_h_coare, psi_m_coare
from jcoare.thermodynamics import (
    one_on_L, q_sat, Ri_bulk, sign_clamp, sign_floor, visc_air
)


class IterationState(NamedTuple):
    """Quantities carried from one pass of the stability loop to the next."""

    u_star: jnp.ndarray
    t_star: jnp.ndarray
    q_star: jnp.ndarray
    t_zu: jnp.ndarray
    q_zu: jnp.ndarray
    U_blk: jnp.ndarray
    z0: jnp.ndarray
    z0t: jnp.ndarray
    dt_zu: jnp.ndarray
    dq_zu: jnp.ndarray
    T_s: jnp.ndarray
    q_s: jnp.ndarray
    dT_cs: Optional[jnp.ndarray] = None
    warm_layer: Optional[WarmLayerState] = None


@jax.jit
def charnock_coare3p6(wind_speed: jnp.ndarray, charn0_max: float = 0.028) -> jnp.ndarray:
    """
    Wind-speed dependent Charnock parameter (Edson et al. 2013, eq. 13).

    Args:
        wind_speed: Neutral wind speed at 10 m [m/s]
        charn0_max: Value at which the parameter levels off (winds > 18 m/s)

    Returns:
        Charnock parameter [-]
    """
    return jnp.maximum(jnp.minimum(0.0017 * wind_speed - 0.005, charn0_max), 0.0)


@jax.jit
def charnock_coare3p6_wave(
    u_star: jnp.ndarray,
    wave_height: jnp.ndarray,
    wave_phase_speed: jnp.ndarray
) -> jnp.ndarray:
    """
    Wave-dependent Charnock parameter (COARE 3.6, Fairall et al. 2018).

    Args:
        u_star: Friction velocity [m/s]
        wave_height: Significant wave height [m]
        wave_phase_speed: Phase speed of the dominant waves [m/s]

    Returns:
        Charnock parameter [-]
    """
    return (wave_height * 0.2 * (u_star / wave_phase_speed)**2.2) * grav / (u_star * u_star)


@jax.jit
def roughness_lengths(
    u_star: jnp.ndarray,
    z0: jnp.ndarray,
    nu_air: jnp.ndarray,
    params: CoareParameters
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Update the momentum and scalar roughness lengths.

    Args:
        u_star: Friction velocity [m/s]
        z0: Momentum roughness length of the previous pass [m]
        nu_air: Kinematic viscosity of air [m²/s]
        params: COARE parameters

    Returns:
        Tuple of (z0, z0t) [m]
    """
    zun10 = u_star / vkarmn * jnp.log(10.0 / z0)  # neutral wind speed at 10 m
    charn = charnock_coare3p6(zun10, params.charn0_max)

    z0_new = charn * u_star * u_star / grav + 0.11 * nu_air / u_star
    z0_new = jnp.clip(jnp.abs(z0_new), params.z0_min, params.z0_max)

    # (1/Re_r)^0.72, Re_r the roughness Reynolds number
    zrr = (nu_air / (z0_new * u_star))**0.72
    z0t = jnp.minimum(params.z0t_max, 5.8e-5 * zrr)
    z0t = jnp.clip(jnp.abs(z0t), params.z0_min, params.z0_max)

    return z0_new, z0t


@jax.jit
def gustiness_wind(
    U_zu: jnp.ndarray,
    u_star: jnp.ndarray,
    inv_L: jnp.ndarray,
    params: CoareParameters
) -> jnp.ndarray:
    """
    Bulk wind speed including convective gustiness (Fairall et al. 2003, eq. 8).

    Gustiness only contributes in unstable conditions (1/L < 0).

    Args:
        U_zu: Scalar wind speed at zu [m/s]
        u_star: Friction velocity [m/s]
        inv_L: Inverse Obukhov length [1/m]
        params: COARE parameters

    Returns:
        Bulk wind speed, never below params.u_blk_min [m/s]
    """
    zgust2 = (params.beta0 * params.beta0 * u_star * u_star
              * jnp.maximum(-params.zi0 * inv_L / vkarmn, 0.0)**(2.0 / 3.0))
    return jnp.maximum(jnp.sqrt(U_zu * U_zu + zgust2), params.u_blk_min)


@jax.jit
def turbulent_scales(
    zu: float,
    z0: jnp.ndarray,
    z0t: jnp.ndarray,
    zeta_u: jnp.ndarray,
    dt_zu: jnp.ndarray,
    dq_zu: jnp.ndarray,
    U_blk: jnp.ndarray,
    params: CoareParameters
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    Similarity scales at zu from the log profiles with stability corrections.

    The heat and moisture scales use psi_h(zeta_u), the correction at the
    wind height, whatever the height of the temperature measurement.

    Args:
        zu: Height of the wind [m]
        z0: Momentum roughness length [m]
        z0t: Scalar roughness length [m]
        zeta_u: Stability parameter at zu [-]
        dt_zu: t_zu - T_s [K]
        dq_zu: q_zu - q_s [kg/kg]
        U_blk: Bulk wind speed [m/s]
        params: COARE parameters

    Returns:
        Tuple of (u_star, t_star, q_star, psi_h(zeta_u))
    """
    zpsi_h_u = psi_h_coare(zeta_u)
    zfac = vkarmn / (jnp.log(zu) - jnp.log(z0t) - zpsi_h_u)

    t_star = dt_zu * zfac
    q_star = dq_zu * zfac
    u_star = jnp.maximum(
        U_blk * vkarmn / (jnp.log(zu) - jnp.log(z0) - psi_m_coare(zeta_u)),
        params.u_star_min
    )
    return u_star, t_star, q_star, zpsi_h_u


@jax.jit
def adjust_to_wind_height(
    zt: float,
    zu: float,
    t_zt: jnp.ndarray,
    q_zt: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray,
    psi_h_u: jnp.ndarray,
    zeta_t: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Bring air temperature and humidity from zt to zu along the log profile.

    Args:
        zt: Height of temperature and humidity [m]
        zu: Height of the wind [m]
        t_zt: Potential air temperature at zt [K]
        q_zt: Specific humidity at zt [kg/kg]
        t_star, q_star: Similarity scales
        psi_h_u: psi_h at zu
        zeta_t: Stability parameter at zt

    Returns:
        Tuple of (t_zu, q_zu)
    """
    zprof = jnp.log(zt / zu) + psi_h_u - psi_h_coare(zeta_t)
    t_zu = t_zt - t_star / vkarmn * zprof
    q_zu = q_zt - q_star / vkarmn * zprof
    return t_zu, q_zu


@partial(jax.jit, static_argnames=['zt_equal_zu'])
def first_guess_coare(
    zt: float,
    zu: float,
    T_s: jnp.ndarray,
    t_zt: jnp.ndarray,
    q_s: jnp.ndarray,
    q_zt: jnp.ndarray,
    U_zu: jnp.ndarray,
    charnock: jnp.ndarray,
    params: CoareParameters,
    zt_equal_zu: bool = True
) -> Tuple[jnp.ndarray, ...]:
    """
    Non-iterative first guess of the similarity scales.

    Stability is estimated from the bulk Richardson number (Grachev and
    Fairall 1997), roughness from a neutral 10 m wind.

    Args:
        zt: Height of temperature and humidity [m]
        zu: Height of the wind [m]
        T_s: Surface temperature [K]
        t_zt: Potential air temperature at zt [K]
        q_s: Surface specific humidity [kg/kg]
        q_zt: Specific humidity at zt [kg/kg]
        U_zu: Scalar wind speed at zu [m/s]
        charnock: Charnock parameter [-]
        params: COARE parameters
        zt_equal_zu: Whether temperature and wind share the same height

    Returns:
        Tuple of (u_star, t_star, q_star, t_zu, q_zu, U_blk, z0)
    """
    # Guard against garbage on masked points
    t_zu = jnp.maximum(t_zt, 180.0)
    q_zu = jnp.maximum(q_zt, 1.0e-6)

    zdt = sign_floor(t_zu - T_s, params.dt_min)
    zdq = sign_floor(q_zu - q_s, params.dq_min)

    znu_a = visc_air(t_zu)

    U_blk = jnp.sqrt(U_zu * U_zu + 0.5 * 0.5)  # first guess of gustiness

    zlog_zu = jnp.log(zu * 10000.0)  # 10000 == 1/z0 with z0 = 1e-4
    zlog_10 = jnp.log(10.0 * 10000.0)
    zus = 0.035 * U_blk * zlog_10 / zlog_zu  # u* = 0.035*Un10

    zz0 = charnock * zus * zus / grav + 0.11 * znu_a / zus
    zz0 = jnp.clip(jnp.abs(zz0), params.z0_min, params.z0_max)

    zz0t = 10.0 / jnp.exp(vkarmn / (0.00115 / (vkarmn / jnp.log(10.0 / zz0))))
    zz0t = jnp.clip(jnp.abs(zz0t), params.z0_min, params.z0_max)

    zcdn = (vkarmn / zlog_zu)**2
    zcc = vkarmn2 / jnp.log(zt / zz0t) / zcdn

    zrib = Ri_bulk(zu, T_s, t_zu, q_s, q_zu, U_blk)

    zeta_u = jnp.where(
        zrib >= 0.0,
        zcc * zrib * (1.0 + 27.0 / 9.0 * zrib / zcc),
        zcc * zrib / (1.0 - zrib * params.zi0 * 0.004 * params.beta0**3 / zu)
    )
    zeta_u = sign_clamp(zeta_u, params.zeta_abs_max)

    zfac = vkarmn / (jnp.log(zu / zz0t) - psi_h_coare(zeta_u))
    u_star = jnp.maximum(
        U_blk * vkarmn / (jnp.log(zu) - jnp.log(zz0) - psi_m_coare(zeta_u)),
        params.u_star_min
    )
    t_star = zdt * zfac
    q_star = zdq * zfac

    if not zt_equal_zu:
        zeta_t = zt * zeta_u / zu
        zprof = jnp.log(zt / zu) + psi_h_coare(zeta_u) - psi_h_coare(zeta_t)
        t_zu = t_zt - t_star / vkarmn * zprof
        q_zu = q_zt - q_star / vkarmn * zprof
        q_zu = jnp.maximum(q_zu, 0.0)  # no negative humidity

    return u_star, t_star, q_star, t_zu, q_zu, U_blk, zz0


def initialize_skin_states(
    shape,
    use_cool_skin: bool,
    use_warm_layer: bool,
    params: CoareParameters = CoareParameters.default()
) -> Tuple[Optional[CoolSkinState], Optional[WarmLayerState]]:
    """
    Allocate the persistent skin states for a domain.

    Args:
        shape: Shape of the domain (one value per location)
        use_cool_skin: Allocate the cool-skin state
        use_warm_layer: Allocate the warm-layer state
        params: COARE parameters

    Returns:
        Tuple of (cool-skin state or None, warm-layer state or None)
    """
    cool_skin = None
    warm_layer = None
    if use_cool_skin:
        cool_skin = CoolSkinState(dT_cs=jnp.full(shape, params.rdt0_cs))
    if use_warm_layer:
        warm_layer = initial_warm_layer_state(shape, params)
    return cool_skin, warm_layer


def _surface_humidity(T_s: jnp.ndarray, slp: jnp.ndarray) -> jnp.ndarray:
    return rdct_qsat_salt * q_sat(jnp.maximum(T_s, 200.0), slp)


@partial(jax.jit, static_argnames=[
    'use_cool_skin', 'use_warm_layer', 'zt_equal_zu', 'n_iterations', 'return_diagnostics'
])
def turb_coare3p6(
    zt: float,
    zu: float,
    T_s: jnp.ndarray,
    t_zt: jnp.ndarray,
    q_s: jnp.ndarray,
    q_zt: jnp.ndarray,
    U_zu: jnp.ndarray,
    radiation: Optional[SurfaceRadiation],
    clock: Optional[SolarClock],
    cool_skin_state: Optional[CoolSkinState],
    warm_layer_state: Optional[WarmLayerState],
    params: CoareParameters,
    use_cool_skin: bool = False,
    use_warm_layer: bool = False,
    zt_equal_zu: bool = True,
    n_iterations: int = 5,
    return_diagnostics: bool = False
) -> BulkCoefficients:
    """
    Jitted COARE 3.6 kernel; inputs must already be validated and broadcast.

    See compute_fluxes for the meaning of the arguments.
    """
    use_skin = use_cool_skin or use_warm_layer

    sst = T_s  # bulk SST, kept for the skin corrections
    dT_cs = None
    if use_skin:
        if use_cool_skin:
            # Constant first guess; the stored dT_cs is only the returned state
            dT_cs = jnp.full_like(sst, params.rdt0_cs)
            T_s = sst + dT_cs
        q_s = _surface_humidity(T_s, radiation.slp)

    u_star, t_star, q_star, t_zu, q_zu, U_blk, z0 = first_guess_coare(
        zt, zu, T_s, t_zt, q_s, q_zt, U_zu, charnock_coare3p6(U_zu, params.charn0_max),
        params, zt_equal_zu=zt_equal_zu
    )
    znu_a = visc_air(jnp.maximum(t_zt, 180.0))

    init = IterationState(
        u_star=u_star, t_star=t_star, q_star=q_star,
        t_zu=t_zu, q_zu=q_zu, U_blk=U_blk,
        z0=z0, z0t=jnp.zeros_like(z0),
        dt_zu=sign_floor(t_zu - T_s, params.dt_min),
        dq_zu=sign_floor(q_zu - q_s, params.dq_min),
        T_s=T_s, q_s=q_s,
        dT_cs=dT_cs, warm_layer=warm_layer_state
    )

    def body(i_iter, st: IterationState) -> IterationState:
        inv_L = sign_clamp(
            one_on_L(st.t_zu, st.q_zu, st.u_star, st.t_star, st.q_star),
            params.one_on_L_max
        )
        U_blk = gustiness_wind(U_zu, st.u_star, inv_L, params)

        zeta_u = sign_clamp(zu * inv_L, params.zeta_abs_max)

        z0, z0t = roughness_lengths(st.u_star, st.z0, znu_a, params)

        u_star, t_star, q_star, zpsi_h_u = turbulent_scales(
            zu, z0, z0t, zeta_u, st.dt_zu, st.dq_zu, U_blk, params
        )

        t_zu, q_zu = st.t_zu, st.q_zu
        if not zt_equal_zu:
            zeta_t = sign_clamp(zt * inv_L, params.zeta_abs_max)
            t_zu, q_zu = adjust_to_wind_height(
                zt, zu, t_zt, q_zt, t_star, q_star, zpsi_h_u, zeta_t
            )

        T_s, q_s = st.T_s, st.q_s
        dT_cs, warm_layer = st.dT_cs, st.warm_layer

        if use_cool_skin:
            q_nsol, _, q_lat = update_qnsol_tau(
                zu, T_s, q_s, t_zu, q_zu, u_star, t_star, q_star, U_zu, U_blk,
                radiation.slp, radiation.rad_lw
            )
            dT_cs = cool_skin_coare(radiation.rad_sw, q_nsol, u_star, sst, q_lat)
            T_s = sst + dT_cs
            if use_warm_layer:
                T_s = T_s + warm_layer.dT_wl
            q_s = _surface_humidity(T_s, radiation.slp)

        if use_warm_layer:
            q_nsol, tau, _ = update_qnsol_tau(
                zu, T_s, q_s, t_zu, q_zu, u_star, t_star, q_star, U_zu, U_blk,
                radiation.slp, radiation.rad_lw
            )
            warm_layer = warm_layer_coare(
                radiation.rad_sw, q_nsol, tau, sst, clock.lon, clock.isecday_utc,
                warm_layer, i_iter == n_iterations - 1, params
            )
            T_s = sst + warm_layer.dT_wl
            if use_cool_skin:
                T_s = T_s + dT_cs
            q_s = _surface_humidity(T_s, radiation.slp)

        dt_zu, dq_zu = st.dt_zu, st.dq_zu
        if use_skin or not zt_equal_zu:
            dt_zu = sign_floor(t_zu - T_s, params.dt_min)
            dq_zu = sign_floor(q_zu - q_s, params.dq_min)

        return IterationState(
            u_star=u_star, t_star=t_star, q_star=q_star,
            t_zu=t_zu, q_zu=q_zu, U_blk=U_blk,
            z0=z0, z0t=z0t, dt_zu=dt_zu, dq_zu=dq_zu,
            T_s=T_s, q_s=q_s, dT_cs=dT_cs, warm_layer=warm_layer
        )

    st = jax.lax.fori_loop(0, n_iterations, body, init)

    # Transfer coefficients at zu
    zratio = st.u_star / st.U_blk
    Cd = jnp.maximum(zratio * zratio, params.cx_min)
    Ch = jnp.maximum(zratio * st.t_star / st.dt_zu, params.cx_min)
    Ce = jnp.maximum(zratio * st.q_star / st.dq_zu, params.cx_min)

    neutral = None
    if return_diagnostics:
        zlog_u = 1.0 / jnp.log(zu / st.z0)
        zchn = jnp.maximum(vkarmn2 * zlog_u / jnp.log(zu / st.z0t), params.cx_min)
        inv_L = one_on_L(st.t_zu, st.q_zu, st.u_star, st.t_star, st.q_star)
        neutral = NeutralDiagnostics(
            CdN=jnp.maximum(vkarmn2 * zlog_u * zlog_u, params.cx_min),
            ChN=zchn,
            CeN=zchn,
            z0=st.z0,
            z0t=st.z0t,
            u_star=st.u_star,
            L=1.0 / inv_L,
            UN10=st.u_star / vkarmn * jnp.log(10.0 / st.z0)
        )

    return BulkCoefficients(
        Cd=Cd, Ch=Ch, Ce=Ce,
        t_zu=st.t_zu, q_zu=st.q_zu, U_blk=st.U_blk,
        T_s=st.T_s, q_s=st.q_s,
        neutral=neutral,
        cool_skin=CoolSkinState(dT_cs=st.dT_cs) if use_cool_skin else None,
        warm_layer=st.warm_layer if use_warm_layer else None
    )


def _check_state_shape(name: str, state, shape) -> None:
    for field in state:
        try:
            jnp.broadcast_shapes(jnp.shape(field), shape)
        except ValueError:
            raise ValueError(
                f"{name} has shape {jnp.shape(field)}, not compatible with inputs of shape {shape}"
            )


def compute_fluxes(
    zt: float,
    zu: float,
    T_s,
    t_zt,
    q_s,
    q_zt,
    U_zu,
    use_cool_skin: bool = False,
    use_warm_layer: bool = False,
    radiation: Optional[SurfaceRadiation] = None,
    clock: Optional[SolarClock] = None,
    cool_skin_state: Optional[CoolSkinState] = None,
    warm_layer_state: Optional[WarmLayerState] = None,
    n_iterations: int = 5,
    return_diagnostics: bool = False,
    params: CoareParameters = CoareParameters.default()
) -> BulkCoefficients:
    """
    Turbulent transfer coefficients according to COARE 3.6.

    If relevant (zt != zu), temperature and humidity are adjusted from zt
    to zu. The returned bulk wind speed includes the gustiness contribution
    of unstable conditions and is the one to use in the bulk formulae.

    With the cool-skin and/or warm-layer corrections, T_s is the bulk SST on
    input and the returned T_s is the skin temperature; q_s does not need to
    be meaningful on input. Without them, T_s and q_s are returned unchanged
    and q_s must be the saturation humidity at T_s.

    Args:
        zt: Height of t_zt and q_zt [m]
        zu: Height of U_zu [m]
        T_s: Bulk sea surface temperature [K]
        t_zt: Potential air temperature at zt [K]
        q_s: Sea surface saturation specific humidity [kg/kg]
        q_zt: Specific humidity of air at zt [kg/kg]
        U_zu: Scalar (relative) wind speed at zu [m/s]
        use_cool_skin: Apply the cool-skin correction
        use_warm_layer: Apply the warm-layer correction
        radiation: Net shortwave, downwelling longwave and sea-level
            pressure; required by both corrections
        clock: UTC seconds of day and longitude; required by the warm layer
        cool_skin_state: Cool-skin state of the previous time step; only its
            shape is checked, the iteration always starts from
            params.rdt0_cs. A fresh state is allocated when None
        warm_layer_state: Warm-layer state of the previous time step; a fresh
            state is allocated when None
        n_iterations: Number of passes of the stability loop
        return_diagnostics: Also return neutral-stability diagnostics
        params: COARE parameters

    Returns:
        BulkCoefficients, carrying the updated skin states when used

    Raises:
        ValueError: If inputs required by the requested corrections are
            missing or the configuration is inconsistent
    """
    if n_iterations < 1:
        raise ValueError(f"n_iterations must be >= 1, got {n_iterations}")

    if use_cool_skin or use_warm_layer:
        if radiation is None or any(field is None for field in radiation):
            raise ValueError(
                "rad_sw, rad_lw and slp must be provided to use the cool-skin "
                "or warm-layer parameterization"
            )
    if use_warm_layer:
        if clock is None or any(field is None for field in clock):
            raise ValueError(
                "isecday_utc and lon must be provided to use the warm-layer parameterization"
            )

    dtype = jax.dtypes.canonicalize_dtype(jnp.float64)
    T_s, t_zt, q_s, q_zt, U_zu = jnp.broadcast_arrays(
        *[jnp.asarray(x, dtype=dtype) for x in (T_s, t_zt, q_s, q_zt, U_zu)]
    )
    shape = T_s.shape

    if use_cool_skin or use_warm_layer:
        radiation = SurfaceRadiation(
            *[jnp.broadcast_to(jnp.asarray(x, dtype=dtype), shape) for x in radiation]
        )
    else:
        radiation = None

    if use_warm_layer:
        clock = SolarClock(
            *[jnp.broadcast_to(jnp.asarray(x, dtype=dtype), shape) for x in clock]
        )
    else:
        clock = None

    new_cs, new_wl = initialize_skin_states(shape, use_cool_skin, use_warm_layer, params)
    if use_cool_skin:
        if cool_skin_state is None:
            cool_skin_state = new_cs
        _check_state_shape("cool_skin_state", cool_skin_state, shape)
        cool_skin_state = CoolSkinState(
            *[jnp.broadcast_to(jnp.asarray(x, dtype=dtype), shape) for x in cool_skin_state]
        )
    else:
        cool_skin_state = None
    if use_warm_layer:
        if warm_layer_state is None:
            warm_layer_state = new_wl
        _check_state_shape("warm_layer_state", warm_layer_state, shape)
        warm_layer_state = WarmLayerState(
            *[jnp.broadcast_to(jnp.asarray(x, dtype=dtype), shape) for x in warm_layer_state]
        )
    else:
        warm_layer_state = None

    zt_equal_zu = bool(abs(zu - zt) < 0.01)

    return turb_coare3p6(
        float(zt), float(zu), T_s, t_zt, q_s, q_zt, U_zu,
        radiation, clock, cool_skin_state, warm_layer_state, params,
        use_cool_skin=use_cool_skin,
        use_warm_layer=use_warm_layer,
        zt_equal_zu=zt_equal_zu,
        n_iterations=int(n_iterations),
        return_diagnostics=return_diagnostics
    )
