"""
Data structures and types for the COARE bulk flux algorithm.

This module defines the parameters of the COARE 3.6 iteration, the
persistent cool-skin and warm-layer states carried between time steps, the
optional radiative/clock forcing of the skin sub-models, and the result
containers returned to callers.
"""

from typing import NamedTuple, Optional
import jax.numpy as jnp
import tree_math


@tree_math.struct
class CoareParameters:
    """Parameters for the COARE 3.6 bulk algorithm."""

    # Boundary layer / gustiness
    zi0: float             # Scale height of the atmospheric boundary layer [m]
    beta0: float           # Gustiness parameter [-]

    # Stability limits
    zeta_abs_max: float    # Maximum |z/L| [-]
    one_on_L_max: float    # Maximum |1/L| [1/m]

    # Roughness
    charn0_max: float      # Charnock parameter for winds > 18 m/s [-]
    z0_min: float          # Floor of z0 and z0t [m]
    z0_max: float          # Ceiling of z0 and z0t [m]
    z0t_max: float         # COARE 3.6 ceiling of z0t [m]

    # Floors preventing divisions by zero
    u_star_min: float      # Minimum friction velocity [m/s]
    dt_min: float          # Minimum |t_zu - T_s| [K]
    dq_min: float          # Minimum |q_zu - q_s| [kg/kg]
    u_blk_min: float       # Minimum bulk wind speed [m/s]
    cx_min: float          # Minimum transfer coefficient [-]

    # Cool skin
    rdt0_cs: float         # Initial skin temperature deficit [K]

    # Warm layer
    hwl_max: float         # Maximum warm-layer thickness [m]
    time_step: float       # Interval between successive calls [s]
    wl_reset_time: float   # Local solar time of the daily reset [s]
    rich_wl: float         # Critical Richardson number of the warm layer [-]

    @classmethod
    def default(cls, zi0=600.0, beta0=1.2,
                 zeta_abs_max=50.0, one_on_L_max=200.0,
                 charn0_max=0.028, z0_min=1.0e-9, z0_max=1.0, z0t_max=1.6e-4,
                 u_star_min=1.0e-9, dt_min=1.0e-6, dq_min=1.0e-9,
                 u_blk_min=0.2, cx_min=1.0e-4,
                 rdt0_cs=-0.25,
                 hwl_max=20.0, time_step=3600.0, wl_reset_time=21600.0,
                 rich_wl=0.65) -> 'CoareParameters':
        """Return default COARE 3.6 parameters"""
        return cls(
            zi0=jnp.array(zi0),
            beta0=jnp.array(beta0),
            zeta_abs_max=jnp.array(zeta_abs_max),
            one_on_L_max=jnp.array(one_on_L_max),
            charn0_max=jnp.array(charn0_max),
            z0_min=jnp.array(z0_min),
            z0_max=jnp.array(z0_max),
            z0t_max=jnp.array(z0t_max),
            u_star_min=jnp.array(u_star_min),
            dt_min=jnp.array(dt_min),
            dq_min=jnp.array(dq_min),
            u_blk_min=jnp.array(u_blk_min),
            cx_min=jnp.array(cx_min),
            rdt0_cs=jnp.array(rdt0_cs),
            hwl_max=jnp.array(hwl_max),
            time_step=jnp.array(time_step),
            wl_reset_time=jnp.array(wl_reset_time),
            rich_wl=jnp.array(rich_wl)
        )


class CoolSkinState(NamedTuple):
    """Persistent cool-skin state, one value per location."""

    dT_cs: jnp.ndarray             # Skin temperature deficit [K] (< 0 when skin is cooler)


class WarmLayerState(NamedTuple):
    """Persistent warm-layer state, one value per location."""

    tau_ac: jnp.ndarray            # Momentum accumulated since reset [N.s/m²]
    qnt_ac: jnp.ndarray            # Heat accumulated since reset [J/m²]
    dT_wl: jnp.ndarray             # Warm-layer temperature increment [K]
    hz_wl: jnp.ndarray             # Warm-layer thickness [m]


class SurfaceRadiation(NamedTuple):
    """Forcing required by the cool-skin and warm-layer parameterizations."""

    rad_sw: jnp.ndarray            # Net shortwave flux at the surface (>0) [W/m²]
    rad_lw: jnp.ndarray            # Downwelling longwave flux at the surface (>0) [W/m²]
    slp: jnp.ndarray               # Sea-level pressure [Pa]


class SolarClock(NamedTuple):
    """Time information required by the warm-layer parameterization."""

    isecday_utc: jnp.ndarray       # Seconds since 00:00 UTC of the current day [s]
    lon: jnp.ndarray               # Longitude [deg. E]


class NeutralDiagnostics(NamedTuple):
    """Neutral-stability diagnostics of the converged iteration."""

    CdN: jnp.ndarray               # Neutral drag coefficient [-]
    ChN: jnp.ndarray               # Neutral sensible heat coefficient [-]
    CeN: jnp.ndarray               # Neutral evaporation coefficient [-]
    z0: jnp.ndarray                # Aerodynamic roughness length [m]
    z0t: jnp.ndarray               # Scalar roughness length [m]
    u_star: jnp.ndarray            # Friction velocity [m/s]
    L: jnp.ndarray                 # Obukhov length [m]
    UN10: jnp.ndarray              # Neutral wind speed at 10 m [m/s]


class BulkCoefficients(NamedTuple):
    """Transfer coefficients and adjusted air state returned by the iteration."""

    Cd: jnp.ndarray                # Drag coefficient [-]
    Ch: jnp.ndarray                # Sensible heat transfer coefficient [-]
    Ce: jnp.ndarray                # Evaporation transfer coefficient [-]
    t_zu: jnp.ndarray              # Potential air temperature at zu [K]
    q_zu: jnp.ndarray              # Specific humidity at zu [kg/kg]
    U_blk: jnp.ndarray             # Bulk wind speed at zu, gustiness included [m/s]
    T_s: jnp.ndarray               # Surface temperature used (skin if corrected) [K]
    q_s: jnp.ndarray               # Surface saturation humidity used [kg/kg]

    # Optional outputs
    neutral: Optional[NeutralDiagnostics] = None
    cool_skin: Optional[CoolSkinState] = None
    warm_layer: Optional[WarmLayerState] = None


class BulkFluxes(NamedTuple):
    """Turbulent fluxes from the bulk formulae, positive into the ocean."""

    tau: jnp.ndarray               # Wind stress module [N/m²]
    q_sen: jnp.ndarray             # Sensible heat flux [W/m²]
    q_lat: jnp.ndarray             # Latent heat flux [W/m²]
    evap: jnp.ndarray              # Evaporation, positive upward [kg/m²/s]
