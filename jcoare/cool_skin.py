"""
Cool-skin parameterization of the COARE algorithm.

Computes the temperature difference across the viscous sub-layer at the
ocean surface (Fairall et al. 1996). The sub-layer thickness depends on the
heat absorbed within it, which itself depends on the thickness through the
solar absorption profile, so both are refined with a few fixed passes.

Reference:
    Fairall, C. W., Bradley, E. F., Godfrey, J. S., Wick, G. A.,
    Edson, J. B., and Young, G. S. (1996): Cool-skin and warm-layer
    effects on sea surface temperature. J. Geophys. Res., 101, 1295-1308.
"""

import jax
import jax.numpy as jnp

from jcoare.constants.physical_constants import (
    grav, rho0_w, cp0_w, nu0_w, k0_w, lv_ref, sq_radrw
)
from jcoare.thermodynamics import alpha_sw

# "-" because of the ocean convention: Qabs > 0 means the ocean gains heat
_ZCON0 = -16.0 * grav * rho0_w * cp0_w * nu0_w**3 / (k0_w * k0_w)

# Salinity contribution of evaporation to the sub-layer buoyancy flux
_BETA_SALT = 0.026

_N_PASSES = 4


@jax.jit
def delta_skin_layer(
    alpha: jnp.ndarray,
    q_absorbed: jnp.ndarray,
    q_lat: jnp.ndarray,
    u_star: jnp.ndarray
) -> jnp.ndarray:
    """
    Thickness of the viscous skin layer.

    Args:
        alpha: Thermal expansion coefficient of sea water [1/K]
        q_absorbed: Heat flux absorbed in the sub-layer (ocean convention) [W/m²]
        q_lat: Latent heat flux (ocean convention, < 0 when evaporating) [W/m²]
        u_star: Friction velocity in the air [m/s]

    Returns:
        Sub-layer thickness delta [m]
    """
    zusw = jnp.maximum(u_star, 1.0e-4) * sq_radrw  # u* in the water
    zusw2 = zusw * zusw

    zbuoy = alpha * q_absorbed + _BETA_SALT * jnp.minimum(q_lat, 0.0) * cp0_w / lv_ref
    zlamb = 6.0 * (1.0 + jnp.maximum(_ZCON0 * zbuoy / (zusw2 * zusw2), 0.0)**0.75)**(-1.0 / 3.0)

    return zlamb * nu0_w / zusw


@jax.jit
def solar_fraction_skin(delta: jnp.ndarray) -> jnp.ndarray:
    """Fraction of the net solar flux absorbed in a skin layer of thickness delta."""
    return jnp.maximum(
        0.065 + 11.0 * delta - 6.6e-5 / delta * (1.0 - jnp.exp(-delta / 8.0e-4)),
        0.01
    )


@jax.jit
def cool_skin_coare(
    rad_sw: jnp.ndarray,
    q_nsol: jnp.ndarray,
    u_star: jnp.ndarray,
    sst: jnp.ndarray,
    q_lat: jnp.ndarray
) -> jnp.ndarray:
    """
    Cool-skin temperature increment.

    Args:
        rad_sw: Net shortwave flux at the surface [W/m²]
        q_nsol: Net non-solar heat flux (ocean convention) [W/m²]
        u_star: Friction velocity [m/s]
        sst: Bulk sea surface temperature [K]
        q_lat: Latent heat flux (ocean convention) [W/m²]

    Returns:
        dT_cs, skin minus bulk temperature [K]; negative when the skin is
        cooler, positive values remain possible when the absorbed flux is
        positive
    """
    zalpha = alpha_sw(sst)

    # No solar absorption in the tiny sub-layer as a first guess
    zq_abs = q_nsol
    zdelta = delta_skin_layer(zalpha, zq_abs, q_lat, u_star)

    for _ in range(_N_PASSES):
        zfr = solar_fraction_skin(zdelta)
        zq_abs = q_nsol + zfr * rad_sw
        zdelta = delta_skin_layer(zalpha, zq_abs, q_lat, u_star)

    return zq_abs * zdelta / k0_w
