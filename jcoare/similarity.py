"""
Monin-Obukhov stability correction functions of the COARE algorithm.

Unstable side (zeta < 0) blends the Kansas (Businger-Dyer) form with the
free-convection limit of Grachev et al. (2000); stable side (zeta >= 0)
follows Beljaars and Holtslag (1991). Both branches are evaluated and
selected with ``jnp.where`` so the functions are safe to trace and
vectorize. Callers clamp |zeta| <= 50 beforehand.
"""

import jax
import jax.numpy as jnp

from jcoare.constants.physical_constants import rpi

_SQRT3 = 1.7320508
_PSI_C_OFFSET = 1.813799447  # makes the convective form vanish at zeta = 0


def _convective_psi(zphi_c: jnp.ndarray) -> jnp.ndarray:
    return (1.5 * jnp.log((1.0 + zphi_c + zphi_c * zphi_c) / 3.0)
            - _SQRT3 * jnp.arctan((1.0 + 2.0 * zphi_c) / _SQRT3)
            + _PSI_C_OFFSET)


@jax.jit
def psi_m_coare(zeta: jnp.ndarray) -> jnp.ndarray:
    """
    Stability correction for momentum, psi_m(zeta).

    Args:
        zeta: Stability parameter z/L [-]

    Returns:
        psi_m [-]
    """
    zphi_m = jnp.abs(1.0 - 15.0 * zeta)**0.25  # Kansas unstable
    zpsi_k = (2.0 * jnp.log((1.0 + zphi_m) / 2.0)
              + jnp.log((1.0 + zphi_m * zphi_m) / 2.0)
              - 2.0 * jnp.arctan(zphi_m) + 0.5 * rpi)

    zphi_c = jnp.abs(1.0 - 10.15 * zeta)**0.3333  # Convective
    zpsi_c = _convective_psi(zphi_c)

    zf = zeta * zeta
    zf = zf / (1.0 + zf)
    zc = jnp.minimum(50.0, 0.35 * zeta)

    unstable = (1.0 - zf) * zpsi_k + zf * zpsi_c
    stable = -(1.0 + zeta + 0.6667 * (zeta - 14.28) / jnp.exp(zc) + 8.525)

    return jnp.where(zeta >= 0.0, stable, unstable)


@jax.jit
def psi_h_coare(zeta: jnp.ndarray) -> jnp.ndarray:
    """
    Stability correction for heat and moisture, psi_h(zeta).

    Args:
        zeta: Stability parameter z/L [-]

    Returns:
        psi_h [-]
    """
    zphi_h = jnp.abs(1.0 - 15.0 * zeta)**0.5  # Kansas unstable
    zpsi_k = 2.0 * jnp.log((1.0 + zphi_h) / 2.0)

    zphi_c = jnp.abs(1.0 - 34.15 * zeta)**0.3333  # Convective
    zpsi_c = _convective_psi(zphi_c)

    zf = zeta * zeta
    zf = zf / (1.0 + zf)
    zc = jnp.minimum(50.0, 0.35 * zeta)

    unstable = (1.0 - zf) * zpsi_k + zf * zpsi_c
    stable = -(jnp.abs(1.0 + 2.0 * zeta / 3.0)**1.5
               + 0.6667 * (zeta - 14.28) / jnp.exp(zc) + 8.525)

    return jnp.where(zeta >= 0.0, stable, unstable)
