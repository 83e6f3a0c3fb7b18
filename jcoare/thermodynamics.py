"""
Thermodynamics of moist air and sea water for bulk flux calculations.

This module provides the pure, element-wise helpers consumed by the COARE
iteration: saturation humidity, air viscosity and density, latent heat,
lapse rate, Obukhov length and bulk Richardson number. All functions accept
arrays of any shape and broadcast their arguments.
"""

import jax
import jax.numpy as jnp

from jcoare.constants.physical_constants import (
    grav, vkarmn, r_dry, cp_dry, cp_vap, lv_ref, rt0, rtt0,
    emiss_w, stefan, reps0, rctv0
)


@jax.jit
def sign_floor(x: jnp.ndarray, floor: float) -> jnp.ndarray:
    """
    Floor the magnitude of x while keeping its sign.

    Zero is treated as positive, so the result is never zero.

    Args:
        x: Input values
        floor: Minimum magnitude (> 0)

    Returns:
        sign(x) * max(|x|, floor)
    """
    sign = jnp.where(x >= 0.0, 1.0, -1.0)
    return sign * jnp.maximum(jnp.abs(x), floor)


@jax.jit
def sign_clamp(x: jnp.ndarray, cap: float) -> jnp.ndarray:
    """
    Cap the magnitude of x while keeping its sign.

    Args:
        x: Input values
        cap: Maximum magnitude

    Returns:
        sign(x) * min(|x|, cap)
    """
    sign = jnp.where(x >= 0.0, 1.0, -1.0)
    return sign * jnp.minimum(jnp.abs(x), cap)


@jax.jit
def e_sat(temperature: jnp.ndarray) -> jnp.ndarray:
    """
    Saturation vapor pressure over water (Goff-Gratch, WMO 1957).

    Args:
        temperature: Absolute temperature [K]

    Returns:
        Saturation vapor pressure [Pa]
    """
    ztmp = rtt0 / temperature
    log10_e = (10.79574 * (1.0 - ztmp)
               - 5.028 * jnp.log10(temperature / rtt0)
               + 1.50475e-4 * (1.0 - 10.0**(-8.2969 * (temperature / rtt0 - 1.0)))
               + 0.42873e-3 * (10.0**(4.76955 * (1.0 - ztmp)) - 1.0)
               + 0.78614)
    return 100.0 * 10.0**log10_e


@jax.jit
def q_sat(temperature: jnp.ndarray, pressure: jnp.ndarray) -> jnp.ndarray:
    """
    Saturation specific humidity.

    Args:
        temperature: Absolute temperature [K]
        pressure: Air pressure [Pa]

    Returns:
        Saturation specific humidity [kg/kg]
    """
    ze_s = e_sat(temperature)
    return reps0 * ze_s / (pressure - (1.0 - reps0) * ze_s)


@jax.jit
def visc_air(temperature: jnp.ndarray) -> jnp.ndarray:
    """
    Kinematic viscosity of air (Andreas 1989).

    Args:
        temperature: Air temperature [K]

    Returns:
        Kinematic viscosity [m²/s]
    """
    ztc = temperature - rt0
    ztc2 = ztc * ztc
    return 1.326e-5 * (1.0 + 6.542e-3 * ztc + 8.301e-6 * ztc2 - 4.84e-9 * ztc2 * ztc)


@jax.jit
def L_vap(sst: jnp.ndarray) -> jnp.ndarray:
    """
    Latent heat of vaporization of water.

    Args:
        sst: Water temperature [K]

    Returns:
        Latent heat [J/kg]
    """
    return (2.501 - 0.00237 * (sst - rt0)) * 1.0e6


@jax.jit
def cp_air(humidity: jnp.ndarray) -> jnp.ndarray:
    """Specific heat of moist air [J/K/kg] from specific humidity [kg/kg]."""
    return cp_dry + cp_vap * humidity


@jax.jit
def rho_air(
    temperature: jnp.ndarray,
    humidity: jnp.ndarray,
    pressure: jnp.ndarray
) -> jnp.ndarray:
    """
    Density of moist air, never below 0.8 kg/m³.

    Args:
        temperature: Absolute air temperature [K]
        humidity: Specific humidity [kg/kg]
        pressure: Air pressure [Pa]

    Returns:
        Air density [kg/m³]
    """
    rho = pressure / (r_dry * temperature * (1.0 + rctv0 * humidity))
    return jnp.maximum(rho, 0.8)


@jax.jit
def virtual_temperature(temperature: jnp.ndarray, humidity: jnp.ndarray) -> jnp.ndarray:
    """Virtual temperature [K]."""
    return temperature * (1.0 + rctv0 * humidity)


@jax.jit
def gamma_moist(temperature: jnp.ndarray, humidity: jnp.ndarray) -> jnp.ndarray:
    """
    Adiabatic lapse rate of moist air.

    Args:
        temperature: Absolute air temperature [K]
        humidity: Specific humidity [kg/kg]

    Returns:
        Lapse rate [K/m]
    """
    zta = jnp.maximum(temperature, 180.0)
    zqa = jnp.maximum(humidity, 1.0e-6)
    zwa = zqa / (1.0 - zqa)  # mixing ratio
    zirt = 1.0 / (r_dry * zta)
    return grav * (1.0 + lv_ref * zwa * zirt) / (
        cp_dry + lv_ref * lv_ref * zwa * reps0 * zirt / zta
    )


@jax.jit
def one_on_L(
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    u_star: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray
) -> jnp.ndarray:
    """
    Inverse of the Obukhov length from the similarity scales.

    Args:
        t_zu: Potential air temperature at zu [K]
        q_zu: Specific humidity at zu [kg/kg]
        u_star: Friction velocity [m/s]
        t_star: Temperature scale [K]
        q_star: Humidity scale [kg/kg]

    Returns:
        1/L [1/m], positive when stable
    """
    zqa = 1.0 + rctv0 * q_zu
    numerator = grav * vkarmn * (t_star * zqa + rctv0 * t_zu * q_star)
    return numerator / jnp.maximum(u_star * u_star * t_zu * zqa, 1.0e-9)


@jax.jit
def Ri_bulk(
    z: float,
    sst: jnp.ndarray,
    t_z: jnp.ndarray,
    ssq: jnp.ndarray,
    q_z: jnp.ndarray,
    wind_speed: jnp.ndarray
) -> jnp.ndarray:
    """
    Bulk Richardson number of the air layer between the surface and z.

    Args:
        z: Height of the air state [m]
        sst: Surface temperature [K]
        t_z: Potential air temperature at z [K]
        ssq: Surface specific humidity [kg/kg]
        q_z: Air specific humidity at z [kg/kg]
        wind_speed: Bulk wind speed at z [m/s]

    Returns:
        Bulk Richardson number [-]
    """
    zsstv = virtual_temperature(sst, ssq)
    zdthv = virtual_temperature(t_z, q_z) - zsstv
    return grav * zdthv * z / (zsstv * wind_speed * wind_speed)


@jax.jit
def qlw_net(rad_lw: jnp.ndarray, sst: jnp.ndarray) -> jnp.ndarray:
    """
    Net longwave flux at the sea surface, positive into the ocean.

    Args:
        rad_lw: Downwelling longwave radiation [W/m²]
        sst: Surface temperature [K]

    Returns:
        Net longwave flux [W/m²]
    """
    return emiss_w * (rad_lw - stefan * sst**4)


@jax.jit
def alpha_sw(sst: jnp.ndarray) -> jnp.ndarray:
    """
    Thermal expansion coefficient of sea water.

    Args:
        sst: Sea surface temperature [K]

    Returns:
        Thermal expansion coefficient [1/K]
    """
    return 2.1e-5 * jnp.maximum(sst - rt0 + 3.2, 0.0)**0.79
