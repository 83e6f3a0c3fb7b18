"""
Physical constants for the COARE bulk air-sea flux algorithm

This module contains the physical constants shared by the thermodynamic
helpers, the COARE 3.6 stability iteration and the cool-skin/warm-layer
parameterizations. Values follow the AeroBulk conventions so that transfer
coefficients can be compared against the reference runs.
"""

from typing import NamedTuple

class PhysicalConstants(NamedTuple):
    """Physical constants for air-sea bulk flux computations"""

    # Fundamental constants
    grav: float = 9.8             # Gravitational acceleration (m/s²)
    vkarmn: float = 0.4           # von Kármán constant (dimensionless)
    rpi: float = 3.141592653589793

    # Dry air and water vapour
    r_dry: float = 287.05         # Gas constant for dry air (J/K/kg)
    r_vap: float = 461.495        # Gas constant for water vapor (J/K/kg)
    cp_dry: float = 1005.0        # Specific heat of dry air (J/K/kg)
    cp_vap: float = 1860.0        # Specific heat of water vapor (J/K/kg)
    lv_ref: float = 2.46e6        # Reference latent heat of vaporization (J/kg)
    rho0_a: float = 1.2           # Reference air density (kg/m³)

    # Thermodynamic reference values
    rt0: float = 273.15           # 0°C (K)
    rtt0: float = 273.16          # Triple point of water (K)

    # Sea water
    rho0_w: float = 1025.0        # Density of sea water (kg/m³)
    cp0_w: float = 4190.0         # Specific heat of sea water (J/K/kg)
    nu0_w: float = 1.0e-6         # Kinematic viscosity of sea water (m²/s)
    k0_w: float = 0.6             # Thermal conductivity of sea water (W/m/K)
    emiss_w: float = 0.98         # Emissivity of the sea surface
    rdct_qsat_salt: float = 0.98  # Reduction of q_sat over salty water

    # Radiation constants
    stefan: float = 5.67e-8       # Stefan-Boltzmann constant (W/m²/K⁴)

    @classmethod
    def default(cls) -> 'PhysicalConstants':
        """Return default physical constants"""
        return cls()

# Global instance of physical constants
physical_constants = PhysicalConstants.default()

# Export individual constants for convenience
grav = physical_constants.grav
vkarmn = physical_constants.vkarmn
rpi = physical_constants.rpi
r_dry = physical_constants.r_dry
r_vap = physical_constants.r_vap
cp_dry = physical_constants.cp_dry
cp_vap = physical_constants.cp_vap
lv_ref = physical_constants.lv_ref
rho0_a = physical_constants.rho0_a
rt0 = physical_constants.rt0
rtt0 = physical_constants.rtt0
rho0_w = physical_constants.rho0_w
cp0_w = physical_constants.cp0_w
nu0_w = physical_constants.nu0_w
k0_w = physical_constants.k0_w
emiss_w = physical_constants.emiss_w
rdct_qsat_salt = physical_constants.rdct_qsat_salt
stefan = physical_constants.stefan

# Derived constants
vkarmn2 = vkarmn * vkarmn           # von Kármán squared
reps0 = r_dry / r_vap               # Ratio of molecular weights (Mv/Md)
rctv0 = r_vap / r_dry - 1.0         # Virtual temperature coefficient (~0.608)
sq_radrw = (rho0_a / rho0_w) ** 0.5 # Converts u* in air to u* in water
