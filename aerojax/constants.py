"""
Physical constants for bulk air-sea flux computations

This module contains the physical constants shared by the thermodynamics
functions, the turbulent flux solvers and the flux assembly. Values follow
the bulk-formula conventions used for ocean forcing.
"""

from typing import NamedTuple

class PhysicalConstants(NamedTuple):
    """Physical constants for air-sea flux computations"""

    # Fundamental constants
    grav: float = 9.8             # Gravitational acceleration (m/s²)
    vkarmn: float = 0.4           # von Kármán constant (dimensionless)
    stefan: float = 5.67e-8       # Stefan-Boltzmann constant (W/m²/K⁴)

    # Gas constants
    rd: float = 287.05            # Gas constant for dry air (J/K/kg)
    rv: float = 461.495           # Gas constant for water vapor (J/K/kg)
    eps: float = 0.62197          # Ratio of molecular weights (Rd/Rv)
    rctv0: float = 0.608          # Virtual temperature coefficient (Rv/Rd - 1)

    # Heat capacities (J/K/kg)
    cp_dry: float = 1005.0        # Specific heat of dry air
    cp_vap: float = 1860.0        # Specific heat of water vapor

    # Thermodynamic reference values
    t0: float = 273.15            # Freezing point of fresh water (K)

    # Sea water (cool-skin layer)
    rho_water: float = 1025.0     # Density of sea water (kg/m³)
    cp_water: float = 4190.0      # Specific heat of sea water (J/K/kg)
    nu_water: float = 1.0e-6      # Kinematic viscosity of sea water (m²/s)
    k_water: float = 0.6          # Thermal conductivity of sea water (W/m/K)
    emiss_water: float = 0.97     # Longwave emissivity of the sea surface

    # Reference density of air used for water-side friction velocity (kg/m³)
    rho_air_ref: float = 1.2

    @classmethod
    def default(cls) -> 'PhysicalConstants':
        """Return default physical constants"""
        return cls()

# Global instance of physical constants
physical_constants = PhysicalConstants.default()

# Export individual constants for convenience
grav = physical_constants.grav
vkarmn = physical_constants.vkarmn
stefan = physical_constants.stefan
rd = physical_constants.rd
rv = physical_constants.rv
eps = physical_constants.eps
rctv0 = physical_constants.rctv0
cp_dry = physical_constants.cp_dry
cp_vap = physical_constants.cp_vap
t0 = physical_constants.t0
rho_water = physical_constants.rho_water
cp_water = physical_constants.cp_water
nu_water = physical_constants.nu_water
k_water = physical_constants.k_water
emiss_water = physical_constants.emiss_water
rho_air_ref = physical_constants.rho_air_ref

# Fraction of the saturation humidity found over salt water
rdct_qsat_salt = 0.98
