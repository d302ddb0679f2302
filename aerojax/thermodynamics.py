"""
Thermodynamic functions of moist air over the sea surface.

Pure, stateless functions of temperature, humidity and pressure used by the
preprocessing, the turbulent flux solvers and the flux assembly. All of them
act elementwise on arrays of any shape.
"""

import jax
import jax.numpy as jnp

from aerojax.constants import (
    grav, vkarmn, rd, eps, rctv0, cp_dry, cp_vap, t0
)

# Triple point of water (K), reference of the Goff-Gratch formula
rtt0 = 273.16


@jax.jit
def e_sat(temperature: jnp.ndarray) -> jnp.ndarray:
    """
    Saturation vapor pressure over liquid water (Goff-Gratch, 1946).

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
    e_s = e_sat(temperature)
    return eps * e_s / (pressure - (1.0 - eps) * e_s)


@jax.jit
def lvap(temperature: jnp.ndarray) -> jnp.ndarray:
    """Latent heat of vaporization [J/kg] as a function of temperature [K]."""
    return (2.501 - 0.00237 * (temperature - t0)) * 1.0e6


@jax.jit
def cp_air(humidity: jnp.ndarray) -> jnp.ndarray:
    """Specific heat of moist air [J/K/kg] from specific humidity [kg/kg]."""
    return cp_dry + cp_vap * humidity


@jax.jit
def gamma_moist(temperature: jnp.ndarray, humidity: jnp.ndarray) -> jnp.ndarray:
    """
    Moist adiabatic lapse rate.

    Args:
        temperature: Air temperature [K]
        humidity: Specific humidity [kg/kg]

    Returns:
        Lapse rate [K/m], positive (temperature decreasing with height)
    """
    mixing_ratio = humidity / (1.0 - humidity)
    inv_rt = 1.0 / (rd * temperature)
    latent = lvap(temperature)
    return (grav * (1.0 + latent * mixing_ratio * inv_rt)
            / (cp_dry + latent * latent * mixing_ratio * eps * inv_rt / temperature))


@jax.jit
def virtual_temperature(temperature: jnp.ndarray, humidity: jnp.ndarray) -> jnp.ndarray:
    """Virtual temperature [K]."""
    return temperature * (1.0 + rctv0 * humidity)


@jax.jit
def rho_air(temperature: jnp.ndarray, humidity: jnp.ndarray,
            pressure: jnp.ndarray) -> jnp.ndarray:
    """
    Density of moist air.

    Args:
        temperature: Air temperature [K]
        humidity: Specific humidity [kg/kg]
        pressure: Air pressure [Pa]

    Returns:
        Air density [kg/m³]
    """
    return pressure / (rd * virtual_temperature(temperature, humidity))


@jax.jit
def visc_air(temperature: jnp.ndarray) -> jnp.ndarray:
    """Kinematic viscosity of air [m²/s] (Andreas, 1989)."""
    tc = temperature - t0
    return 1.326e-5 * (1.0 + 6.542e-3 * tc + 8.301e-6 * tc**2 - 4.84e-9 * tc**3)


@jax.jit
def one_on_l(
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    u_star: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray
) -> jnp.ndarray:
    """
    Inverse of the Obukhov length.

    Args:
        t_zu: Potential temperature of air [K]
        q_zu: Specific humidity of air [kg/kg]
        u_star: Friction velocity [m/s]
        t_star: Temperature scale [K]
        q_star: Humidity scale [kg/kg]

    Returns:
        1/L [1/m], negative for unstable conditions
    """
    buoyancy = t_star * (1.0 + rctv0 * q_zu) + rctv0 * t_zu * q_star
    denominator = jnp.maximum(u_star * u_star, 1e-9) * virtual_temperature(t_zu, q_zu)
    return grav * vkarmn * buoyancy / denominator
