"""
Auxiliary fields derived before any turbulence closure runs.
"""

from typing import NamedTuple

import jax
import jax.numpy as jnp

from aerojax.constants import rdct_qsat_salt
from aerojax.flux_types import AtmosphericState, MeasurementHeights, SurfaceState
from aerojax.thermodynamics import gamma_moist, q_sat


class PreprocessedState(NamedTuple):
    """Fields passed on to the turbulent flux solver."""

    wind_speed: jnp.ndarray    # Scalar wind speed at zu [m/s] (nx, ny)
    theta_zt: jnp.ndarray      # Potential temperature at zt [K] (nx, ny)
    surface: SurfaceState      # Bulk SST and sea surface humidity


@jax.jit
def scalar_wind(u_wind: jnp.ndarray, v_wind: jnp.ndarray) -> jnp.ndarray:
    """Wind speed [m/s] from its zonal and meridional components."""
    return jnp.sqrt(u_wind * u_wind + v_wind * v_wind)


@jax.jit
def potential_temperature_at_height(
    temperature: jnp.ndarray,
    humidity: jnp.ndarray,
    zt: float
) -> jnp.ndarray:
    """
    Approximate potential temperature of air at height zt.

    Args:
        temperature: Absolute air temperature at zt [K]
        humidity: Specific humidity at zt [kg/kg]
        zt: Measurement height [m]

    Returns:
        Potential temperature referenced to the sea surface [K]
    """
    return temperature + gamma_moist(temperature, humidity) * zt


@jax.jit
def sea_surface_humidity(sst: jnp.ndarray, slp: jnp.ndarray) -> jnp.ndarray:
    """Specific humidity at the air-sea interface, reduced for salinity [kg/kg]."""
    return rdct_qsat_salt * q_sat(sst, slp)


def preprocess(
    heights: MeasurementHeights,
    atmosphere: AtmosphericState,
    sst: jnp.ndarray
) -> PreprocessedState:
    """Derive wind speed, potential temperature and bulk surface state."""
    wind_speed = scalar_wind(atmosphere.u_wind, atmosphere.v_wind)
    theta_zt = potential_temperature_at_height(
        atmosphere.temperature, atmosphere.humidity, heights.zt
    )
    surface = SurfaceState(
        temperature=sst,
        humidity=sea_surface_humidity(sst, atmosphere.pressure),
    )
    return PreprocessedState(wind_speed=wind_speed, theta_zt=theta_zt, surface=surface)
