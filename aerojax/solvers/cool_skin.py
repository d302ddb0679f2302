"""
Cool-skin parameterizations of the sea surface temperature.

The sea surface is cooled over a thin viscous sublayer by the net longwave,
sensible and latent heat losses, partly offset by the solar radiation
absorbed inside the sublayer. Both schemes return the temperature drop
across the sublayer (positive = skin cooler than bulk) and the updated
sublayer thickness; the solvers iterate them together with the surface
layer similarity equations.
"""

from typing import Tuple

import jax
import jax.numpy as jnp

from aerojax.constants import (
    grav, t0, stefan, emiss_water, rho_water, cp_water, nu_water, k_water, rho_air_ref
)


def _net_heat_loss(rho, cp, lv, u_star, t_star, q_star, ts_skin, lw_down):
    # Upward net longwave plus turbulent heat losses, positive out of the ocean
    rnl = emiss_water * (stefan * ts_skin**4 - lw_down)
    hsb = -rho * cp * u_star * t_star
    hlb = -rho * lv * u_star * q_star
    return rnl + hsb + hlb, hlb


def _solar_fraction(delta):
    # Fraction of the net solar radiation absorbed in the sublayer (Fairall et al., 1996)
    return 0.065 + 11.0 * delta - 6.6e-5 / delta * (1.0 - jnp.exp(-delta / 8.0e-4))


@jax.jit
def cool_skin_coare(
    sst: jnp.ndarray,
    ts_skin: jnp.ndarray,
    rho: jnp.ndarray,
    cp: jnp.ndarray,
    lv: jnp.ndarray,
    u_star: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray,
    sw_down: jnp.ndarray,
    lw_down: jnp.ndarray,
    delta: jnp.ndarray,
    albedo: float,
    delta_max: float
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Cool-skin temperature drop following COARE (Fairall et al., 1996).

    Args:
        sst: Bulk sea surface temperature [K]
        ts_skin: Current estimate of the skin temperature [K]
        rho: Air density [kg/m³]
        cp: Specific heat of air [J/K/kg]
        lv: Latent heat of vaporization [J/kg]
        u_star, t_star, q_star: Surface layer scales [m/s], [K], [kg/kg]
        sw_down: Downwelling shortwave radiation [W/m²]
        lw_down: Downwelling longwave radiation [W/m²]
        delta: Current sublayer thickness [m]
        albedo: Sea surface shortwave albedo [-]
        delta_max: Maximum sublayer thickness under stable conditions [m]

    Returns:
        Tuple of (temperature drop [K], sublayer thickness [m])
    """
    u_star = jnp.maximum(u_star, 1e-4)
    tsw = sst - t0
    alpha_w = 2.1e-5 * jnp.maximum(tsw + 3.2, 0.0)**0.79
    bigc = (16.0 * grav * cp_water * (rho_water * nu_water)**3
            / (k_water * k_water * rho * rho))

    q_out, hlb = _net_heat_loss(rho, cp, lv, u_star, t_star, q_star, ts_skin, lw_down)
    q_col = q_out - (1.0 - albedo) * sw_down * _solar_fraction(delta)

    alq = alpha_w * q_col + 0.026 * hlb * cp_water / lv
    xlamx = jnp.where(
        alq > 0.0,
        6.0 / (1.0 + (bigc * jnp.maximum(alq, 0.0) / u_star**4)**0.75)**(1.0 / 3.0),
        6.0
    )
    delta_new = xlamx * nu_water / (jnp.sqrt(rho / rho_water) * u_star)
    delta_new = jnp.where(alq > 0.0, delta_new, jnp.minimum(delta_new, delta_max))

    return q_col * delta_new / k_water, delta_new


@jax.jit
def cool_skin_ecmwf(
    sst: jnp.ndarray,
    ts_skin: jnp.ndarray,
    rho: jnp.ndarray,
    cp: jnp.ndarray,
    lv: jnp.ndarray,
    u_star: jnp.ndarray,
    t_star: jnp.ndarray,
    q_star: jnp.ndarray,
    sw_down: jnp.ndarray,
    lw_down: jnp.ndarray,
    delta: jnp.ndarray,
    albedo: float
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Cool-skin temperature drop following the IFS (cy40r1, eq. 8.151-8.155).

    Same arguments as cool_skin_coare, without delta_max: the IFS caps the
    thickness of a heated sublayer at 7 mm instead.

    Returns:
        Tuple of (temperature drop [K], sublayer thickness [m])
    """
    alpha_w = jnp.maximum(1e-5, 1e-5 * (sst - t0))
    u_star_w = jnp.maximum(u_star, 1e-4) * jnp.sqrt(rho_air_ref / rho_water)

    q_nsol, _ = _net_heat_loss(rho, cp, lv, u_star, t_star, q_star, ts_skin, lw_down)
    q_col = q_nsol - (1.0 - albedo) * sw_down * _solar_fraction(delta)

    # Saunders constant reduced under convective (cooling) conditions
    rcst = 16.0 * grav * rho_water * cp_water * nu_water**3 / (k_water * k_water)
    lambda_s = 6.0 / (1.0 + jnp.maximum(q_col * alpha_w * rcst / u_star_w**4, 0.0)**0.75)**(1.0 / 3.0)
    ztmp = nu_water / u_star_w
    delta_new = jnp.where(q_col > 0.0, lambda_s * ztmp, jnp.minimum(6.0 * ztmp, 0.007))

    return q_col * delta_new / k_water, delta_new
