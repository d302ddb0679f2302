"""
Assembly of wind stress and turbulent heat fluxes from the solver output.
"""

from functools import partial

import jax
import jax.numpy as jnp

from aerojax.constants import grav
from aerojax.flux_types import FluxFields, SolverOutput
from aerojax.thermodynamics import cp_air, lvap, rho_air


@jax.jit
def air_density_at_height(
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    slp: jnp.ndarray,
    zu: float
) -> jnp.ndarray:
    """
    Density of air at the wind measurement height.

    The density is first estimated at sea-level pressure, then recomputed at
    the hydrostatic pressure of height zu.

    Args:
        t_zu: Potential temperature at zu [K]
        q_zu: Specific humidity at zu [kg/kg]
        slp: Sea-level pressure [Pa]
        zu: Wind measurement height [m]

    Returns:
        Air density [kg/m³]
    """
    rho = rho_air(t_zu, q_zu, slp)
    p_zu = slp - rho * grav * zu
    return rho_air(t_zu, q_zu, p_zu)


@partial(jax.jit, static_argnames=['upward_positive'])
def compute_bulk_fluxes(
    cd: jnp.ndarray,
    ch: jnp.ndarray,
    ce: jnp.ndarray,
    rho: jnp.ndarray,
    t_zu: jnp.ndarray,
    q_zu: jnp.ndarray,
    ts: jnp.ndarray,
    qs: jnp.ndarray,
    u_wind: jnp.ndarray,
    v_wind: jnp.ndarray,
    u_blk: jnp.ndarray,
    upward_positive: bool = True
):
    """
    Bulk formulae for wind stress and turbulent heat fluxes.

    Args:
        cd, ch, ce: Transfer coefficients for momentum, heat and moisture [-]
        rho: Air density at zu [kg/m³]
        t_zu, q_zu: Potential temperature [K] and specific humidity [kg/kg] at zu
        ts, qs: Surface temperature [K] and specific humidity [kg/kg]
        u_wind, v_wind: Wind components at zu [m/s]
        u_blk: Bulk wind speed [m/s]
        upward_positive: Heat fluxes positive from ocean to atmosphere if True,
            positive into the ocean otherwise

    Returns:
        Tuple of (latent_heat, sensible_heat, tau_x, tau_y)
    """
    tau_x = cd * rho * u_wind * u_blk
    tau_y = cd * rho * v_wind * u_blk

    latent_heat = ce * rho * lvap(ts) * (q_zu - qs) * u_blk
    sensible_heat = ch * rho * cp_air(q_zu) * (t_zu - ts) * u_blk
    if upward_positive:
        latent_heat = -latent_heat
        sensible_heat = -sensible_heat

    return latent_heat, sensible_heat, tau_x, tau_y


def assemble_fluxes(
    solver_output: SolverOutput,
    u_wind: jnp.ndarray,
    v_wind: jnp.ndarray,
    slp: jnp.ndarray,
    zu: float,
    return_skin: bool = False,
    upward_positive: bool = True
) -> FluxFields:
    """Combine solver output and air density into the final flux fields."""
    rho = air_density_at_height(solver_output.t_zu, solver_output.q_zu, slp, zu)
    coeffs = solver_output.coefficients
    surface = solver_output.surface

    latent_heat, sensible_heat, tau_x, tau_y = compute_bulk_fluxes(
        coeffs.momentum, coeffs.heat, coeffs.moisture, rho,
        solver_output.t_zu, solver_output.q_zu,
        surface.temperature, surface.humidity,
        u_wind, v_wind, solver_output.bulk_wind,
        upward_positive=upward_positive
    )
    return FluxFields(
        latent_heat=latent_heat,
        sensible_heat=sensible_heat,
        tau_x=tau_x,
        tau_y=tau_y,
        skin_temperature=surface.temperature if return_skin else None,
    )
