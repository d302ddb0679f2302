"""
Grid-wide computation of turbulent air-sea fluxes.

Single entry point of the package: checks the algorithm name, validates the
input fields, derives the auxiliary fields, runs the selected bulk algorithm
and assembles wind stress, latent and sensible heat fluxes.
"""

import logging
from typing import Optional

import jax.numpy as jnp

from aerojax.assembly import assemble_fluxes
from aerojax.dispatch import resolve
from aerojax.errors import AeroBulkError
from aerojax.flux_types import (
    AtmosphericState, BulkParameters, FluxFields, MeasurementHeights, RadiativeForcing
)
from aerojax.preprocessing import preprocess
from aerojax.validation import validate_inputs

logger = logging.getLogger(__name__)


def _as_grid(values):
    return jnp.asarray(values, dtype=float)


def make_forcing(rad_sw=None, rad_lw=None) -> Optional[RadiativeForcing]:
    """Radiative forcing when both fields are given, None otherwise."""
    if rad_sw is None and rad_lw is None:
        return None
    if rad_sw is None or rad_lw is None:
        missing = 'rad_sw' if rad_sw is None else 'rad_lw'
        logger.warning("Radiative forcing ignored: '%s' is missing", missing)
        return None
    return RadiativeForcing(sw_down=rad_sw, lw_down=rad_lw)


def aerobulk_compute(
    algorithm: str,
    zt: float,
    zu: float,
    sst: jnp.ndarray,
    t_zt: jnp.ndarray,
    q_zt: jnp.ndarray,
    u_zu: jnp.ndarray,
    v_zu: jnp.ndarray,
    slp: jnp.ndarray,
    rad_sw: Optional[jnp.ndarray] = None,
    rad_lw: Optional[jnp.ndarray] = None,
    return_skin: bool = False,
    mask: Optional[jnp.ndarray] = None,
    params: Optional[BulkParameters] = None,
    n_iterations: int = 10,
    upward_positive: bool = True
) -> FluxFields:
    """
    Compute turbulent air-sea fluxes over a grid.

    Args:
        algorithm: Bulk algorithm, one of 'coare', 'coare35', 'ncar', 'ecmwf'
            (case-insensitive)
        zt: Height of air temperature and humidity [m]
        zu: Height of wind [m]
        sst: Bulk sea surface temperature [K]
        t_zt: Absolute air temperature at zt [K]
        q_zt: Specific humidity of air at zt [kg/kg]
        u_zu: Zonal wind at zu [m/s]
        v_zu: Meridional wind at zu [m/s]
        slp: Mean sea-level pressure [Pa]
        rad_sw: Downwelling shortwave radiation [W/m²] (optional)
        rad_lw: Downwelling longwave radiation [W/m²] (optional)
        return_skin: Fill the skin temperature of the result
        mask: Cell mask for the validation means (1 = ocean, 0 = ignore)
        params: Bulk parameters (defaults if None)
        n_iterations: Number of iterations of the bulk algorithm
        upward_positive: Sign convention of the heat fluxes

    Returns:
        FluxFields with latent and sensible heat fluxes [W/m²], wind stress
        components [N/m²] and, if requested, the skin temperature [K]. The skin
        temperature equals the bulk SST unless the cool-skin scheme ran, which
        needs both radiative fields and an algorithm other than 'ncar'.

    Raises:
        UnknownAlgorithmError: before any array work if the algorithm is unknown
        InputRangeError, UnknownFieldError, DegenerateMaskError, GridShapeError:
            if the inputs fail validation
    """
    forcing = make_forcing(rad_sw, rad_lw)
    plan = resolve(algorithm, forcing, n_iterations=n_iterations)
    if forcing is not None:
        forcing = RadiativeForcing(*(_as_grid(values) for values in forcing))

    heights = MeasurementHeights(zt=float(zt), zu=float(zu))
    if heights.zt <= 0.0 or heights.zu <= 0.0:
        raise AeroBulkError(f"Invalid measurement heights: zt={zt}, zu={zu}. Must be positive.")
    sst = _as_grid(sst)
    atmosphere = AtmosphericState(
        temperature=_as_grid(t_zt),
        humidity=_as_grid(q_zt),
        u_wind=_as_grid(u_zu),
        v_wind=_as_grid(v_zu),
        pressure=_as_grid(slp),
    )
    validate_inputs(sst, atmosphere, forcing, mask)

    if params is None:
        params = BulkParameters.default()

    state = preprocess(heights, atmosphere, sst)
    solver_output = plan.solver.solve(
        heights, state.surface, state.theta_zt, atmosphere.humidity, state.wind_speed,
        use_skin=plan.use_skin,
        slp=atmosphere.pressure,
        forcing=forcing if plan.use_skin else None,
        params=params,
    )
    return assemble_fluxes(
        solver_output, atmosphere.u_wind, atmosphere.v_wind, atmosphere.pressure,
        heights.zu, return_skin=return_skin, upward_positive=upward_positive
    )
