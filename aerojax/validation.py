"""
Plausibility checks of the input fields.

Every physical field is checked against a range of plausible values before
any flux computation. A field fails when its maximum exceeds the upper bound,
its minimum is below the lower bound, or its (masked) mean lies outside the
range. Checks run eagerly on concrete arrays and raise on the first failure.
"""

import logging
from typing import NamedTuple, Optional

import jax.numpy as jnp

from aerojax.errors import (
    InputRangeError, UnknownFieldError, DegenerateMaskError, GridShapeError
)
from aerojax.flux_types import AtmosphericState, RadiativeForcing

logger = logging.getLogger(__name__)


class FieldBounds(NamedTuple):
    """Inclusive range of plausible values for one field."""

    vmin: float
    vmax: float
    unit: str


FIELD_BOUNDS = {
    'sst':    FieldBounds(270.0, 313.0, 'K'),
    't_air':  FieldBounds(220.0, 323.0, 'K'),
    'q_air':  FieldBounds(0.0, 0.08, 'kg/kg'),
    'slp':    FieldBounds(87000.0, 108000.0, 'Pa'),
    'u10':    FieldBounds(0.0, 50.0, 'm/s'),
    'v10':    FieldBounds(0.0, 50.0, 'm/s'),
    'rad_sw': FieldBounds(0.0, 1500.0, 'W/m^2'),
    'rad_lw': FieldBounds(0.0, 700.0, 'W/m^2'),
}


def get_field_bounds(field: str) -> FieldBounds:
    try:
        return FIELD_BOUNDS[field]
    except KeyError:
        raise UnknownFieldError(field, list(FIELD_BOUNDS.keys())) from None


def masked_mean(field: str, values: jnp.ndarray, mask: Optional[jnp.ndarray] = None) -> float:
    """
    Mean of a field, weighted by a cell mask (1 = use the cell, 0 = ignore it).

    Raises:
        DegenerateMaskError: if the mask has zero total weight
    """
    if mask is None:
        mask = jnp.ones_like(values)
    mask = jnp.asarray(mask, dtype=values.dtype)
    if mask.shape != values.shape:
        raise GridShapeError(f"{field} mask", mask.shape, values.shape)
    weight = float(jnp.sum(mask))
    if weight <= 0.0:
        raise DegenerateMaskError(field)
    return float(jnp.sum(values * mask)) / weight


def check_unit_consistency(field: str, values: jnp.ndarray,
                           mask: Optional[jnp.ndarray] = None) -> None:
    """
    Check that a field lies within its plausible range.

    Args:
        field: Name of the field, a key of FIELD_BOUNDS
        values: Field values (nx, ny)
        mask: Optional cell mask (nx, ny), cells with 0 are left out of the mean

    Raises:
        UnknownFieldError: if the field has no bounds
        InputRangeError: if max, min or mean violate the bounds
        DegenerateMaskError: if the mask has zero total weight
    """
    bounds = get_field_bounds(field)
    values = jnp.asarray(values)

    if not bool(jnp.all(jnp.isfinite(values))):
        raise InputRangeError(field, bounds.unit, "contains non-finite values")

    vmax = float(jnp.max(values))
    vmin = float(jnp.min(values))
    zmean = masked_mean(field, values, mask)

    if vmax > bounds.vmax:
        raise InputRangeError(field, bounds.unit,
                              f"maximum {vmax:g} above {bounds.vmax:g}")
    if vmin < bounds.vmin:
        raise InputRangeError(field, bounds.unit,
                              f"minimum {vmin:g} below {bounds.vmin:g}")
    if zmean < bounds.vmin or zmean > bounds.vmax:
        raise InputRangeError(field, bounds.unit,
                              f"mean {zmean:g} outside [{bounds.vmin:g}, {bounds.vmax:g}]")


def check_shapes(fields: dict) -> tuple:
    """Check that all grids are co-dimensioned and return their common shape."""
    shape = None
    for name, values in fields.items():
        field_shape = jnp.shape(values)
        if shape is None:
            shape = field_shape
        elif field_shape != shape:
            raise GridShapeError(name, field_shape, shape)
    return shape


def validate_inputs(
    sst: jnp.ndarray,
    atmosphere: AtmosphericState,
    forcing: Optional[RadiativeForcing] = None,
    mask: Optional[jnp.ndarray] = None
) -> None:
    """
    Validate every input grid of a flux computation.

    Radiative forcing is only checked when it is supplied. Wind components are
    checked on their magnitude.
    """
    fields = {
        'sst': sst,
        't_air': atmosphere.temperature,
        'q_air': atmosphere.humidity,
        'slp': atmosphere.pressure,
        'u10': jnp.abs(atmosphere.u_wind),
        'v10': jnp.abs(atmosphere.v_wind),
    }
    if forcing is not None:
        fields['rad_sw'] = forcing.sw_down
        fields['rad_lw'] = forcing.lw_down

    shape = check_shapes(fields)
    logger.debug("Validating %d fields of shape %s", len(fields), shape)

    for name, values in fields.items():
        check_unit_consistency(name, values, mask)
