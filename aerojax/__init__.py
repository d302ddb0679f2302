"""
aerojax: turbulent air-sea fluxes from bulk formulae, written in JAX.
"""

from aerojax.compute import aerobulk_compute, make_forcing
from aerojax.dispatch import available_algorithms, get_solver
from aerojax.errors import (
    AeroBulkError, DegenerateMaskError, GridShapeError, InputRangeError,
    UnknownAlgorithmError, UnknownFieldError
)
from aerojax.flux_types import (
    AtmosphericState, BulkParameters, FluxFields, MeasurementHeights,
    RadiativeForcing, SurfaceState
)
from aerojax.io import fluxes_to_xarray

__all__ = [
    'aerobulk_compute', 'make_forcing', 'available_algorithms', 'get_solver',
    'AeroBulkError', 'DegenerateMaskError', 'GridShapeError', 'InputRangeError',
    'UnknownAlgorithmError', 'UnknownFieldError',
    'AtmosphericState', 'BulkParameters', 'FluxFields', 'MeasurementHeights',
    'RadiativeForcing', 'SurfaceState',
    'fluxes_to_xarray',
]
