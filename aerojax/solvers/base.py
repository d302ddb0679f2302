"""
Common interface of the turbulent flux solvers.

A solver takes the measurement heights, the bulk surface state, potential
temperature and humidity of air at zt and the scalar wind speed at zu, and
returns the bulk transfer coefficients, temperature and humidity adjusted to
zu, the bulk wind speed, and the surface state (skin values when the
cool-skin scheme is active). Every solver iterates a fixed number of times.
"""

import abc
from typing import Optional

import jax.numpy as jnp

from aerojax.flux_types import (
    BulkParameters, MeasurementHeights, RadiativeForcing, SolverOutput, SurfaceState
)


class TurbulentFluxSolver(abc.ABC):
    """Base class of the interchangeable bulk algorithms."""

    name: str = ''
    supports_cool_skin: bool = False

    def __init__(self, n_iterations: int = 10):
        if n_iterations < 1:
            raise ValueError(f"Invalid number of iterations: {n_iterations}. Must be at least 1.")
        self.n_iterations = int(n_iterations)

    def solve(
        self,
        heights: MeasurementHeights,
        surface: SurfaceState,
        theta_zt: jnp.ndarray,
        q_zt: jnp.ndarray,
        wind_speed: jnp.ndarray,
        use_skin: bool = False,
        slp: Optional[jnp.ndarray] = None,
        forcing: Optional[RadiativeForcing] = None,
        params: Optional[BulkParameters] = None
    ) -> SolverOutput:
        """
        Solve the surface layer similarity equations.

        Args:
            heights: Measurement heights of temperature/humidity and wind
            surface: Bulk sea surface temperature and humidity
            theta_zt: Potential temperature of air at zt [K]
            q_zt: Specific humidity of air at zt [kg/kg]
            wind_speed: Scalar wind speed at zu [m/s]
            use_skin: Apply the cool-skin correction (needs slp and forcing)
            slp: Sea-level pressure [Pa]
            forcing: Downwelling shortwave and longwave radiation
            params: Bulk parameters (defaults if None)

        Returns:
            SolverOutput with coefficients at zu and the final surface state
        """
        if use_skin:
            if not self.supports_cool_skin:
                raise ValueError(f"Bulk algorithm '{self.name}' has no cool-skin scheme")
            if slp is None or forcing is None:
                raise ValueError("The cool-skin scheme needs sea-level pressure and radiative forcing")
        if params is None:
            params = BulkParameters.default()
        return self._solve(heights, surface, theta_zt, q_zt, wind_speed,
                           use_skin, slp, forcing, params)

    @abc.abstractmethod
    def _solve(self, heights, surface, theta_zt, q_zt, wind_speed,
               use_skin, slp, forcing, params) -> SolverOutput:
        """Algorithm-specific implementation of solve."""

    def __repr__(self):
        return f"{self.__class__.__name__}(name={self.name!r}, n_iterations={self.n_iterations})"
