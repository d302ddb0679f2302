"""
Selection of the bulk algorithm and of the cool-skin mode.
"""

import logging
from functools import partial
from typing import NamedTuple, Optional

from aerojax.errors import UnknownAlgorithmError
from aerojax.flux_types import RadiativeForcing
from aerojax.solvers import CoareSolver, EcmwfSolver, NcarSolver, TurbulentFluxSolver

logger = logging.getLogger(__name__)

SOLVER_REGISTRY = {
    'coare': partial(CoareSolver, version='3.0'),
    'coare35': partial(CoareSolver, version='3.5'),
    'ncar': NcarSolver,
    'ecmwf': EcmwfSolver,
}


class DispatchPlan(NamedTuple):
    """Solver selected for a call and whether it runs its cool-skin scheme."""

    solver: TurbulentFluxSolver
    use_skin: bool


def available_algorithms() -> list:
    return list(SOLVER_REGISTRY.keys())


def get_solver(algorithm: str, n_iterations: int = 10) -> TurbulentFluxSolver:
    """
    Build the solver of a bulk algorithm from its case-insensitive name.

    Raises:
        UnknownAlgorithmError: if no solver is registered under that name
    """
    key = str(algorithm).strip().lower()
    try:
        factory = SOLVER_REGISTRY[key]
    except KeyError:
        raise UnknownAlgorithmError(algorithm, available_algorithms()) from None
    return factory(n_iterations=n_iterations)


def use_cool_skin(solver: TurbulentFluxSolver, forcing: Optional[RadiativeForcing]) -> bool:
    """
    Cool skin runs only with both radiative fields and a solver that supports it.

    Forcing supplied to a solver without a cool-skin scheme is ignored.
    """
    if forcing is None:
        return False
    if not solver.supports_cool_skin:
        logger.debug("Radiative forcing ignored: '%s' has no cool-skin scheme", solver.name)
        return False
    return True


def resolve(algorithm: str, forcing: Optional[RadiativeForcing] = None,
            n_iterations: int = 10) -> DispatchPlan:
    """Select the solver for an algorithm name and decide the cool-skin mode."""
    solver = get_solver(algorithm, n_iterations)
    use_skin = use_cool_skin(solver, forcing)
    if use_skin:
        logger.info("Will use the cool-skin scheme of %s", solver.name)
    return DispatchPlan(solver=solver, use_skin=use_skin)
