"""
Turbulent flux solvers

This package contains the interchangeable bulk algorithms that solve the
surface layer similarity equations for the bulk transfer coefficients.
"""

from .base import TurbulentFluxSolver
from .coare import CoareSolver, turb_coare
from .ncar import NcarSolver, turb_ncar
from .ecmwf import EcmwfSolver, turb_ecmwf

__all__ = [
    # Interface
    'TurbulentFluxSolver',

    # Algorithms
    'CoareSolver', 'NcarSolver', 'EcmwfSolver',

    # Kernels
    'turb_coare', 'turb_ncar', 'turb_ecmwf',
]
