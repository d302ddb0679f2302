"""
Exceptions raised when a grid-wide flux computation has to be aborted.

Every failure aborts the whole call; no partial outputs are produced.
"""

from typing import Optional


class AeroBulkError(ValueError):
    """Base class for input and configuration failures."""


class InputRangeError(AeroBulkError):
    """A physical field lies outside its plausible range."""

    def __init__(self, field: str, unit: str, reason: str):
        self.field = field
        self.unit = unit
        self.reason = reason
        super().__init__(
            f"Field '{field}' does not seem to be in {unit}: {reason}"
        )


class UnknownFieldError(AeroBulkError):
    """Validation was requested for a field with no bound-table entry."""

    def __init__(self, field: str, known: Optional[list] = None):
        self.field = field
        message = f"Unknown field '{field}' in validation"
        if known:
            message += f". Must be one of: {known}"
        super().__init__(message)


class DegenerateMaskError(AeroBulkError):
    """The validation mask has zero total weight, so the mean is undefined."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Cannot validate field '{field}': mask has zero total weight"
        )


class GridShapeError(AeroBulkError):
    """Input grids are not co-dimensioned."""

    def __init__(self, field: str, shape: tuple, expected: tuple):
        self.field = field
        super().__init__(
            f"Field '{field}' has shape {shape}, expected {expected}"
        )


class UnknownAlgorithmError(AeroBulkError):
    """The requested bulk algorithm is not available."""

    def __init__(self, algorithm: str, known: list):
        self.algorithm = algorithm
        super().__init__(
            f"Bulk algorithm '{algorithm}' is unknown. Must be one of: {known}"
        )
