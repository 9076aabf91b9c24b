"""Error hierarchy for the grid-reference engine.

The engine raises these and never logs or retries; recovery belongs to the
caller (batch layer, CLI, UI).
"""

from __future__ import annotations


class OsGridError(Exception):
    """Base error for grid-reference, projection and datum operations."""


class ParseError(OsGridError, ValueError):
    """Grid-reference text is malformed or names a square outside the grid."""


class RangeError(OsGridError, ValueError):
    """A GridRef cannot be formatted: outside the lettered squares, or bad precision."""


class ConvergenceError(OsGridError, ArithmeticError):
    """An iterative solve did not converge within its iteration cap.

    Attributes:
        iterations: Number of iterations performed before giving up
        residual: Last residual (metres or radians, depending on the solver)
    """

    def __init__(self, message: str, iterations: int, residual: float) -> None:
        self.iterations = iterations
        self.residual = residual
        super().__init__(f"{message} (after {iterations} iterations, residual {residual!r})")


class DatumMismatchError(OsGridError, ValueError):
    """A point's datum or ellipsoid does not match what the operation assumes."""
