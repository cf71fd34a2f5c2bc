"""
Simulation Errors
=================

Exception and warning types raised by the orbital engine.
"""


class SimulationError(Exception):
    """Base class for orbital engine errors."""


class ConfigurationError(SimulationError, ValueError):
    """Malformed or missing required field while building the world."""


class DomainError(SimulationError, ValueError):
    """Orbital elements outside the elliptic domain."""


class DegenerateGeometryError(SimulationError, ArithmeticError):
    """Geometry with no defined direction, e.g. coincident bodies."""


class ConvergenceWarning(RuntimeWarning):
    """Kepler solver hit its iteration cap; the last estimate is used."""
