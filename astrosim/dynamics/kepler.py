"""
Kepler Solver
=============

Two-body timing relations and the eccentric anomaly solver.

Units only need to be consistent: GM in m³/s² with the semi-major axis in
metres gives mean motion in rad/s and periods in seconds.
"""

import logging
import warnings

import numpy as np

from ..core.errors import ConvergenceWarning


logger = logging.getLogger(__name__)

# 7.37 mm accuracy for an object at the distance of Pluto
DEFAULT_TOLERANCE = 1e-12  # rad
DEFAULT_MAX_ITERATIONS = 10


def mean_motion(gm: float, a: float) -> np.longdouble:
    """
    Mean motion around a dominating body.

    Args:
        gm: Gravitational parameter of the orbited body
        a: Semi-major axis

    Returns:
        Mean motion [rad per time unit of gm]
    """
    a = np.longdouble(a)
    return np.sqrt(np.longdouble(gm) / (a * a * a))


def mean_motion_from_period(period: float) -> float:
    """Mean motion from an orbital period."""
    return (2.0 * np.pi) / period


def orbital_period(a: float, gm: float) -> float:
    """
    Orbital period when one body dominates the system.

    Args:
        a: Semi-major axis of orbit
        gm: Gravitational parameter of orbited body
    """
    return float(2.0 * np.pi * np.sqrt((a * a * a) / gm))


def semi_minor_axis(a: float, ecc: float) -> float:
    """Semi-minor axis of an ellipse."""
    return a * np.sqrt(1.0 - ecc * ecc)


def eccentricity_from_axes(a: float, b: float) -> float:
    """Eccentricity from the semi-major and semi-minor axes."""
    return float(np.sqrt((a * a - b * b) / (a * a)))


def eccentric_anomaly_step(E_i, ecc, m):
    """
    Next Newton-Raphson estimate of the eccentric anomaly.

    Args:
        E_i: Eccentric anomaly of previous step
        ecc: Eccentricity of orbital ellipse
        m: Mean anomaly
    """
    return E_i - ((E_i - ecc * np.sin(E_i) - m) / (1 - ecc * np.cos(E_i)))


def eccentric_anomaly(ecc: float,
                      n: float,
                      t: float,
                      mean_anomaly_epoch: float = 0.0,
                      tolerance: float = DEFAULT_TOLERANCE,
                      max_iterations: int = DEFAULT_MAX_ITERATIONS) -> np.longdouble:
    """
    Eccentric anomaly at time t, solving Kepler's equation E - e·sin(E) = M.

    The iteration is seeded with the mean anomaly and runs in long double.
    When the estimate has not settled within ``max_iterations`` updates a
    ConvergenceWarning is issued and the last estimate returned.

    Args:
        ecc: Eccentricity of orbit
        n: Mean motion around object
        t: Time since epoch, compatible with n
        mean_anomaly_epoch: Mean anomaly at t = 0 [rad]
        tolerance: Convergence threshold on successive estimates [rad]
        max_iterations: Cap on Newton-Raphson updates

    Returns:
        Eccentric anomaly [rad]
    """
    ecc = np.longdouble(ecc)
    m = np.longdouble(mean_anomaly_epoch) + np.longdouble(n) * np.longdouble(t)

    # Solve within one revolution, whole revolutions are added back after
    two_pi = 2 * np.arccos(np.longdouble(-1))
    revolutions = np.floor(m / two_pi) * two_pi
    m = m - revolutions

    E_i = m
    for i in range(1, max_iterations + 1):
        E_next = eccentric_anomaly_step(E_i, ecc, m)
        if abs(E_next - E_i) < tolerance:
            logger.debug("ecc anomaly solved in %d iters", i)
            return E_next + revolutions
        E_i = E_next

    err = abs(eccentric_anomaly_step(E_i, ecc, m) - E_i)
    warnings.warn(
        f"ecc anomaly did not converge in {max_iterations} iters, err = {float(err):.16f}",
        ConvergenceWarning,
        stacklevel=2,
    )
    return E_i + revolutions
