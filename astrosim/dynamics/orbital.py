"""
Orbital Elements
================

Osculating Keplerian ellipses and analytic two-body position evaluation.

Coordinate convention: the periapsis lies along +y of the orbital plane and
x points "downwards", so a prograde orbit moves from +y towards -x.
"""

import math
import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from ..core.errors import DomainError
from .attitude import q_mul, q_rot, rotate_vector, Y_AXIS, Z_AXIS
from .kepler import (
    DEFAULT_MAX_ITERATIONS,
    DEFAULT_TOLERANCE,
    eccentric_anomaly,
    eccentricity_from_axes,
    mean_motion,
    orbital_period,
)


def orbital_quaternion(long_asc: float, inc: float, arg_peri: float) -> np.ndarray:
    """
    Orientation of the orbital plane, Rz(long_asc)·Ry(inc)·Rz(arg_peri).

    Args:
        long_asc: Longitude of ascending node [rad]
        inc: Inclination [rad]
        arg_peri: Argument of periapsis [rad]
    """
    q = q_mul(q_rot(Z_AXIS, long_asc), q_rot(Y_AXIS, inc))
    return q_mul(q, q_rot(Z_AXIS, arg_peri))


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian elements of an osculating elliptic orbit.

    Angles are given in degrees and stored in radians. The orientation
    quaternion is derived once; the elements are never re-fit.
    """
    ecc: float
    a: float
    inc: float = 0.0
    long_asc: float = 0.0
    arg_peri: float = 0.0
    mean_anomaly_epoch: float = 0.0
    b: float = field(init=False)
    q_orbit: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        values = (self.ecc, self.a, self.inc, self.long_asc,
                  self.arg_peri, self.mean_anomaly_epoch)
        if not all(math.isfinite(v) for v in values):
            raise DomainError(f"Orbital elements must be finite: {values}")
        if not 0.0 <= self.ecc < 1.0:
            raise DomainError(f"Eccentricity {self.ecc} outside [0, 1)")
        if self.a <= 0.0:
            raise DomainError(f"Semi-major axis must be positive, got {self.a}")

        set_ = object.__setattr__
        set_(self, 'ecc', float(self.ecc))
        set_(self, 'a', float(self.a))
        set_(self, 'inc', math.radians(self.inc))
        set_(self, 'long_asc', math.radians(self.long_asc))
        set_(self, 'arg_peri', math.radians(self.arg_peri))
        set_(self, 'mean_anomaly_epoch', math.radians(self.mean_anomaly_epoch))
        set_(self, 'b', self.a * math.sqrt(1.0 - self.ecc * self.ecc))

        q = orbital_quaternion(self.long_asc, self.inc, self.arg_peri)
        q.setflags(write=False)
        set_(self, 'q_orbit', q)

    @classmethod
    def from_axes(cls,
                  a: float,
                  b: float,
                  inc: float = 0.0,
                  long_asc: float = 0.0,
                  arg_peri: float = 0.0,
                  mean_anomaly_epoch: float = 0.0) -> 'OrbitalElements':
        """Create elements from semi-major and semi-minor axes."""
        if not (a > 0.0 and 0.0 < b <= a):
            raise DomainError(f"Invalid ellipse axes a={a}, b={b}")
        return cls(eccentricity_from_axes(a, b), a, inc, long_asc,
                   arg_peri, mean_anomaly_epoch)

    @property
    def periapsis(self) -> float:
        """Periapsis distance from the focus."""
        return self.a * (1.0 - self.ecc)

    @property
    def apoapsis(self) -> float:
        """Apoapsis distance from the focus."""
        return self.a * (1.0 + self.ecc)

    def period(self, gm: float) -> float:
        """Orbital period around a body with gravitational parameter gm."""
        return orbital_period(self.a, gm)


def _eccentric_anomaly(elements: OrbitalElements, gm: float, t: float,
                       tolerance: float, max_iterations: int):
    n = mean_motion(gm, elements.a)
    E = eccentric_anomaly(elements.ecc, n, t,
                          mean_anomaly_epoch=elements.mean_anomaly_epoch,
                          tolerance=tolerance,
                          max_iterations=max_iterations)
    return n, E


def position_at_time(elements: OrbitalElements,
                     gm: float,
                     t: float,
                     tolerance: float = DEFAULT_TOLERANCE,
                     max_iterations: int = DEFAULT_MAX_ITERATIONS) -> np.ndarray:
    """
    Position relative to the orbited body at time t.

    Args:
        elements: Orbital elements
        gm: Gravitational parameter of the orbited system
        t: Time since epoch [s]

    Returns:
        Offset from the focus [m]
    """
    _, E = _eccentric_anomaly(elements, gm, t, tolerance, max_iterations)

    # y is pointing in the direction of the periapsis
    y = float(elements.a * np.cos(E) - elements.a * elements.ecc)
    x = float(-elements.b * np.sin(E))

    return rotate_vector(np.array([x, y, 0.0]), elements.q_orbit)


def orbit_normal(elements: OrbitalElements) -> np.ndarray:
    """Unit angular momentum direction of the orbit."""
    return rotate_vector(Z_AXIS, elements.q_orbit)


def velocity_estimate(elements: OrbitalElements,
                      gm: float,
                      t: float,
                      period: Optional[float] = None) -> np.ndarray:
    """
    Approximate orbital velocity for display and coasting.

    Direction is the orbit normal crossed with the current position and the
    magnitude is the mean orbital speed 2πa/T. This ignores the speed
    variation along eccentric orbits; use velocity_at_time for the exact
    two-body vector.

    Args:
        elements: Orbital elements
        gm: Gravitational parameter of the orbited system
        t: Time since epoch [s]
        period: Orbital period [s], derived from gm when omitted
    """
    if period is None:
        period = elements.period(gm)
    speed = (2.0 * np.pi * elements.a) / period

    current = position_at_time(elements, gm, t)
    direction = np.cross(orbit_normal(elements), current)
    return direction / np.linalg.norm(direction) * speed


def velocity_at_time(elements: OrbitalElements,
                     gm: float,
                     t: float,
                     tolerance: float = DEFAULT_TOLERANCE,
                     max_iterations: int = DEFAULT_MAX_ITERATIONS) -> np.ndarray:
    """
    Exact two-body velocity relative to the orbited body.

    Differentiates the planar position with dE/dt = n / (1 - e·cos E).
    """
    n, E = _eccentric_anomaly(elements, gm, t, tolerance, max_iterations)
    e_dot = float(n / (1 - elements.ecc * np.cos(E)))

    vy = float(-elements.a * np.sin(E)) * e_dot
    vx = float(-elements.b * np.cos(E)) * e_dot

    return rotate_vector(np.array([vx, vy, 0.0]), elements.q_orbit)
