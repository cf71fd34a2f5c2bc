"""
Astronomical Bodies
===================

Gravitationally dominant bodies: stars, planets and moons.
"""

import math
import numpy as np
from typing import Any, Optional

from .config import CONSTANTS
from .errors import ConfigurationError
from .lwcoord import LargeWorldCoordinate
from ..dynamics.attitude import q_identity, q_mul, q_rot, X_AXIS, Z_AXIS
from ..dynamics.orbital import OrbitalElements


DEFAULT_FIXATION_PERIOD = 100


def _require_number(name: str, field_name: str, value) -> float:
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name}: {field_name} must be numeric, got {value!r}") from None
    return value


class AstroBody:
    """
    Physical body dominating a gravity well.

    Manages:
    - Mass and gravitational parameter
    - Shape (equatorial radius, flattening)
    - Rotation (obliquity, sidereal period)
    - Orbital elements (absent for the system root)
    - Current position, orientation and velocity
    - Orbit fixation countdown
    """

    def __init__(self,
                 name: str,
                 mass: float,
                 gm: float = math.nan,
                 radius: float = 0.0,
                 flattening: float = 0.0,
                 obliquity: float = 0.0,
                 sidereal_period: float = 0.0,
                 elements: Optional[OrbitalElements] = None,
                 position: Optional[LargeWorldCoordinate] = None,
                 fixation_period: int = DEFAULT_FIXATION_PERIOD):
        """
        Initialize body.

        Args:
            name: Body name, unique among siblings
            mass: Mass [kg]
            gm: Gravitational parameter [m³/s²]; NaN derives it from mass
            radius: Equatorial radius [m]
            flattening: Polar flattening (0 for a sphere)
            obliquity: Axial tilt [deg]
            sidereal_period: Rotation period relative to fixed stars [s]
            elements: Orbital elements, None for the root body
            position: Initial position
            fixation_period: Ticks between exact orbit solves
        """
        if not name:
            raise ConfigurationError("Body name must not be empty")
        mass = _require_number(name, "mass", mass)
        gm = _require_number(name, "gm", gm)
        radius = _require_number(name, "radius", radius)
        flattening = _require_number(name, "flattening", flattening)
        obliquity = _require_number(name, "obliquity", obliquity)
        sidereal_period = _require_number(name, "sidereal period", sidereal_period)

        if not math.isfinite(mass) or mass < 0.0:
            raise ConfigurationError(f"{name}: mass must be finite and non-negative, got {mass}")
        if not math.isfinite(gm):
            gm = mass * CONSTANTS.gravitational_constant
        if not gm > 0.0:
            raise ConfigurationError(f"{name}: GM must be positive, got {gm}")
        if not 0.0 <= flattening < 1.0:
            raise ConfigurationError(f"{name}: flattening {flattening} outside [0, 1)")
        if fixation_period < 1:
            raise ConfigurationError(f"{name}: fixation period must be positive")

        self.name = name
        self.mass = mass
        self.gm = gm
        self.eq_radius = radius

        # flattening = ver(angEcc) = 1 - cos(angEcc)
        self.flattening = flattening
        self.ang_ecc = math.acos(1.0 - flattening)
        self.obliquity = math.radians(obliquity)
        self.sidereal_period = sidereal_period

        self.elements = elements

        # State
        self.position = position.copy() if position is not None else LargeWorldCoordinate()
        self.relative_position = np.zeros(3)  # offset from the orbited body
        self.orientation = q_rot(X_AXIS, self.obliquity)
        self.velocity = np.zeros(3)  # relative to the orbited body

        # Orbit smoothing: exact solve when the countdown hits zero
        self.fixation_period = int(fixation_period)
        self.fixation_countdown = 0

        # Render collaborators
        self.drawable: Optional[Any] = None
        self.light_source: Optional[Any] = None

    @property
    def q_orbit(self) -> np.ndarray:
        """Orbit plane orientation, identity for the root body."""
        if self.elements is None:
            return q_identity()
        return self.elements.q_orbit

    @property
    def polar_radius(self) -> float:
        """Polar radius derived from the flattening."""
        return self.eq_radius * (1.0 - self.flattening)

    def sidereal_orientation_at_time(self, t: float) -> np.ndarray:
        """
        Body orientation at time t.

        Args:
            t: Time since epoch [s]

        Returns:
            q_orbit · Rx(obliquity) · Rz(2π·frac(t / sidereal period))
        """
        q = q_mul(self.q_orbit, q_rot(X_AXIS, self.obliquity))
        if self.sidereal_period == 0.0:
            return q
        rot_frac = math.fmod(t / self.sidereal_period, 1.0)
        return q_mul(q, q_rot(Z_AXIS, rot_frac * 2.0 * math.pi))

    def reset_fixation(self):
        """Force an exact orbit solve on the next update."""
        self.fixation_countdown = 0

    def global_position(self) -> np.ndarray:
        """Absolute position as a float vector [m]."""
        return self.position.global_position()

    def set_drawable(self, drawable: Any):
        """Attach a renderable handle."""
        self.drawable = drawable

    def set_light_source(self, light: Any):
        """Attach a light handle following this body."""
        self.light_source = light

    def __repr__(self) -> str:
        return f"AstroBody({self.name!r}, mass={self.mass:.4g}kg, gm={self.gm:.6g})"
