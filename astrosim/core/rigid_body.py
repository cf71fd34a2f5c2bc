"""
Rigid Bodies
============

Free-flying bodies (spacecraft, debris) moving inside the gravity well of
an orbital system.
"""

import numpy as np
from typing import Any, Optional

from .errors import ConfigurationError
from .lwcoord import LargeWorldCoordinate
from ..dynamics.attitude import q_identity, q_normalise


def _inertia_tensor(name: str, inertia) -> np.ndarray:
    try:
        inertia = np.asarray(inertia, dtype=float)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name}: inertia must be numeric") from None
    if inertia.shape != (3, 3) or not np.all(np.isfinite(inertia)):
        raise ConfigurationError(f"{name}: inertia must be a finite 3x3 matrix")
    if np.linalg.matrix_rank(inertia) < 3:
        raise ConfigurationError(f"{name}: inertia tensor is singular")
    return inertia.copy()


class RigidBody:
    """
    Free rigid body with force and torque accumulators.

    The body is owned by the world registry; the orbital system it is
    currently bound to only references it.
    """

    def __init__(self,
                 name: str,
                 mass: float,
                 position: Optional[LargeWorldCoordinate] = None,
                 velocity: np.ndarray = None,
                 quaternion: np.ndarray = None,
                 angular_velocity: np.ndarray = None,
                 inertia: np.ndarray = None):
        """
        Initialize rigid body.

        Args:
            name: Body name
            mass: Mass [kg]
            position: Absolute position
            velocity: Absolute velocity [m/s]
            quaternion: Attitude [w, x, y, z]
            angular_velocity: Angular velocity in body frame [rad/s]
            inertia: 3x3 inertia tensor [kg·m²]
        """
        try:
            mass = float(mass)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name}: mass must be numeric, got {mass!r}") from None
        if not (np.isfinite(mass) and mass > 0.0):
            raise ConfigurationError(f"{name}: rigid body mass must be positive, got {mass}")

        self.name = name
        self.mass = mass
        self.position = position.copy() if position is not None else LargeWorldCoordinate()
        self.velocity = np.zeros(3) if velocity is None else np.asarray(velocity, dtype=float).copy()
        self.quaternion = q_identity() if quaternion is None else q_normalise(quaternion)
        self.angular_velocity = (np.zeros(3) if angular_velocity is None
                                 else np.asarray(angular_velocity, dtype=float).copy())
        self.inertia = np.eye(3) if inertia is None else _inertia_tensor(name, inertia)

        # Accumulated over one tick, cleared by the integrator
        self.force = np.zeros(3)  # N
        self.torque = np.zeros(3)  # Nm

        self.drawable: Optional[Any] = None

    def apply_force(self, force: np.ndarray):
        """Add a force through the centre of mass [N]."""
        self.force += force

    def apply_torque(self, torque: np.ndarray):
        """Add a body-frame torque [Nm]."""
        self.torque += torque

    def clear_forces(self):
        """Reset force and torque accumulators."""
        self.force[:] = 0.0
        self.torque[:] = 0.0

    def global_position(self) -> np.ndarray:
        """Absolute position as a float vector [m]."""
        return self.position.global_position()

    def set_drawable(self, drawable: Any):
        """Attach a renderable handle."""
        self.drawable = drawable

    def __repr__(self) -> str:
        return f"RigidBody({self.name!r}, mass={self.mass:.4g}kg)"
