"""
Dynamics Module
===============

Kepler solver, orbital elements, gravity and integrators.
"""

from .kepler import eccentric_anomaly, mean_motion, orbital_period
from .orbital import (
    OrbitalElements,
    position_at_time,
    velocity_at_time,
    velocity_estimate,
)
from .gravity import GravityAccumulator, compute_gravity
from .integrators import RigidBodyIntegrator

__all__ = [
    'GravityAccumulator',
    'OrbitalElements',
    'RigidBodyIntegrator',
    'compute_gravity',
    'eccentric_anomaly',
    'mean_motion',
    'orbital_period',
    'position_at_time',
    'velocity_at_time',
    'velocity_estimate',
]
