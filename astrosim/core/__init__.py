"""
Simulation Core Module
======================

World, orbital system tree, bodies and supporting types.
"""

from .errors import (
    ConfigurationError,
    ConvergenceWarning,
    DegenerateGeometryError,
    DomainError,
    SimulationError,
)
from .config import CONSTANTS, PhysicsConstants, WorldConfig
from .lwcoord import LargeWorldCoordinate
from .time_manager import SimulationTime
from .astro_body import AstroBody
from .rigid_body import RigidBody
from .system import SystemNode
from .world import World
from .loader import load_world, load_world_file

__all__ = [
    'AstroBody',
    'CONSTANTS',
    'ConfigurationError',
    'ConvergenceWarning',
    'DegenerateGeometryError',
    'DomainError',
    'LargeWorldCoordinate',
    'PhysicsConstants',
    'RigidBody',
    'SimulationError',
    'SimulationTime',
    'SystemNode',
    'World',
    'WorldConfig',
    'load_world',
    'load_world_file',
]
