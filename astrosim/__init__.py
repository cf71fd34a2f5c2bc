"""
astrosim Orbital Engine
=======================

Hierarchical orbital-mechanics engine for planetary-system simulation.

Components:
- Kepler solver (long double Newton-Raphson eccentric anomaly)
- Osculating orbital elements with analytic two-body positions
- Large world coordinates for planetary-scale positions
- Tree of orbital systems stepped parent before children
- Free rigid bodies under restricted two-body gravity
- World loader for solar-system descriptions
"""

__version__ = "1.0.0"

from astrosim.core.astro_body import AstroBody
from astrosim.core.config import CONSTANTS, WorldConfig
from astrosim.core.errors import (
    ConfigurationError,
    ConvergenceWarning,
    DegenerateGeometryError,
    DomainError,
    SimulationError,
)
from astrosim.core.loader import load_world, load_world_file
from astrosim.core.lwcoord import LargeWorldCoordinate
from astrosim.core.rigid_body import RigidBody
from astrosim.core.system import SystemNode
from astrosim.core.time_manager import SimulationTime
from astrosim.core.world import World
from astrosim.dynamics.orbital import OrbitalElements

__all__ = [
    'AstroBody',
    'CONSTANTS',
    'ConfigurationError',
    'ConvergenceWarning',
    'DegenerateGeometryError',
    'DomainError',
    'LargeWorldCoordinate',
    'OrbitalElements',
    'RigidBody',
    'SimulationError',
    'SimulationTime',
    'SystemNode',
    'World',
    'WorldConfig',
    'load_world',
    'load_world_file',
]
